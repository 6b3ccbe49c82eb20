"""Pytest fixtures for the Flux MCP server."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from flux_mcp.config import FluxMcpConfig, FluxToolConfig
from flux_mcp.executor import ExecutionOutcome, Success

FLUX_ENV_VARS = (
    "FLUX_PATH",
    "FLUX_PYTHON",
    "VIRTUAL_ENV",
    "FLUX_MCP_CONFIG",
    "FLUX_MCP_LOG_LEVEL",
    "FLUX_MCP_OBS_ENABLED",
    "FLUX_MCP_OBS_LOG_FORMAT",
    "BFL_API_KEY",
)


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with no Flux env vars set.
    """
    monkeypatch.chdir(tmp_path)
    for name in FLUX_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class FakeExecutor:
    """Records every execute() call and returns a canned outcome."""

    def __init__(self, outcome: ExecutionOutcome | None = None, error: Exception | None = None):
        self.outcome = outcome or Success(stdout="ok\n")
        self.error = error
        self.calls: list[tuple[str, list[str], str]] = []

    async def execute(self, command: str, args: Sequence[str], cwd) -> ExecutionOutcome:
        self.calls.append((command, list(args), str(cwd)))
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def flux_config(tmp_path: Path) -> FluxMcpConfig:
    flux_dir = tmp_path / "flux"
    flux_dir.mkdir()
    return FluxMcpConfig(flux=FluxToolConfig(flux_path=str(flux_dir), python_path="python3"))


@pytest.fixture
def make_executor() -> type[FakeExecutor]:
    """Factory for FakeExecutor, so test modules need not import conftest."""
    return FakeExecutor
