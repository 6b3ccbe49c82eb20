"""
Process executor for the Flux MCP server.

Runs one external program per call and reports how it ended:
- Success: exit code 0, carries stdout
- ProcessFailure: nonzero exit, carries exit code and stderr
- SpawnFailure: the program could not be started

The child inherits the server's environment unchanged, so credentials such
as BFL_API_KEY stay visible to it. There is no timeout. Cancelling the
awaiting task kills the child.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger("flux-mcp.executor")


class EmptyCommandError(ValueError):
    """Raised when execute() is called without any arguments."""


@dataclass(frozen=True)
class Success:
    stdout: str


@dataclass(frozen=True)
class ProcessFailure:
    exit_code: int
    stderr: str


@dataclass(frozen=True)
class SpawnFailure:
    reason: str


ExecutionOutcome = Success | ProcessFailure | SpawnFailure


class ProcessExecutor(Protocol):
    """Anything that can run a command and report an ExecutionOutcome."""

    async def execute(
        self, command: str, args: Sequence[str], cwd: Path | str
    ) -> ExecutionOutcome: ...


class SubprocessExecutor:
    """ProcessExecutor backed by asyncio subprocesses."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def execute(
        self, command: str, args: Sequence[str], cwd: Path | str
    ) -> ExecutionOutcome:
        """
        Run command with args in cwd and wait for it to exit.

        Args:
            command: Executable to run (looked up on PATH if not a path)
            args: Arguments passed after the executable; must not be empty
            cwd: Working directory for the child

        Returns:
            Success, ProcessFailure or SpawnFailure

        Raises:
            EmptyCommandError: args is empty
        """
        if not args:
            raise EmptyCommandError("No command arguments provided")

        argv = [str(a) for a in args]
        logger.debug(f"Spawning {command} {' '.join(argv)} (cwd={cwd})")

        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
                env=os.environ.copy(),
            )
        except OSError as e:
            logger.warning(f"Failed to spawn {command}: {e}")
            return SpawnFailure(reason=str(e))

        try:
            stdout_b, stderr_b = await proc.communicate()
        except asyncio.CancelledError:
            logger.info(f"Call cancelled, killing pid {proc.pid}")
            await _kill(proc)
            raise

        stdout = stdout_b.decode(self.encoding, errors="replace")
        stderr = stderr_b.decode(self.encoding, errors="replace")

        if proc.returncode == 0:
            return Success(stdout=stdout)

        logger.debug(f"{command} exited with code {proc.returncode}")
        return ProcessFailure(exit_code=proc.returncode, stderr=stderr)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
