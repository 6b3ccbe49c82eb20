"""Tests for the tool-call dispatcher, using a fake executor."""

import pytest

from flux_mcp.dispatcher import (
    ErrorResponse,
    FluxDispatcher,
    SuccessResponse,
    outcome_to_response,
)
from flux_mcp.errors import InvalidArgumentError, UnknownOperationError
from flux_mcp.executor import EmptyCommandError, ProcessFailure, SpawnFailure, Success


@pytest.mark.asyncio
async def test_success_passes_stdout_verbatim(flux_config, make_executor):
    executor = make_executor(Success(stdout="Saved to generated.jpg\n"))
    dispatcher = FluxDispatcher(flux_config, executor)

    response = await dispatcher.handle_call("generate", {"prompt": "x", "width": 300})

    assert response == SuccessResponse("Saved to generated.jpg\n")
    assert executor.calls == [
        (
            "python3",
            ["fluxcli.py", "generate", "--prompt", "x", "--width", "300"],
            flux_config.flux.flux_path,
        )
    ]


@pytest.mark.asyncio
async def test_process_failure_includes_code_and_stderr(flux_config, make_executor):
    dispatcher = FluxDispatcher(flux_config, make_executor(ProcessFailure(1, "boom")))
    response = await dispatcher.handle_call("generate", {"prompt": "x"})
    assert isinstance(response, ErrorResponse)
    assert response.is_error
    assert "exit code 1" in response.text
    assert "boom" in response.text


@pytest.mark.asyncio
async def test_spawn_failure_is_error_response(flux_config, make_executor):
    executor = make_executor(SpawnFailure("[Errno 2] No such file or directory: 'python3'"))
    response = await FluxDispatcher(flux_config, executor).handle_call(
        "inpaint", {"image": "a.png", "prompt": "p"}
    )
    assert response == ErrorResponse(
        "Error: Failed to spawn Python process: [Errno 2] No such file or directory: 'python3'"
    )


@pytest.mark.asyncio
async def test_unknown_operation_is_protocol_error(flux_config, make_executor):
    executor = make_executor()
    with pytest.raises(UnknownOperationError):
        await FluxDispatcher(flux_config, executor).handle_call("bogus", {})
    assert executor.calls == []


@pytest.mark.asyncio
async def test_invalid_argument_is_protocol_error(flux_config, make_executor):
    executor = make_executor()
    with pytest.raises(InvalidArgumentError, match="width must be at most 2048"):
        await FluxDispatcher(flux_config, executor).handle_call(
            "generate", {"prompt": "x", "width": 4096}
        )
    assert executor.calls == []


@pytest.mark.asyncio
async def test_unexpected_error_becomes_error_response(flux_config, make_executor):
    executor = make_executor(error=RuntimeError("pipe exploded"))
    dispatcher = FluxDispatcher(flux_config, executor)

    response = await dispatcher.handle_call("generate", {"prompt": "x"})
    assert response == ErrorResponse("Error: pipe exploded")

    # The dispatcher keeps serving afterwards
    executor.error = None
    assert await dispatcher.handle_call("generate", {"prompt": "y"}) == SuccessResponse("ok\n")


@pytest.mark.asyncio
async def test_empty_command_contract_violation_surfaces_as_error(flux_config, make_executor):
    executor = make_executor(error=EmptyCommandError("No command arguments provided"))
    response = await FluxDispatcher(flux_config, executor).handle_call("generate", {"prompt": "x"})
    assert response == ErrorResponse("Error: No command arguments provided")


def test_build_call_dry_run(flux_config, make_executor):
    command = FluxDispatcher(flux_config, make_executor()).build_call(
        "control", {"type": "pose", "image": "p.png", "prompt": "dancer", "guidance": 7.5}
    )
    assert command == (
        "control", "--type", "pose", "--image", "p.png", "--prompt", "dancer", "--guidance", "7.5"
    )


def test_outcome_to_response_rejects_unknown_outcome():
    with pytest.raises(TypeError):
        outcome_to_response("done")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_huge_number_is_protocol_error(flux_config, make_executor):
    executor = make_executor()
    with pytest.raises(InvalidArgumentError, match="width must be at most 2048"):
        await FluxDispatcher(flux_config, executor).handle_call(
            "generate", {"prompt": "x", "width": 10**400}
        )
    assert executor.calls == []
