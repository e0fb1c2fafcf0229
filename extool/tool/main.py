import asyncio
import logging
from typing import Optional, Union

from extool.errors import (
    ConfigurationError,
    ExecutionCancelledError,
    ExecutionTimeoutError,
)
from extool.logs_helpers import log_tool_call

from .instance import ProcessInstance
from .result import ToolResult
from .specification import ToolSpecification

logger = logging.getLogger(__name__)


@log_tool_call
def start(specification: ToolSpecification) -> ProcessInstance:
    """
    Start a new instance of an external tool. Returns without waiting for the
    process to exit.

    Raises:
        ConfigurationError: Missing executable path or missing working directory.
        ResolutionError: The executable could not be found.
        SpawnError: The operating system refused to start the process.
    """
    return ProcessInstance(specification)


@log_tool_call
def execute(
    specification: ToolSpecification, timeout: Optional[Union[int, float]]
) -> ToolResult:
    """
    Synchronously execute an instance of the tool and consume the result.

    Args:
        specification: What to run.
        timeout: Seconds to wait for the tool, None to wait without limit.

    Returns:
        ToolResult: The consumed result of a successful execution.
    """
    if timeout is not None and timeout <= 0:
        raise ExecutionTimeoutError(
            message="The external tool could not be executed because the "
            "operation had already timed out: \"{executable}\" {arguments}",
            executable=specification.executable_path,
        )

    instance = start(specification)
    result = instance.get_result(timeout)

    result.consume()

    return result


@log_tool_call
async def execute_async(
    specification: ToolSpecification, cancel: Optional[asyncio.Event] = None
) -> ToolResult:
    """
    Asynchronously execute an instance of the tool and consume the result.
    """
    if cancel is not None and cancel.is_set():
        raise ExecutionCancelledError(
            message="The external tool could not be executed because the "
            "operation had already been cancelled: \"{executable}\" {arguments}",
            executable=specification.executable_path,
        )

    instance = start(specification)
    result = await instance.get_result_async(cancel)

    result.consume()

    return result


def _quick_specification(executable_path: str, arguments: str) -> ToolSpecification:
    if not executable_path or not executable_path.strip():
        raise ConfigurationError("Executable path must be specified.")

    return ToolSpecification(executable_path=executable_path, arguments=arguments)


def run(
    executable_path: str, arguments: str = "", timeout: Optional[Union[int, float]] = None
) -> ToolResult:
    """
    Quickly execute a command with arguments and consume the result.
    """
    return execute(_quick_specification(executable_path, arguments), timeout)


async def run_async(
    executable_path: str, arguments: str = "", cancel: Optional[asyncio.Event] = None
) -> ToolResult:
    """
    Quickly execute a command with arguments asynchronously and consume the result.
    """
    return await execute_async(_quick_specification(executable_path, arguments), cancel)
