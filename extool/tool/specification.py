import asyncio
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    BinaryIO,
    Callable,
    Mapping,
    Optional,
    Sequence,
    Union,
)


if TYPE_CHECKING:
    from .instance import ProcessInstance
    from .result import ToolResult


StreamConsumer = Callable[[BinaryIO], None]


class ProcessPriority(str, Enum):
    """
    Priority class for a started tool.
    """

    IDLE = "idle"
    BELOW_NORMAL = "below_normal"
    NORMAL = "normal"
    ABOVE_NORMAL = "above_normal"
    HIGH = "high"
    REALTIME = "realtime"

    def to_psutil(self) -> int:
        """
        Get the value psutil.Process.nice() expects on the current platform:
        a priority class constant on Windows, a niceness elsewhere.
        """
        if sys.platform == "win32":
            import psutil

            return getattr(psutil, _WINDOWS_PRIORITY_CLASSES[self])

        return _POSIX_NICENESS[self]


_WINDOWS_PRIORITY_CLASSES = {
    ProcessPriority.IDLE: "IDLE_PRIORITY_CLASS",
    ProcessPriority.BELOW_NORMAL: "BELOW_NORMAL_PRIORITY_CLASS",
    ProcessPriority.NORMAL: "NORMAL_PRIORITY_CLASS",
    ProcessPriority.ABOVE_NORMAL: "ABOVE_NORMAL_PRIORITY_CLASS",
    ProcessPriority.HIGH: "HIGH_PRIORITY_CLASS",
    ProcessPriority.REALTIME: "REALTIME_PRIORITY_CLASS",
}

_POSIX_NICENESS = {
    ProcessPriority.IDLE: 19,
    ProcessPriority.BELOW_NORMAL: 10,
    ProcessPriority.NORMAL: 0,
    ProcessPriority.ABOVE_NORMAL: -5,
    ProcessPriority.HIGH: -10,
    ProcessPriority.REALTIME: -20,
}


@dataclass(frozen=True)
class ToolSpecification:
    """
    An external tool (executable, script or other) that can be executed by
    automation when needed.

    Create a specification and call start() for detailed control over the
    process, or execute()/execute_async() to run it and consume the result.

    Attributes:
        executable_path: Absolute or relative path to the executable. Relative
            paths are resolved using the PATH environment variable and the
            current directory.
        arguments: Argument string for the executable.
        environment_variables: Variables added to the inherited environment.
        working_directory: Defaults to the working directory of the current process.
        output_file_path: If set, standard output and standard error lines are
            copied to this file.
        standard_output_consumer: Custom consumer of the raw standard output
            stream, run on a dedicated thread. If set, standard output is not
            captured to string.
        standard_error_consumer: Same as standard_output_consumer, for
            standard error.
        standard_input_provider: Custom provider writing to the standard input
            stream, run on a dedicated thread. The stream is closed afterwards.
        censored_strings: Strings hidden from logged arguments (though not
            from stdout/stderr). Useful for credentials on the command line.
        process_priority: Priority class of the started process.
        capture_output_streams_to_string: Whether to capture stdout/stderr to
            strings. Turn off for large or non-text output. Custom consumers
            override this for their stream.
        encoding: Encoding used to decode output lines. Defaults to the
            encoding from the settings.
    """

    executable_path: str
    arguments: str = ""
    environment_variables: Mapping[str, str] = field(default_factory=dict)
    working_directory: Optional[str] = None
    output_file_path: Optional[str] = None
    standard_output_consumer: Optional[StreamConsumer] = None
    standard_error_consumer: Optional[StreamConsumer] = None
    standard_input_provider: Optional[StreamConsumer] = None
    censored_strings: Sequence[str] = ()
    process_priority: ProcessPriority = ProcessPriority.BELOW_NORMAL
    capture_output_streams_to_string: bool = True
    encoding: Optional[str] = None

    def start(self) -> "ProcessInstance":
        """
        Start a new instance of the tool. Use this for the ability to terminate
        the process or inspect it while running.
        """
        from .main import start

        return start(self)

    def execute(self, timeout: Optional[Union[int, float]]) -> "ToolResult":
        """
        Execute an instance of the tool synchronously and consume the result.
        """
        from .main import execute

        return execute(self, timeout)

    async def execute_async(
        self, cancel: Optional[asyncio.Event] = None
    ) -> "ToolResult":
        """
        Execute an instance of the tool asynchronously and consume the result.
        """
        from .main import execute_async

        return await execute_async(self, cancel)
