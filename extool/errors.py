from typing import Optional

from extool.constants import (
    EXIT_CODE_CANCELLED,
    EXIT_CODE_EXECUTABLE_NOT_FOUND,
    EXIT_CODE_FAILURE,
    EXIT_CODE_INVALID_CONFIGURATION,
    EXIT_CODE_OBSERVATION_FAILED,
    EXIT_CODE_TIMEOUT,
    EXIT_CODE_TOOL_FAILED,
    EXIT_CODE_UNABLE_TO_START,
)


class ExtoolError(Exception):
    """
    Base class for extool errors.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred while running an external tool."):
        self.message = message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class ConfigurationError(ExtoolError):
    """
    Error raised when a tool specification or the settings are invalid.
    Detected before any process is started.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "Invalid external tool configuration."):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_INVALID_CONFIGURATION


class ResolutionError(ExtoolError):
    """
    Error raised when an executable cannot be located.

    Args:
        executable (str): The executable that was looked up.
        message (str): The error message template.
    """
    def __init__(self, executable: str = "",
                 message: str = "Unable to resolve path to {executable}\n"
                                "Check that the executable exists and that its directory is on PATH."):
        self.executable = executable
        super().__init__(message.format(executable=executable))

    def get_exit_code(self) -> int:
        return EXIT_CODE_EXECUTABLE_NOT_FOUND


class SpawnError(ExtoolError):
    """
    Error raised when the operating system refuses to start the process.

    Args:
        executable (str): The executable that failed to start.
        reason (Optional[str]): The reason for the error.
    """
    def __init__(self, executable: str = "", reason: Optional[str] = None):
        self.executable = executable
        message = f"Unable to start external tool: \"{executable}\""
        if reason:
            message += f"\nDetails: {reason}"
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_UNABLE_TO_START


class ObservationFailure(ExtoolError):
    """
    Error raised when the output of a running tool could not be observed.
    Every waiter of the tool result receives this error.
    """
    def __init__(self, message: str = "Failed to observe the results of an external tool.\n"
                                      "The process may remain running unobserved."):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_OBSERVATION_FAILED


class ExecutionTimeoutError(ExtoolError, TimeoutError):
    """
    Error raised when a tool did not finish in time and had to be killed.

    Args:
        executable (str): The executable path.
        arguments (str): The arguments, censored.
    """
    def __init__(self, executable: str = "", arguments: str = "",
                 message: str = "Timeout waiting for external tool to finish: \"{executable}\" {arguments}"):
        self.executable = executable
        self.arguments = arguments
        super().__init__(message.format(executable=executable, arguments=arguments).rstrip())

    def get_exit_code(self) -> int:
        return EXIT_CODE_TIMEOUT


class ExecutionCancelledError(ExtoolError):
    """
    Error raised when waiting for a tool was cancelled and the tool was killed.

    Args:
        executable (str): The executable path.
        arguments (str): The arguments, censored.
    """
    def __init__(self, executable: str = "", arguments: str = "",
                 message: str = "External tool execution cancelled: \"{executable}\" {arguments}"):
        self.executable = executable
        self.arguments = arguments
        super().__init__(message.format(executable=executable, arguments=arguments).rstrip())

    def get_exit_code(self) -> int:
        return EXIT_CODE_CANCELLED


class ExecutionFailure(ExtoolError):
    """
    Error raised on demand when a finished tool reported a failure.

    Args:
        executable (str): The executable path.
        arguments (str): The arguments, censored.
        exit_code (int): The exit code of the tool.
        duration (float): The runtime in seconds.
        details (str): Head of the captured output.
    """
    def __init__(self, executable: str, arguments: str, exit_code: int,
                 duration: float, details: str = ""):
        self.executable = executable
        self.arguments = arguments
        self.exit_code = exit_code
        self.duration = duration
        self.details = details
        message = (
            f"External tool failure detected! Command: \"{executable}\" {arguments}; "
            f"Exit code: {exit_code}; Runtime: {duration:.2f}s. Head of output: {details}"
        )
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_TOOL_FAILED
