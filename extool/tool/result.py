from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from extool.constants import CLEAN_EXIT_CODE, FAILURE_DETAILS_MAX_LENGTH
from extool.errors import ExecutionFailure

if TYPE_CHECKING:
    from .instance import ProcessInstance


@dataclass(frozen=True)
class ToolResult:
    """
    The result of executing an instance of an external tool.
    Available once the tool has finished its work.

    Attributes:
        instance: The instance that produced this result.
        standard_output: Captured standard output, empty if a custom consumer
            intercepted the stream or capture was disabled.
        standard_error: Captured standard error, same rules as standard_output.
        exit_code: Exit code of the process.
        duration: Wall-clock runtime in seconds.
    """

    instance: "ProcessInstance" = field(repr=False)
    standard_output: str
    standard_error: str
    exit_code: int
    duration: float

    @property
    def succeeded(self) -> bool:
        return self.exit_code == CLEAN_EXIT_CODE

    def forward_outputs(self) -> None:
        """
        Forward the captured output streams to the instance log.
        """
        log = self.instance.logger

        if self.standard_output.strip():
            log.debug("Captured standard output stream: %s", self.standard_output)

        if self.standard_error.strip():
            log.debug("Captured standard error stream: %s", self.standard_error)

    def verify_success(self) -> None:
        """
        Verify that the tool execution was successful.

        Raises:
            ExecutionFailure: If the exit code is not the clean exit code. The
                head of stderr (or stdout when stderr is blank) is included.
        """
        if self.succeeded:
            return

        details_source = (
            self.standard_error if self.standard_error.strip() else self.standard_output
        )
        details = details_source[:FAILURE_DETAILS_MAX_LENGTH]

        raise ExecutionFailure(
            executable=self.instance.executable_path,
            arguments=self.instance.censored_arguments,
            exit_code=self.exit_code,
            duration=self.duration,
            details=details,
        )

    def consume(self) -> None:
        """
        Forward the outputs and raise if the tool execution failed.
        """
        self.forward_outputs()
        self.verify_success()

        self.instance.logger.debug(f"Finished in {self.duration:.2f}s.")
