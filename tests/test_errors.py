import pytest

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
from extool.errors import (
    ConfigurationError,
    ExecutionCancelledError,
    ExecutionFailure,
    ExecutionTimeoutError,
    ExtoolError,
    ObservationFailure,
    ResolutionError,
    SpawnError,
)


@pytest.mark.unit
class TestErrors:
    @pytest.mark.parametrize(
        "error, exit_code",
        [
            (ExtoolError(), EXIT_CODE_FAILURE),
            (ConfigurationError(), EXIT_CODE_INVALID_CONFIGURATION),
            (ResolutionError("tool"), EXIT_CODE_EXECUTABLE_NOT_FOUND),
            (SpawnError("tool"), EXIT_CODE_UNABLE_TO_START),
            (ObservationFailure(), EXIT_CODE_OBSERVATION_FAILED),
            (ExecutionTimeoutError("tool"), EXIT_CODE_TIMEOUT),
            (ExecutionCancelledError("tool"), EXIT_CODE_CANCELLED),
            (ExecutionFailure("tool", "", 1, 0.1), EXIT_CODE_TOOL_FAILED),
        ],
    )
    def test_exit_codes(self, error, exit_code):
        assert isinstance(error, ExtoolError)
        assert error.get_exit_code() == exit_code

    def test_resolution_message(self):
        error = ResolutionError("cmake")

        assert error.executable == "cmake"
        assert str(error).startswith("Unable to resolve path to cmake")

    def test_spawn_message_with_reason(self):
        error = SpawnError("/bin/tool", reason="Permission denied")

        assert str(error) == (
            "Unable to start external tool: \"/bin/tool\"\nDetails: Permission denied"
        )

    def test_timeout_is_builtin_timeout(self):
        error = ExecutionTimeoutError("/bin/tool", "--fast")

        assert isinstance(error, TimeoutError)
        assert str(error) == "Timeout waiting for external tool to finish: \"/bin/tool\" --fast"

    def test_cancelled_message_without_arguments(self):
        error = ExecutionCancelledError("/bin/tool")

        assert str(error) == "External tool execution cancelled: \"/bin/tool\""

    def test_failure_message(self):
        error = ExecutionFailure("/bin/tool", "--token *********", 3, 1.234, "oops")

        assert str(error) == (
            "External tool failure detected! Command: \"/bin/tool\" --token *********; "
            "Exit code: 3; Runtime: 1.23s. Head of output: oops"
        )
