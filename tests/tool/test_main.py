import asyncio
import logging
from unittest.mock import patch

import pytest

from extool.errors import (
    ConfigurationError,
    ExecutionCancelledError,
    ExecutionFailure,
    ExecutionTimeoutError,
)
from extool.tool import execute, execute_async, run, run_async, start
from extool.tool.instance import ProcessInstance
from extool.tool.specification import ToolSpecification
from tests.resources import ECHO_ARGUMENTS, EXIT_WITH, PYTHON, python_arguments


def python_tool(code: str, *extra: str) -> ToolSpecification:
    return ToolSpecification(executable_path=PYTHON, arguments=python_arguments(code, *extra))


@pytest.mark.unit
class TestExecuteGuards:
    """
    Checks done before a process is started.
    """

    @pytest.mark.parametrize("timeout", [0, -1, -0.5])
    def test_expired_timeout_does_not_start(self, timeout):
        with patch("extool.tool.main.start") as mock_start:
            with pytest.raises(ExecutionTimeoutError) as exc_info:
                execute(ToolSpecification(PYTHON), timeout)

        mock_start.assert_not_called()
        assert "already timed out" in str(exc_info.value)
        assert isinstance(exc_info.value, TimeoutError)

    @pytest.mark.asyncio
    async def test_pre_cancelled_does_not_start(self):
        cancel = asyncio.Event()
        cancel.set()

        with patch("extool.tool.main.start") as mock_start:
            with pytest.raises(ExecutionCancelledError) as exc_info:
                await execute_async(ToolSpecification(PYTHON), cancel)

        mock_start.assert_not_called()
        assert "already been cancelled" in str(exc_info.value)

    def test_start_logs_censored_command(self, caplog):
        caplog.set_level(logging.DEBUG, logger="extool.tool.main")
        spec = ToolSpecification(
            PYTHON, arguments="--token hunter2", censored_strings=["hunter2"]
        )

        with patch("extool.tool.main.ProcessInstance") as mock_instance:
            assert start(spec) is mock_instance.return_value

        mock_instance.assert_called_once_with(spec)
        messages = [r.getMessage() for r in caplog.records]
        assert f"-> start({PYTHON} --token *********)" in messages
        assert not any("hunter2" in m for m in messages)

    @pytest.mark.parametrize("path", ["", "  "])
    def test_run_requires_executable(self, path):
        with patch("extool.tool.main.start") as mock_start:
            with pytest.raises(ConfigurationError):
                run(path, "--version")

        mock_start.assert_not_called()

    @pytest.mark.asyncio
    async def test_run_async_requires_executable(self):
        with pytest.raises(ConfigurationError):
            await run_async("", "--version")


@pytest.mark.integration
class TestExecute:
    """
    Test suite for the convenience helpers running real processes.
    """

    def test_start_returns_instance(self):
        instance = start(python_tool(ECHO_ARGUMENTS, "hi"))

        assert isinstance(instance, ProcessInstance)
        assert instance.get_result(30).standard_output == "hi\n"

    def test_execute_success(self):
        result = execute(python_tool(ECHO_ARGUMENTS, "hello"), 30)

        assert result.succeeded
        assert result.standard_output == "hello\n"

    def test_execute_without_timeout(self):
        result = execute(python_tool(ECHO_ARGUMENTS, "hello"), None)

        assert result.succeeded

    def test_execute_failure(self):
        with pytest.raises(ExecutionFailure) as exc_info:
            execute(python_tool(EXIT_WITH, "5"), 30)

        assert exc_info.value.exit_code == 5
        assert "something went wrong" in exc_info.value.details

    def test_run(self):
        result = run(PYTHON, python_arguments(ECHO_ARGUMENTS, "quick"), timeout=30)

        assert result.standard_output == "quick\n"

    @pytest.mark.asyncio
    async def test_execute_async(self):
        result = await execute_async(python_tool(ECHO_ARGUMENTS, "async"), asyncio.Event())

        assert result.standard_output == "async\n"

    @pytest.mark.asyncio
    async def test_execute_async_failure(self):
        with pytest.raises(ExecutionFailure):
            await execute_async(python_tool(EXIT_WITH, "2"))

    @pytest.mark.asyncio
    async def test_run_async(self):
        result = await run_async(PYTHON, python_arguments(ECHO_ARGUMENTS, "quick"))

        assert result.standard_output == "quick\n"
