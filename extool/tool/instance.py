"""
A started instance of an external tool.

Creating an instance validates the specification, resolves the executable and
spawns the process right away. Three daemon threads observe the process: one
pump per output stream and a result observer that waits for the exit, joins
the pumps and settles the result future exactly once.
"""

import asyncio
import concurrent.futures
import logging
import os
import shlex
import subprocess
import sys
import threading
import time
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

import psutil

from extool.config import Settings, get_settings
from extool.errors import (
    ConfigurationError,
    ExecutionCancelledError,
    ExecutionTimeoutError,
    ObservationFailure,
    SpawnError,
)
from extool.logs_helpers import censor

from .crash_dialog import CrashDialogGuard
from .filesystem import directory_exists
from .pump import InputPump, OutputPump, SharedOutputWriter
from .resolver import resolve_executable
from .result import ToolResult
from .specification import ProcessPriority, ToolSpecification

logger = logging.getLogger(__name__)


def build_command(executable_path: str, arguments: str) -> Union[str, List[str]]:
    """
    Build the command passed to the OS.

    Windows takes the command line as a single string. Elsewhere the argument
    string is split with shell-like syntax into an argv list.
    """
    if sys.platform == "win32":
        return f"\"{executable_path}\" {arguments}".rstrip()

    return [executable_path] + shlex.split(arguments)


class ProcessInstance:
    """
    A started instance of an external tool. May have finished running already.
    """

    def __init__(
        self,
        specification: ToolSpecification,
        crash_guard: Optional[CrashDialogGuard] = None,
        settings: Optional[Settings] = None,
    ):
        if not specification.executable_path or not specification.executable_path.strip():
            raise ConfigurationError("Executable path must be specified.")

        if specification.working_directory is not None and not directory_exists(
            specification.working_directory
        ):
            raise ConfigurationError(
                f"The working directory does not exist: {specification.working_directory}"
            )

        self._short_name = os.path.basename(specification.executable_path)
        self.logger = logger.getChild(self._short_name.replace(".", "_"))

        executable_path = specification.executable_path

        if not os.path.isabs(executable_path):
            resolved_path = resolve_executable(executable_path)
            self.logger.debug(f"{executable_path} resolved to {resolved_path}")
            executable_path = resolved_path

        self.executable_path: str = executable_path
        self.arguments: str = specification.arguments or ""
        self.censored_arguments: str = censor(self.arguments, specification.censored_strings)

        try:
            self._command = build_command(self.executable_path, self.arguments)
        except ValueError as e:
            raise ConfigurationError(f"Invalid argument string: {e}") from e

        self.environment_variables: Mapping[str, str] = MappingProxyType(
            dict(specification.environment_variables or {})
        )
        self.working_directory: str = specification.working_directory or os.getcwd()
        self.output_file_path: Optional[str] = specification.output_file_path
        self.process_priority: ProcessPriority = specification.process_priority
        self.capture_output_streams_to_string: bool = (
            specification.capture_output_streams_to_string
        )
        self._settings = settings or get_settings()
        self.encoding: str = specification.encoding or self._settings.encoding

        self._standard_output_consumer = specification.standard_output_consumer
        self._standard_error_consumer = specification.standard_error_consumer
        self._standard_input_provider = specification.standard_input_provider

        self._crash_guard = crash_guard or CrashDialogGuard()

        # Only the result observer ever settles the future. Marking it as
        # running makes it impossible to cancel from the outside.
        self._result: "concurrent.futures.Future[ToolResult]" = concurrent.futures.Future()
        self._result.set_running_or_notify_cancel()

        self._pumps: List[OutputPump] = []
        self._input_pump: Optional[InputPump] = None
        self._writer: Optional[SharedOutputWriter] = None
        self._stopwatch_started = 0.0

        self._process = self._start()

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def argv(self) -> Union[str, List[str]]:
        """
        The real, uncensored command passed to the OS.
        """
        return self._process.args

    @property
    def is_running(self) -> bool:
        """
        Whether the process is still running. If false, the process has exited
        and the result is (or will shortly be) available.
        """
        try:
            return self._process.poll() is None
        except OSError as e:
            self.logger.error(f"Unable to read process status: {e!r}")
            return False

    @property
    def is_settled(self) -> bool:
        return self._result.done()

    def kill(self) -> None:
        """
        Forcibly terminate the process. Does nothing if it already exited.
        """
        if self._process.returncode is not None:
            return

        try:
            self._process.kill()
        except ProcessLookupError:
            # Exit and kill raced; the process is gone either way.
            pass

    def get_result(self, timeout: Optional[float] = None) -> ToolResult:
        """
        Wait for the tool to exit and retrieve the result.
        If a timeout occurs, the running process is killed.

        Args:
            timeout: Seconds to wait, None to wait without limit.

        Raises:
            ExecutionTimeoutError: If the tool did not finish in time.
            ObservationFailure: If the output could not be observed.
        """
        try:
            return self._result.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            pass

        self.logger.debug("Terminating due to timeout.")
        self.kill()

        # Give the observer a chance to flush all output to the file.
        concurrent.futures.wait(
            [self._result], timeout=self._settings.last_resort_timeout
        )

        raise ExecutionTimeoutError(
            executable=self.executable_path, arguments=self.censored_arguments
        )

    async def get_result_async(
        self, cancel: Optional[asyncio.Event] = None
    ) -> ToolResult:
        """
        Wait for the tool to exit and retrieve the result without blocking the
        event loop. If the cancel event is set, the running process is killed.

        Cancelling the awaiting task also kills the process; the task
        cancellation is then propagated as usual.

        Raises:
            ExecutionCancelledError: If the cancel event was set first.
            ObservationFailure: If the output could not be observed.
        """
        result = asyncio.wrap_future(self._result)

        if cancel is not None and cancel.is_set():
            await self._terminate_and_wait(result, "cancellation")
            raise ExecutionCancelledError(
                executable=self.executable_path, arguments=self.censored_arguments
            )

        if cancel is None:
            try:
                return await asyncio.shield(result)
            except asyncio.CancelledError:
                await self._terminate_and_wait(result, "task cancellation")
                raise

        cancelled = asyncio.ensure_future(cancel.wait())

        try:
            await asyncio.wait(
                {result, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            await self._terminate_and_wait(result, "task cancellation")
            raise
        finally:
            cancelled.cancel()

        if result.done():
            return result.result()

        await self._terminate_and_wait(result, "cancellation")
        raise ExecutionCancelledError(
            executable=self.executable_path, arguments=self.censored_arguments
        )

    async def _terminate_and_wait(self, result: "asyncio.Future[ToolResult]", reason: str) -> None:
        self.logger.debug(f"Terminating due to {reason}.")
        self.kill()

        # We only wait for the process to finish so that all output gets
        # written to file. Whether it succeeded does not matter here.
        try:
            await asyncio.wait({result}, timeout=self._settings.last_resort_timeout)
        except Exception as e:
            self.logger.debug(f"Last resort wait failed: {e!r}")

    def _start(self) -> subprocess.Popen:
        self.logger.debug(f"Executing: {self.executable_path} {self.censored_arguments}")

        # Both stderr and stdout lines go to the output file. Callers needing
        # to tell them apart should consume the streams themselves.
        self._writer = self._create_output_file_writer()

        try:
            process = self._spawn()
        except Exception:
            if self._writer is not None:
                self._writer.close()
            raise

        self.logger.debug("Process started.")

        self._apply_priority(process)

        try:
            self._start_pumps(process)
        except Exception:
            process.kill()
            if self._writer is not None:
                self._writer.close()
            raise

        return process

    def _spawn(self) -> subprocess.Popen:
        env = os.environ.copy()
        env.update(self.environment_variables)

        kwargs = {
            "stdout": subprocess.PIPE,
            "stderr": subprocess.PIPE,
            "stdin": subprocess.PIPE if self._standard_input_provider else None,
            "cwd": self.working_directory,
            "env": env,
            "shell": False,
        }

        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        self._stopwatch_started = time.monotonic()

        try:
            with self._crash_guard:
                return subprocess.Popen(self._command, **kwargs)
        except OSError as e:
            raise SpawnError(executable=self.executable_path, reason=str(e)) from e

    def _apply_priority(self, process: subprocess.Popen) -> None:
        try:
            psutil.Process(process.pid).nice(self.process_priority.to_psutil())
        except psutil.NoSuchProcess:
            # The process already exited. This is fine.
            pass
        except psutil.AccessDenied as e:
            self.logger.warning(
                f"Unable to set priority {self.process_priority.value}: {e!r}"
            )

    def _start_pumps(self, process: subprocess.Popen) -> None:
        self._pumps = [
            OutputPump(
                f"{self._short_name} stdout reader",
                process.stdout,
                consumer=self._standard_output_consumer,
                capture=self.capture_output_streams_to_string,
                writer=self._writer,
                encoding=self.encoding,
                log=self.logger,
            ),
            OutputPump(
                f"{self._short_name} stderr reader",
                process.stderr,
                consumer=self._standard_error_consumer,
                capture=self.capture_output_streams_to_string,
                writer=self._writer,
                encoding=self.encoding,
                log=self.logger,
            ),
        ]

        for pump in self._pumps:
            pump.start()

        if self._standard_input_provider is not None:
            self._input_pump = InputPump(
                f"{self._short_name} stdin provider",
                process.stdin,
                self._standard_input_provider,
                log=self.logger,
            )
            self._input_pump.start()

        threading.Thread(
            target=self._observe,
            args=(process,),
            name=f"{self._short_name} result observer",
            daemon=True,
        ).start()

    def _observe(self, process: subprocess.Popen) -> None:
        try:
            result = self._collect_result(process)
        except Exception as e:
            self.logger.error(
                f"Failed to observe results. Process may remain running unobserved. {e!r}"
            )

            if isinstance(e, ObservationFailure):
                failure = e
            else:
                failure = ObservationFailure(
                    f"Failed to observe the results of \"{self.executable_path}\": {e!r}"
                )
                failure.__cause__ = e

            self._result.set_exception(failure)
        else:
            self._result.set_result(result)

    def _collect_result(self, process: subprocess.Popen) -> ToolResult:
        try:
            exit_code = process.wait()
            duration = time.monotonic() - self._stopwatch_started
            self.logger.debug("Process exited.")

            # Streams may stay open after the process exits, e.g. when it left
            # a grandchild behind that inherited the pipes.
            for pump in self._pumps:
                pump.join()

            for pump in self._pumps:
                if pump.error is not None:
                    raise ObservationFailure(
                        f"Failed to observe {pump.name} of \"{self.executable_path}\": "
                        f"{pump.error!r}"
                    ) from pump.error
        finally:
            if self._writer is not None:
                self._writer.close()

        stdout, stderr = (pump.text for pump in self._pumps)

        return ToolResult(
            instance=self,
            standard_output=stdout,
            standard_error=stderr,
            exit_code=exit_code,
            duration=duration,
        )

    def _create_output_file_writer(self) -> Optional[SharedOutputWriter]:
        if not self.output_file_path or not self.output_file_path.strip():
            return None

        return SharedOutputWriter(self.output_file_path, encoding=self.encoding)

    def __repr__(self) -> str:
        return (
            f"<ProcessInstance {self.executable_path!r} {self.censored_arguments!r} "
            f"running={self.is_running}>"
        )
