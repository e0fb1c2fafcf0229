"""
Background readers and writers for the standard streams of a child process.

Each stream is pumped on its own daemon thread. Output lines from stdout and
stderr can be copied into one shared file; lines from the same stream keep
their order in the file, lines from different streams may interleave.
"""

import logging
import threading
from typing import BinaryIO, List, Optional

from extool.constants import DEFAULT_ENCODING

from .filesystem import ensure_parent_directory
from .specification import StreamConsumer

logger = logging.getLogger(__name__)


class SharedOutputWriter:
    """
    Line writer for the combined output file. Safe to share between pumps.
    """

    def __init__(self, path: str, encoding: str = DEFAULT_ENCODING):
        ensure_parent_directory(path)

        self.path = path
        self._lock = threading.Lock()
        self._file = open(path, "w", encoding=encoding)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write_line(self, line: str) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.write(line + "\n")

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()


class OutputPump:
    """
    Drains one output stream of a child process.

    With a consumer, the consumer receives the raw byte stream. Otherwise the
    stream is read line by line until end of stream; lines are accumulated in
    memory when capture is enabled and copied to the shared writer if set.
    """

    def __init__(
        self,
        name: str,
        stream: BinaryIO,
        consumer: Optional[StreamConsumer] = None,
        capture: bool = True,
        writer: Optional[SharedOutputWriter] = None,
        encoding: str = DEFAULT_ENCODING,
        log: Optional[logging.Logger] = None,
    ):
        self.name = name
        self._stream = stream
        self._consumer = consumer
        self._capture = capture
        self._writer = writer
        self._encoding = encoding
        self._log = log or logger

        self._lines: List[str] = []
        self.error: Optional[BaseException] = None

        target = self._consume if consumer is not None else self._read_lines
        thread_name = f"{name} (custom)" if consumer is not None else name
        self._thread = threading.Thread(target=target, name=thread_name, daemon=True)

    @property
    def is_custom(self) -> bool:
        return self._consumer is not None

    @property
    def text(self) -> str:
        """
        Captured text, one newline-terminated entry per line read.
        Empty if a custom consumer intercepted the stream.
        """
        return "".join(self._lines)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _consume(self) -> None:
        assert self._consumer is not None

        try:
            self._consumer(self._stream)
        except Exception as e:
            self._log.error(f"Caller-provided {self.name} consumer crashed! {e!r}")
            self.error = e
            self._stream.close()

    def _read_lines(self) -> None:
        try:
            for raw in iter(self._stream.readline, b""):
                line = raw.decode(self._encoding, errors="replace").rstrip("\r\n")

                if self._capture:
                    self._lines.append(line + "\n")

                if self._writer is not None:
                    self._writer.write_line(line)
        except Exception as e:
            self._log.error(f"Failed to read {self.name}: {e!r}")
            self.error = e
        finally:
            self._stream.close()


class InputPump:
    """
    Runs a caller-provided standard input provider on a dedicated thread.

    The input stream is always closed after the provider returns; a child
    waiting for end of input would otherwise hang forever.
    """

    def __init__(
        self,
        name: str,
        stream: BinaryIO,
        provider: StreamConsumer,
        log: Optional[logging.Logger] = None,
    ):
        self.name = name
        self._stream = stream
        self._provider = provider
        self._log = log or logger
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._provide, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def _provide(self) -> None:
        try:
            with self._stream:
                self._provider(self._stream)
        except BrokenPipeError:
            # The child exited or closed its input before reading everything.
            self._log.debug(f"{self.name}: child stopped reading standard input.")
        except Exception as e:
            self._log.error(f"Caller-provided {self.name} crashed! {e!r}")
            self.error = e
