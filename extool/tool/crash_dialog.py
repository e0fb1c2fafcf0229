import logging
import sys
import threading
from typing import Optional

from extool.constants import SEM_FAILCRITICALERRORS, SEM_NOGPFAULTERRORBOX

logger = logging.getLogger(__name__)

# Only one thread may touch the process error mode at a time.
ERROR_MODE_LOCK = threading.Lock()


def is_windows() -> bool:
    return sys.platform == "win32"


class CrashDialogGuard:
    """
    Suppresses Windows error reporting dialogs that would block on a crashing
    child process.

    While the guard is held, the error mode of the current process includes the
    "fail silently" flags, and any process started meanwhile inherits them.
    Hold it only around the spawn call. The guard also acts as a mutex, so
    concurrent spawns are serialized for the duration of the spawn call.

    On operating systems other than Windows the guard does nothing.
    """

    def __init__(self, lock: Optional[threading.Lock] = None):
        self._lock = lock if lock is not None else ERROR_MODE_LOCK
        self._previous_error_mode: Optional[int] = None

    def __enter__(self) -> "CrashDialogGuard":
        if not is_windows():
            return self

        self._lock.acquire()

        try:
            kernel32 = self._kernel32()
            # Keep any default flags the OS gives us and add our own.
            previous = kernel32.GetErrorMode()
            kernel32.SetErrorMode(
                previous | SEM_FAILCRITICALERRORS | SEM_NOGPFAULTERRORBOX
            )
        except BaseException:
            self._lock.release()
            raise

        self._previous_error_mode = previous
        return self

    def __exit__(self, *exc) -> None:
        if not is_windows():
            return

        # Can only be released once.
        if self._previous_error_mode is None:
            return

        try:
            self._kernel32().SetErrorMode(self._previous_error_mode)
        finally:
            self._previous_error_mode = None
            self._lock.release()

    @staticmethod
    def _kernel32():
        import ctypes

        return ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
