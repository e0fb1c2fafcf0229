from .crash_dialog import CrashDialogGuard
from .instance import ProcessInstance
from .main import execute, execute_async, run, run_async, start
from .resolver import resolve_executable
from .result import ToolResult
from .specification import ProcessPriority, ToolSpecification

__all__ = [
    "CrashDialogGuard",
    "ProcessInstance",
    "ProcessPriority",
    "ToolResult",
    "ToolSpecification",
    "execute",
    "execute_async",
    "resolve_executable",
    "run",
    "run_async",
    "start",
]
