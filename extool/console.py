import logging
import os
import sys
from functools import lru_cache
from typing import Any, Dict

from rich.console import Console
from rich.theme import Theme

LOG = logging.getLogger(__name__)


@lru_cache()
def should_use_ascii():
    """
    Check if we should avoid non-ASCII decorations in the output
    """
    encoding = getattr(sys.stdout, "encoding", "").lower()

    if encoding in {"utf-8", "utf8", "cp65001", "utf-8-sig"}:
        return False

    return True


EXTOOL_THEME = {
    "tool_path": "bold default on default",
    "succeeded": "bold green on default",
    "failed": "bold red on default",
    "number": "bold cyan on default",
}


non_interactive = os.getenv("NON_INTERACTIVE") == "1"

console_kwargs: Dict[str, Any] = {
    "theme": Theme(EXTOOL_THEME, inherit=False),
    "emoji": not should_use_ascii(),
}

if non_interactive:
    LOG.info(
        "NON_INTERACTIVE environment variable is set, forcing non-interactive mode"
    )
    console_kwargs["force_terminal"] = True
    console_kwargs["force_interactive"] = False

main_console = Console(**console_kwargs)
error_console = Console(stderr=True, **console_kwargs)
