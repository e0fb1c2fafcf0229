import functools
import inspect
import logging
from typing import Iterable, Optional

from extool.constants import CENSORED_PLACEHOLDER


def censor(arguments: str, censored_strings: Optional[Iterable[str]]) -> str:
    """
    Replace every non-blank censored string in the arguments with a placeholder.
    """
    censored = arguments

    for censored_string in censored_strings or ():
        if not censored_string or not censored_string.strip():
            continue

        censored = censored.replace(censored_string, CENSORED_PLACEHOLDER)

    return censored


def describe_command(specification) -> str:
    """
    The command line of a tool specification as it may appear in logs.
    """
    arguments = censor(specification.arguments or "", specification.censored_strings)
    return f"{specification.executable_path} {arguments}".rstrip()


def log_tool_call(func):
    """
    Log entry, exit and failure of a function whose first argument is a
    ToolSpecification. Only the censored command line is logged.

    Works for plain functions and coroutine functions.
    """
    logger = logging.getLogger(func.__module__)

    def enter(specification) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("-> %s(%s)", func.__name__, describe_command(specification))

    def leave() -> None:
        logger.debug("<- %s", func.__name__)

    def fail(specification, e: Exception) -> None:
        logger.error(
            "✗ %s(%s) failed: %s", func.__name__, describe_command(specification), e
        )

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(specification, *args, **kwargs):
            enter(specification)
            try:
                result = await func(specification, *args, **kwargs)
            except Exception as e:
                fail(specification, e)
                raise
            leave()
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(specification, *args, **kwargs):
        enter(specification)
        try:
            result = func(specification, *args, **kwargs)
        except Exception as e:
            fail(specification, e)
            raise
        leave()
        return result

    return wrapper
