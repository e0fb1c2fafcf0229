# -*- coding: utf-8 -*-
from pathlib import Path

DIR_NAME = ".extool"


def get_user_dir() -> Path:
    """
    Get the user directory for the extool configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG_FILE_USER = USER_CONFIG_DIR / CONFIG_FILE_NAME
CONFIG_SECTION = "extool"

# Environment variables that override config.ini values
ENV_CONFIG_PATH = "EXTOOL_CONFIG_PATH"
ENV_LAST_RESORT_TIMEOUT = "EXTOOL_LAST_RESORT_TIMEOUT"
ENV_DEFAULT_TIMEOUT = "EXTOOL_DEFAULT_TIMEOUT"
ENV_ENCODING = "EXTOOL_ENCODING"

# Operations that should complete near-instantly may still hang because of
# operating system quirks. This bounds how long we wait after a forced kill.
LAST_RESORT_TIMEOUT = 5.0

DEFAULT_TIMEOUT = 300.0
DEFAULT_ENCODING = "utf-8"

CENSORED_PLACEHOLDER = "*********"

# Amount of captured output included in failure messages
FAILURE_DETAILS_MAX_LENGTH = 1024

CLEAN_EXIT_CODE = 0

# Windows SetErrorMode flags
SEM_FAILCRITICALERRORS = 0x0001
SEM_NOGPFAULTERRORBOX = 0x0002

# Exit codes
EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_TOOL_FAILED = 64
EXIT_CODE_INVALID_CONFIGURATION = 65
EXIT_CODE_EXECUTABLE_NOT_FOUND = 66
EXIT_CODE_UNABLE_TO_START = 67
EXIT_CODE_TIMEOUT = 68
EXIT_CODE_CANCELLED = 69
EXIT_CODE_OBSERVATION_FAILED = 70

CLI_MAIN_INTRODUCTION = (
    "extool runs external tools with captured output, timeouts and "
    "cancellation."
)
CLI_RUN_HELP = "Run an external tool and report its outputs."
CLI_WHICH_HELP = "Resolve the absolute path of an executable."
CLI_TIMEOUT_HELP = "Seconds to wait for the tool before it is killed."
CLI_CWD_HELP = "Working directory for the tool. Defaults to the current directory."
CLI_ENV_HELP = "Extra environment variable in KEY=VALUE form. Can be repeated."
CLI_OUTPUT_FILE_HELP = "Copy standard output and standard error lines to this file."
CLI_CENSOR_HELP = "Text to hide from logged arguments. Can be repeated."
CLI_PRIORITY_HELP = "Process priority for the started tool."
CLI_CHECK_HELP = "Fail when the tool exits with a non-zero exit code."
CLI_DEBUG_HELP = "Enable debug logging."
CLI_VERSION_HELP = "Show the version and exit."
