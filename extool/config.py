import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from extool.constants import (
    CONFIG_FILE_USER,
    CONFIG_SECTION,
    DEFAULT_ENCODING,
    DEFAULT_TIMEOUT,
    ENV_CONFIG_PATH,
    ENV_DEFAULT_TIMEOUT,
    ENV_ENCODING,
    ENV_LAST_RESORT_TIMEOUT,
    LAST_RESORT_TIMEOUT,
)
from extool.errors import ConfigurationError

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings shared by every tool instance.

    Attributes:
        last_resort_timeout: Seconds to wait for output to be flushed after a
            forced kill, before reporting the timeout or cancellation.
        default_timeout: Seconds the CLI waits for a tool when no timeout is given.
        encoding: Encoding used to decode captured output lines when the tool
            specification does not name one.
    """

    last_resort_timeout: float = LAST_RESORT_TIMEOUT
    default_timeout: float = DEFAULT_TIMEOUT
    encoding: str = DEFAULT_ENCODING


def get_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    environ = os.environ if environ is None else environ
    raw_path = environ.get(ENV_CONFIG_PATH)

    if raw_path:
        return Path(raw_path).expanduser()

    return CONFIG_FILE_USER


def _parse_seconds(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r} is not a number.")

    if value <= 0:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r} must be positive.")

    return value


def load_settings(
    config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Load the settings from the config.ini file and the environment.

    Environment variables take precedence over the file, the file takes
    precedence over the defaults.

    Args:
        config_path: Location of the config.ini file.
        environ: Environment to read overrides from, defaults to os.environ.

    Returns:
        Settings: The loaded settings.
    """
    environ = os.environ if environ is None else environ
    config_path = config_path or get_config_path(environ)

    values = {}

    config = configparser.ConfigParser()
    read_files = config.read(config_path)

    if read_files and config.has_section(CONFIG_SECTION):
        LOG.debug("Reading settings from %s", config_path)
        section = config[CONFIG_SECTION]

        if "last_resort_timeout" in section:
            values["last_resort_timeout"] = _parse_seconds(
                "last_resort_timeout", section["last_resort_timeout"]
            )
        if "default_timeout" in section:
            values["default_timeout"] = _parse_seconds(
                "default_timeout", section["default_timeout"]
            )
        if "encoding" in section:
            values["encoding"] = section["encoding"]

    if ENV_LAST_RESORT_TIMEOUT in environ:
        values["last_resort_timeout"] = _parse_seconds(
            ENV_LAST_RESORT_TIMEOUT, environ[ENV_LAST_RESORT_TIMEOUT]
        )
    if ENV_DEFAULT_TIMEOUT in environ:
        values["default_timeout"] = _parse_seconds(
            ENV_DEFAULT_TIMEOUT, environ[ENV_DEFAULT_TIMEOUT]
        )
    if environ.get(ENV_ENCODING):
        values["encoding"] = environ[ENV_ENCODING]

    return Settings(**values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the process-wide settings, loading them on first use.
    """
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
