import logging
import os
import shutil
from typing import Optional

from extool.errors import ConfigurationError, ResolutionError

logger = logging.getLogger(__name__)


def resolve_executable(name: str, path: Optional[str] = None) -> str:
    """
    Resolve an executable to an absolute path, using the PATH entries and
    the current directory as potential roots.

    Args:
        name: Absolute or relative path to the executable (e.g. 'git', './build.sh')
        path: Search path overriding the PATH environment variable

    Returns:
        Absolute path to the executable

    Raises:
        ResolutionError: If no candidate exists.
    """
    if not name or not name.strip():
        raise ConfigurationError("Executable path must be specified.")

    if os.path.isabs(name):
        return name

    search_path = path if path is not None else os.environ.get("PATH", "")

    found = shutil.which(name, path=search_path)
    if found:
        logger.debug(f"{name} found on search path: {found}")
        return os.path.abspath(found)

    # The current directory is a valid root, as well.
    candidate = os.path.join(os.getcwd(), name)
    if os.path.isfile(candidate):
        logger.debug(f"{name} found in current directory: {candidate}")
        return os.path.abspath(candidate)

    logger.debug(f"{name} not found on search path or in current directory")
    raise ResolutionError(executable=name)
