import os
from typing import Optional


def directory_exists(path: Optional[str]) -> bool:
    return bool(path) and os.path.isdir(path)  # type: ignore[arg-type]


def ensure_parent_directory(file_path: str) -> None:
    """
    Make sure the file can be created, creating its parent directory if needed.
    A relative path with no parent needs nothing.

    Args:
        file_path: Path of the file about to be created.
    """
    parent = os.path.dirname(file_path)

    if parent and parent.strip():
        os.makedirs(parent, exist_ok=True)
