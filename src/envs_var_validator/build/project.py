"""
Project root discovery.

A project root is the first directory, walking up from the starting point,
that holds a manifest, a virtualenv directory and at least one lockfile.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from .exceptions import ProjectRootNotFoundError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "pyproject.toml"
DEPENDENCY_DIRS: Tuple[str, ...] = (".venv", "venv")
LOCKFILES: Tuple[str, ...] = ("poetry.lock", "uv.lock", "pylock.toml", "requirements.txt")
DEFAULT_MAX_LEVELS = 32


def is_project_root(directory: Path) -> bool:
    """Check whether a directory has every project root marker."""
    if not (directory / MANIFEST_FILE).is_file():
        return False
    if not any((directory / name).is_dir() for name in DEPENDENCY_DIRS):
        return False
    return any((directory / name).is_file() for name in LOCKFILES)


def find_project_root(start: Optional[Path] = None, max_levels: int = DEFAULT_MAX_LEVELS) -> Path:
    """
    Search upward for the project root.

    Args:
        start: Directory to start from (defaults to the current working directory)
        max_levels: Maximum number of parent directories to climb

    Returns:
        The first directory that satisfies is_project_root()

    Raises:
        ProjectRootNotFoundError: If the filesystem root or max_levels is reached first
    """
    start = Path(start or Path.cwd()).resolve()
    current = start

    for level in range(max_levels + 1):
        logger.debug(f"Checking for project root at {current}")
        if is_project_root(current):
            logger.debug(f"Project root found at {current} ({level} levels up)")
            return current
        if current.parent == current:
            break
        current = current.parent

    markers = [MANIFEST_FILE, f"one of {'/'.join(DEPENDENCY_DIRS)}", f"one of {', '.join(LOCKFILES)}"]
    raise ProjectRootNotFoundError(
        f"project root not found from {start}",
        start=start,
        markers=markers
    )
