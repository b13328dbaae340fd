"""
Copies the envs template module into a host project's source tree.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "run" / "envs.py"


def get_destination(root: Path, source_dir: str = "src", package_dir: str = "envs",
                    filename: str = "__init__.py") -> Path:
    """Path the template is written to inside the host project."""
    return Path(root) / source_dir / package_dir / filename


def materialize_template(root: Path, source_dir: str = "src", package_dir: str = "envs",
                         filename: str = "__init__.py") -> Path:
    """
    Copy the template into the host project, replacing any previous copy.

    Running this repeatedly leaves exactly one identical copy in place.

    Args:
        root: Host project root
        source_dir: Source directory relative to root
        package_dir: Package directory created under source_dir
        filename: Name of the copied module

    Returns:
        Path of the written file
    """
    destination = get_destination(root, source_dir, package_dir, filename)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(TEMPLATE_PATH, destination)
    logger.debug(f"Copied {TEMPLATE_PATH} to {destination}")
    return destination
