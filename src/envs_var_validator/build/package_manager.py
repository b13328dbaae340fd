"""
Package manager detection and the dependency "add" step.

Detection is a priority list: the first package manager whose marker files
exist in the project root wins, and pip is used when none match.
"""

import logging
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from .exceptions import DependencyInstallError, UnknownPackageManagerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    """A supported package manager and how to add dependencies with it."""
    name: str
    markers: Tuple[str, ...]
    add_command: Tuple[str, ...]
    # False when the add step installs without declaring the dependency
    records_manifest: bool = True

    def is_used_by(self, root: Path) -> bool:
        return any((Path(root) / marker).exists() for marker in self.markers)

    def build_command(self, requirements: Sequence[str]) -> List[str]:
        return list(self.add_command) + list(requirements)


POETRY = PackageManager(name="poetry", markers=("poetry.lock",), add_command=("poetry", "add"))
UV = PackageManager(name="uv", markers=("uv.lock", "uv.toml"), add_command=("uv", "add"))
PIP = PackageManager(
    name="pip",
    markers=(),
    add_command=(sys.executable, "-m", "pip", "install"),
    records_manifest=False
)

# Checked in order; PIP is the fallback.
DETECTION_ORDER: Tuple[PackageManager, ...] = (POETRY, UV)
DEFAULT_PACKAGE_MANAGER = PIP
PACKAGE_MANAGERS = {pm.name: pm for pm in DETECTION_ORDER + (DEFAULT_PACKAGE_MANAGER,)}


def detect_package_manager(root: Path) -> PackageManager:
    """Pick the package manager used by the project at root."""
    for package_manager in DETECTION_ORDER:
        if package_manager.is_used_by(root):
            logger.debug(f"Detected {package_manager.name} from markers {package_manager.markers}")
            return package_manager
    logger.debug(f"No package manager markers found, defaulting to {DEFAULT_PACKAGE_MANAGER.name}")
    return DEFAULT_PACKAGE_MANAGER


def get_package_manager(name: str) -> PackageManager:
    """Resolve a package manager by name."""
    try:
        return PACKAGE_MANAGERS[name.strip().lower()]
    except KeyError:
        raise UnknownPackageManagerError(
            f"Unknown package manager: {name}",
            name=name,
            supported=sorted(PACKAGE_MANAGERS)
        ) from None


class CommandRunner(Protocol):
    """Runs an external command and returns its exit code."""

    def __call__(self, command: List[str], cwd: Path) -> int:
        ...


class InvokeRunner:
    """CommandRunner backed by an invoke Context."""

    def __init__(self, ctx):
        self.ctx = ctx

    def __call__(self, command: List[str], cwd: Path) -> int:
        with self.ctx.cd(str(cwd)):
            result = self.ctx.run(shlex.join(command), warn=True, pty=False)
        return result.exited if result is not None else 1


def install_dependencies(package_manager: PackageManager, requirements: Iterable[str],
                         runner: CommandRunner, cwd: Path) -> Optional[List[str]]:
    """
    Add every requirement with a single package manager invocation.

    Returns:
        The command that was run, or None when there was nothing to add

    Raises:
        DependencyInstallError: If the command exits non-zero
    """
    requirements = list(requirements)
    if not requirements:
        return None

    command = package_manager.build_command(requirements)
    logger.debug(f"Running {command} in {cwd}")
    exit_code = runner(command, Path(cwd))
    if exit_code != 0:
        raise DependencyInstallError(
            f"{package_manager.name} exited with status {exit_code}",
            command=shlex.join(command),
            exit_code=exit_code
        )
    return command
