"""
Exception classes with built-in guidance for the installer.
"""
import sys
from pathlib import Path
from typing import List, Optional


class InstallationError(Exception):
    """Base exception for all installation errors."""
    exit_code = 1

    def __init__(self, message: str, error_type: str = None, path: Optional[Path] = None):
        super().__init__(message)
        self.error_type = error_type
        self.path = path
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            executable = sys.argv[0].split('/')[-1]
            args = sys.argv[1:]
            if args:
                return f"{executable} {' '.join(args)}"
            return executable
        return "unknown command"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ Installation error: {self}
💡 Check your project layout and try again
"""


class ProjectRootNotFoundError(InstallationError):
    """Raised when no ancestor directory looks like a project root."""
    def __init__(self, message: str, start: Path, markers: List[str] = None, **kwargs):
        self.start = start
        self.markers = markers or []
        super().__init__(message, error_type="project_root_not_found", path=start, **kwargs)

    def _generate_guidance(self):
        command = self._get_current_command()
        return f"""
❌ Project root not found (searched upward from {self.start})
💡 A project root must contain all of: {', '.join(self.markers) or 'a manifest, a virtualenv and a lockfile'}
   1. Change into your project directory and run: {command}
   2. Or point at it explicitly: envs-var-validator install --start=<project-dir>
"""


class ManifestNotFoundError(InstallationError):
    """Raised when a manifest needed for dependency reconciliation is missing."""
    def __init__(self, message: str, path: Optional[Path] = None, **kwargs):
        super().__init__(message, error_type="manifest_not_found", path=path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Manifest not found: {self}
💡 Dependencies cannot be reconciled without a manifest:
   1. Make sure pyproject.toml exists in the project root
   2. Make sure envs-var-validator is installed in the active environment: pip show envs-var-validator
"""


class ManifestParseError(InstallationError):
    """Raised when a manifest exists but cannot be parsed."""
    def __init__(self, message: str, path: Optional[Path] = None, **kwargs):
        super().__init__(message, error_type="manifest_parse_error", path=path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Could not parse manifest {self.path}: {self}
💡 Fix the TOML syntax in {self.path} and run the installer again
"""


class UnknownPackageManagerError(InstallationError):
    """Raised when the requested package manager is not supported."""
    def __init__(self, message: str, name: str, supported: List[str] = None, **kwargs):
        self.name = name
        self.supported = supported or []
        super().__init__(message, error_type="unknown_package_manager", **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Unknown package manager: {self.name}
💡 Use one of: {', '.join(self.supported)}
   Or omit --package-manager to detect it from the lockfiles in the project root
"""


class DependencyInstallError(InstallationError):
    """Raised when the package manager's add command fails."""
    def __init__(self, message: str, command: str, exit_code: int = 1, **kwargs):
        self.command = command
        self.exit_code = exit_code or 1
        super().__init__(message, error_type="dependency_install_failed", **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Dependency installation failed (exit code {self.exit_code})
💡 The command was: {self.command}
   Fix the reported problem (network, index, version conflict) and run it again
"""
