"""
Dependency manifests.

The requirements of the copied envs module are declared as the "envs" extra
of our own distribution and read from its installed metadata; the host
project's declared dependencies come from its pyproject.toml, where both
regular and development dependencies count.
"""

import json
import logging
import re
import tomllib
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ManifestNotFoundError, ManifestParseError
from .project import MANIFEST_FILE

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "envs-var-validator"
TEMPLATE_EXTRA = "envs"
DEPENDENCIES = "dependencies"
DEV_DEPENDENCIES = "devDependencies"

_NAME_PATTERN = re.compile(r"^\s*([A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?)")
_EXTRA_MARKER = re.compile(r"""\bextra\s*==\s*["']([^"']+)["']""")
_PROJECT_TABLE = re.compile(r"^\s*\[project\]\s*(#.*)?$")
_TABLE_HEADER = re.compile(r"^\s*\[")
_DEPENDENCIES_KEY = re.compile(r"^\s*dependencies\s*=\s*\[")


def canonicalize_name(name: str) -> str:
    """Normalize a distribution name (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


@dataclass(frozen=True)
class Dependency:
    """A declared dependency: name, version specifier and category."""
    name: str
    specifier: str = ""
    category: str = DEPENDENCIES
    marker: str = ""
    extra: str = ""

    @property
    def key(self) -> str:
        return canonicalize_name(self.name)

    @property
    def requirement(self) -> str:
        """PEP 508 requirement string handed to the package manager."""
        requirement = f"{self.name}{self.specifier}"
        if self.marker:
            requirement += f"; {self.marker}"
        return requirement

    @classmethod
    def parse(cls, requirement: str, category: str = DEPENDENCIES) -> "Dependency":
        """
        Parse a PEP 508 requirement string.

        An `extra == "<name>"` marker is removed and kept in `extra`; such
        requirements are development dependencies unless the extra is the
        envs module's own.
        """
        spec, _, marker = requirement.partition(";")
        match = _NAME_PATTERN.match(spec)
        if not match:
            raise ValueError(f"Invalid requirement: {requirement!r}")
        marker = marker.strip()
        extra = ""
        extra_match = _EXTRA_MARKER.search(marker)
        if extra_match:
            extra = extra_match.group(1)
            category = DEPENDENCIES if extra == TEMPLATE_EXTRA else DEV_DEPENDENCIES
            marker = ""
        return cls(
            name=match.group(1),
            specifier=spec[match.end():].strip(),
            category=category,
            marker=marker,
            extra=extra
        )


def read_own_dependencies(distribution: str = DISTRIBUTION_NAME, extra: str = TEMPLATE_EXTRA) -> List[Dependency]:
    """
    Read the envs module's requirements from our installed metadata.

    Only requirements guarded by the given extra are returned; the command
    line tooling (invoke, pyyaml) and test extras stay out of host projects.

    Raises:
        ManifestNotFoundError: If the distribution is not installed
    """
    try:
        requires = metadata.requires(distribution)
    except metadata.PackageNotFoundError:
        raise ManifestNotFoundError(
            f"Current package manifest not found: distribution '{distribution}' is not installed"
        ) from None

    dependencies = [
        dependency for dependency in (Dependency.parse(requirement) for requirement in requires or [])
        if dependency.extra == extra
    ]
    logger.debug(f"Read {len(dependencies)} '{extra}' dependencies from {distribution} metadata")
    return dependencies


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ManifestNotFoundError(f"Main {MANIFEST_FILE} not found in {path.parent}", path=path)
    try:
        with open(path, 'rb') as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError(str(e), path=path) from e


def _names_from_requirements(requirements: Iterable[Any]) -> List[str]:
    names = []
    for requirement in requirements:
        # dependency-groups may contain {include-group = "..."} tables
        if isinstance(requirement, str):
            names.append(Dependency.parse(requirement).name)
    return names


def _declared_names(data: Dict[str, Any]) -> Dict[str, str]:
    declared: Dict[str, str] = {}

    def add(names: Iterable[str], category: str):
        for name in names:
            declared.setdefault(canonicalize_name(name), category)

    project = data.get('project', {})
    add(_names_from_requirements(project.get('dependencies', [])), DEPENDENCIES)
    for requirements in project.get('optional-dependencies', {}).values():
        add(_names_from_requirements(requirements), DEV_DEPENDENCIES)
    for requirements in data.get('dependency-groups', {}).values():
        add(_names_from_requirements(requirements), DEV_DEPENDENCIES)

    poetry = data.get('tool', {}).get('poetry', {})
    add((name for name in poetry.get('dependencies', {}) if name != 'python'), DEPENDENCIES)
    add(poetry.get('dev-dependencies', {}), DEV_DEPENDENCIES)
    for group in poetry.get('group', {}).values():
        add(group.get('dependencies', {}), DEV_DEPENDENCIES)

    return declared


def read_host_dependencies(root: Path) -> Dict[str, str]:
    """
    Collect every dependency declared by the host project's pyproject.toml.

    Looks at PEP 621 dependencies and optional-dependencies, PEP 735
    dependency-groups and Poetry's dependency tables.

    Returns:
        Mapping of normalized dependency name to category

    Raises:
        ManifestNotFoundError: If pyproject.toml is missing
        ManifestParseError: If pyproject.toml is not valid TOML
    """
    declared = _declared_names(_load_toml(Path(root) / MANIFEST_FILE))
    logger.debug(f"Host project declares {len(declared)} dependencies")
    return declared


def _insert_project_dependencies(text: str, requirements: List[str]) -> Optional[str]:
    """
    Add requirements to the [project] dependencies array of a pyproject.toml text.

    Returns None when the text has no [project] table.
    """
    lines = text.splitlines(keepends=True)
    start = next((i for i, line in enumerate(lines) if _PROJECT_TABLE.match(line)), None)
    if start is None:
        return None

    end = next((i for i in range(start + 1, len(lines)) if _TABLE_HEADER.match(lines[i])), len(lines))
    items = "".join(f"\n    {json.dumps(requirement)}," for requirement in requirements)

    for i in range(start + 1, end):
        match = _DEPENDENCIES_KEY.match(lines[i])
        if match:
            rest = lines[i][match.end():]
            if not rest.startswith(("\n", "\r\n")):
                rest = "\n" + rest.lstrip(" ")
            lines[i] = lines[i][:match.end()] + items + rest
            return "".join(lines)

    header = lines[start] if lines[start].endswith("\n") else lines[start] + "\n"
    lines[start] = header + f"dependencies = [{items}\n]\n"
    return "".join(lines)


def declare_dependencies(root: Path, dependencies: Iterable[Dependency]) -> bool:
    """
    Record dependencies in the host's [project] dependencies.

    Used for package managers whose add step does not edit the manifest.
    The file is only rewritten when the result parses and declares every
    dependency.

    Returns:
        True if pyproject.toml was updated
    """
    dependencies = list(dependencies)
    path = Path(root) / MANIFEST_FILE
    updated = _insert_project_dependencies(
        path.read_text(encoding='utf-8'),
        [dependency.requirement for dependency in dependencies]
    )
    if updated is None:
        logger.warning(f"No [project] table in {path}; add {', '.join(d.requirement for d in dependencies)} by hand")
        return False

    try:
        declared = _declared_names(tomllib.loads(updated))
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not record dependencies in {path}: {e}")
        return False
    if any(dependency.key not in declared for dependency in dependencies):
        logger.warning(f"Could not record dependencies in {path}; add them to [project] dependencies by hand")
        return False

    path.write_text(updated, encoding='utf-8')
    logger.info(f"Declared {', '.join(d.requirement for d in dependencies)} in {path}")
    return True


def compute_missing(own: Iterable[Dependency], declared: Dict[str, str]) -> List[Dependency]:
    """Dependencies from own that the host does not declare, in order, without duplicates."""
    missing = []
    seen = set(declared)
    for dependency in own:
        if dependency.key in seen:
            continue
        seen.add(dependency.key)
        missing.append(dependency)
    return missing
