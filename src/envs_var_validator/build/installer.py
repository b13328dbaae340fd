"""
Post-install sequence.

Locates the host project, copies the envs template into it and adds any of
our dependencies the host project does not declare yet:

    find root -> copy template -> detect package manager
              -> read manifests -> compute missing -> (skip | add)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .manifest import (
    DISTRIBUTION_NAME,
    Dependency,
    compute_missing,
    declare_dependencies,
    read_host_dependencies,
    read_own_dependencies,
)
from .package_manager import (
    CommandRunner,
    PackageManager,
    detect_package_manager,
    get_package_manager,
    install_dependencies,
)
from .project import DEFAULT_MAX_LEVELS, find_project_root
from .template import materialize_template

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Result of an installer action."""
    name: str
    status: str  # DONE, SKIPPED, FAILED
    details: str


@dataclass
class ReconcileResult:
    """Outcome of dependency reconciliation."""
    package_manager: PackageManager
    declared: List[Dependency]
    missing: List[Dependency]
    command: Optional[List[str]] = None
    recorded: bool = False

    @property
    def satisfied(self) -> bool:
        return not self.missing


@dataclass
class InstallReport:
    """Everything the post-install run did."""
    root: Path
    template_path: Path
    reconcile: ReconcileResult
    actions: List[ActionResult] = field(default_factory=list)


def resolve_package_manager(root: Path, name: Optional[str] = None) -> PackageManager:
    """Use the named package manager, or detect it from the project root."""
    if name:
        return get_package_manager(name)
    return detect_package_manager(root)


def reconcile(root: Path, package_manager: PackageManager, runner: Optional[CommandRunner],
              distribution: str = DISTRIBUTION_NAME, dry_run: bool = False) -> ReconcileResult:
    """
    Add our dependencies that the host project does not declare.

    The package manager is invoked once with the whole missing set, and not at
    all when nothing is missing or dry_run is set. When its add step does not
    edit the manifest (pip), the added requirements are declared in
    pyproject.toml so the next run finds them.
    """
    own = read_own_dependencies(distribution)
    declared = read_host_dependencies(root)
    missing = compute_missing(own, declared)

    for dependency in own:
        if dependency.key in declared:
            logger.info(f"Dependency already exists: {dependency.name}")
    for dependency in missing:
        logger.info(f"Missing dependency: {dependency.requirement}")

    result = ReconcileResult(package_manager=package_manager, declared=own, missing=missing)
    if missing and not dry_run:
        result.command = install_dependencies(
            package_manager,
            [dependency.requirement for dependency in missing],
            runner,
            root
        )
        if package_manager.records_manifest:
            result.recorded = True
        else:
            result.recorded = declare_dependencies(root, missing)
            if not result.recorded:
                logger.warning(
                    f"{package_manager.name} installed the dependencies but did not declare them; "
                    "the next run will install them again"
                )
    return result


def run_install(runner: Optional[CommandRunner], start: Optional[Path] = None,
                source_dir: str = "src", package_dir: str = "envs", filename: str = "__init__.py",
                package_manager: Optional[str] = None, distribution: str = DISTRIBUTION_NAME,
                max_levels: int = DEFAULT_MAX_LEVELS, dry_run: bool = False) -> InstallReport:
    """
    Run the complete post-install sequence.

    Safe to run repeatedly: the template copy is overwritten and dependencies
    already declared by the host are skipped.

    Raises:
        InstallationError: On any failure; nothing is retried
    """
    root = find_project_root(start, max_levels=max_levels)
    template_path = materialize_template(root, source_dir, package_dir, filename)
    manager = resolve_package_manager(root, package_manager)
    logger.info(f"Detected package manager: {manager.name}")

    result = reconcile(root, manager, runner, distribution=distribution, dry_run=dry_run)

    actions = [ActionResult(
        name="envs template",
        status="DONE",
        details=f"Copied to {template_path.relative_to(root)}"
    )]
    if result.satisfied:
        actions.append(ActionResult(
            name="dependencies",
            status="SKIPPED",
            details="All dependencies are already declared by the project"
        ))
    elif dry_run:
        actions.append(ActionResult(
            name="dependencies",
            status="SKIPPED",
            details=f"Dry run, would add: {' '.join(d.requirement for d in result.missing)}"
        ))
    else:
        actions.append(ActionResult(
            name="dependencies",
            status="DONE",
            details=f"Added with {manager.name}: {' '.join(d.requirement for d in result.missing)}"
        ))
        if not manager.records_manifest:
            actions.append(ActionResult(
                name="pyproject.toml",
                status="DONE" if result.recorded else "FAILED",
                details=(
                    "Declared in [project] dependencies" if result.recorded
                    else "Could not declare the dependencies; add them to [project] dependencies by hand"
                )
            ))

    return InstallReport(root=root, template_path=template_path, reconcile=result, actions=actions)
