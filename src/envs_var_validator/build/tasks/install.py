"""
Post-install tasks.

install copies the envs template into the host project and adds any missing
dependencies; copy-template and check-deps run the individual steps.
"""

import sys
import logging
from pathlib import Path

import yaml
from invoke import task

from . import get_settings, setup_logging
from ..exceptions import InstallationError
from ..installer import reconcile, resolve_package_manager, run_install
from ..package_manager import InvokeRunner
from ..project import find_project_root
from ..template import materialize_template

logger = logging.getLogger(__name__)

STATUS_ICONS = {'DONE': '✅', 'SKIPPED': '⏭️ ', 'FAILED': '❌'}


@task(help={
    'start': 'Directory to start searching for the project root (default: current directory)',
    'package_manager': 'Force a package manager (poetry, uv, pip) instead of detecting it',
    'dry_run': 'Report missing dependencies without installing them',
    'debug': 'Enable debug logging'
})
def install(ctx, start=None, package_manager=None, dry_run=False, debug=False):
    """
    Copy the envs module into the project and add its missing dependencies.
    """
    setup_logging(debug)
    settings = get_settings(ctx)

    try:
        report = run_install(
            InvokeRunner(ctx),
            start=Path(start) if start else None,
            source_dir=settings['source_dir'],
            package_dir=settings['package_dir'],
            filename=settings['filename'],
            package_manager=package_manager or settings['package_manager'],
            distribution=settings['distribution'],
            max_levels=int(settings['max_levels']),
            dry_run=dry_run
        )
    except InstallationError as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(e.exit_code)

    print(f"📁 Project root: {report.root}")
    print(f"📦 Package manager: {report.reconcile.package_manager.name}")
    for action in report.actions:
        print(f"{STATUS_ICONS.get(action.status, '•')} {action.name}: {action.details}")
    if report.reconcile.satisfied:
        print("✅ All dependencies are already installed in the main project.")


@task(help={
    'start': 'Directory to start searching for the project root (default: current directory)',
    'debug': 'Enable debug logging'
})
def copy_template(ctx, start=None, debug=False):
    """
    Copy the envs module into the project's source tree, replacing any old copy.
    """
    setup_logging(debug)
    settings = get_settings(ctx)

    try:
        root = find_project_root(Path(start) if start else None, max_levels=int(settings['max_levels']))
        destination = materialize_template(
            root, settings['source_dir'], settings['package_dir'], settings['filename']
        )
    except InstallationError as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(e.exit_code)

    print(f"✅ envs module written to {destination}")


@task(help={
    'start': 'Directory to start searching for the project root (default: current directory)',
    'package_manager': 'Force a package manager (poetry, uv, pip) instead of detecting it',
    'debug': 'Enable debug logging'
})
def check_deps(ctx, start=None, package_manager=None, debug=False):
    """
    Show which dependencies the project is missing, without installing anything.

    Outputs:
        stdout: YAML report (parseable)
        stderr: Diagnostic information
    """
    setup_logging(debug)
    settings = get_settings(ctx)

    try:
        root = find_project_root(Path(start) if start else None, max_levels=int(settings['max_levels']))
        manager = resolve_package_manager(root, package_manager or settings['package_manager'])
        result = reconcile(root, manager, None, distribution=settings['distribution'], dry_run=True)
    except InstallationError as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(e.exit_code)

    print(f"🔍 Checked {len(result.declared)} dependencies against {root}", file=sys.stderr)
    report = {
        'root': str(root),
        'package_manager': manager.name,
        'missing': [dependency.requirement for dependency in result.missing],
    }
    yaml.dump(report, sys.stdout, default_flow_style=False, sort_keys=True)
