"""
Build package for envs-var-validator.

This package contains the install-time tools: project discovery, template
materialization and dependency reconciliation.
"""

from .exceptions import InstallationError
from .installer import reconcile, run_install
from .tasks import envs, install

__all__ = [
    'InstallationError',
    'reconcile',
    'run_install',
    'envs',
    'install',
]
