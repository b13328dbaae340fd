"""
Console entry point.

Exposes the task namespace as the envs-var-validator command, e.g.
`envs-var-validator install` after `pip install envs-var-validator`.
"""

from invoke import Program

from . import __version__, namespace

program = Program(namespace=namespace, name='envs-var-validator', binary='envs-var-validator', version=__version__)


def main():
    """Run the envs-var-validator command line."""
    program.run()
