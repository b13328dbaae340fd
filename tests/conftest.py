"""
Root pytest configuration for envs-var-validator.

Bootstraps logging and provides a throwaway host project to install into.
"""

import pytest

from envs_var_validator.run.envs import reset_envs
from envs_var_validator.run.logging import bootstrap_logging

bootstrap_logging()

HOST_PYPROJECT = """\
[project]
name = "host-app"
version = "0.1.0"
dependencies = [
    "fastapi>=0.100.0",
]

[project.optional-dependencies]
test = ["pytest>=7.0.0"]
"""


@pytest.fixture
def host_project(tmp_path):
    """A minimal host project: pyproject.toml, .venv and a requirements.txt lockfile."""
    root = tmp_path / "host-app"
    root.mkdir()
    (root / "pyproject.toml").write_text(HOST_PYPROJECT)
    (root / ".venv").mkdir()
    (root / "requirements.txt").write_text("fastapi==0.110.0\n")
    return root


@pytest.fixture(autouse=True)
def clean_envs_cache():
    """Make every test start without a cached Envs singleton."""
    reset_envs()
    yield
    reset_envs()
