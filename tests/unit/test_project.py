"""Tests for project root discovery and template materialization."""

import pytest

from envs_var_validator.build.exceptions import InstallationError, ProjectRootNotFoundError
from envs_var_validator.build.project import find_project_root, is_project_root
from envs_var_validator.build.template import TEMPLATE_PATH, get_destination, materialize_template


class TestFindProjectRoot:

    def test_finds_root_from_itself(self, host_project):
        assert find_project_root(host_project) == host_project.resolve()

    def test_finds_root_from_nested_directory(self, host_project):
        nested = host_project / ".venv" / "lib" / "python3.12" / "site-packages"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == host_project.resolve()

    def test_defaults_to_working_directory(self, host_project, monkeypatch):
        monkeypatch.chdir(host_project)
        assert find_project_root() == host_project.resolve()

    @pytest.mark.parametrize('marker', ['pyproject.toml', '.venv', 'requirements.txt'])
    def test_every_marker_is_required(self, host_project, marker):
        path = host_project / marker
        if path.is_dir():
            path.rmdir()
        else:
            path.unlink()

        assert not is_project_root(host_project)

    @pytest.mark.parametrize('lockfile', ['poetry.lock', 'uv.lock', 'pylock.toml'])
    def test_any_lockfile_is_enough(self, host_project, lockfile):
        (host_project / "requirements.txt").unlink()
        (host_project / lockfile).write_text("")

        assert is_project_root(host_project)

    def test_not_found_raises(self, tmp_path):
        with pytest.raises(ProjectRootNotFoundError) as exc_info:
            find_project_root(tmp_path)

        assert "project root not found" in str(exc_info.value)
        assert isinstance(exc_info.value, InstallationError)
        assert exc_info.value.exit_code != 0
        assert "Project root not found" in exc_info.value.guidance

    def test_search_is_bounded(self, host_project):
        deep = host_project / "a" / "b" / "c"
        deep.mkdir(parents=True)

        with pytest.raises(ProjectRootNotFoundError):
            find_project_root(deep, max_levels=2)
        assert find_project_root(deep, max_levels=3) == host_project.resolve()


class TestMaterializeTemplate:

    def test_creates_destination_and_copies_template(self, host_project):
        destination = materialize_template(host_project)

        assert destination == host_project / "src" / "envs" / "__init__.py"
        assert destination.read_bytes() == TEMPLATE_PATH.read_bytes()

    def test_rerun_is_idempotent(self, host_project):
        first = materialize_template(host_project).read_bytes()
        second = materialize_template(host_project).read_bytes()

        assert first == second
        assert list((host_project / "src" / "envs").iterdir()) == [
            host_project / "src" / "envs" / "__init__.py"
        ]

    def test_overwrites_previous_copy(self, host_project):
        destination = get_destination(host_project)
        destination.parent.mkdir(parents=True)
        destination.write_text("stale")

        materialize_template(host_project)

        assert destination.read_bytes() == TEMPLATE_PATH.read_bytes()

    def test_custom_location(self, host_project):
        destination = materialize_template(host_project, source_dir="app", package_dir="config", filename="envs.py")
        assert destination == host_project / "app" / "config" / "envs.py"
        assert destination.is_file()
