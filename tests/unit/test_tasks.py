"""Tests for the invoke tasks behind the envs-var-validator command."""

import pytest
import yaml
from invoke import Config, Context, MockContext, Result

from envs_var_validator import namespace
from envs_var_validator.build import installer
from envs_var_validator.build.manifest import Dependency
from envs_var_validator.build.tasks import DEFAULT_SETTINGS, get_settings
from envs_var_validator.build.tasks.envs import show_envs
from envs_var_validator.build.tasks.install import check_deps, copy_template, install


@pytest.fixture(autouse=True)
def own_dependencies(monkeypatch):
    dependencies = [Dependency.parse('pydantic>=2.0.0'), Dependency.parse('python-dotenv>=1.0.0')]
    monkeypatch.setattr(installer, 'read_own_dependencies', lambda distribution: dependencies)
    return dependencies


def test_namespace_exposes_tasks():
    assert set(namespace.task_names) >= {'install', 'copy-template', 'check-deps', 'show-envs'}
    assert namespace.configuration()['envs'] == DEFAULT_SETTINGS


def test_settings_follow_context_config():
    ctx = Context(config=Config(overrides={'envs': {'package_dir': 'settings'}}))
    settings = get_settings(ctx)
    assert settings['package_dir'] == 'settings'
    assert settings['source_dir'] == 'src'


class TestInstallTask:

    def test_installs_missing_dependencies(self, host_project, capsys):
        ctx = MockContext(run=Result(exited=0))

        install(ctx, start=str(host_project))

        out = capsys.readouterr().out
        assert 'Package manager: pip' in out
        assert 'pydantic>=2.0.0' in out
        assert (host_project / 'src' / 'envs' / '__init__.py').is_file()

    def test_failed_install_exits_with_status(self, host_project, capsys):
        ctx = MockContext(run=Result(exited=3))

        with pytest.raises(SystemExit) as exc_info:
            install(ctx, start=str(host_project))

        assert exc_info.value.code == 3
        assert 'Dependency installation failed' in capsys.readouterr().err

    def test_already_installed(self, host_project, capsys):
        (host_project / 'pyproject.toml').write_text(
            '[project]\nname = "host-app"\ndependencies = ["pydantic", "python-dotenv"]\n'
        )

        install(Context(), start=str(host_project))

        assert 'All dependencies are already installed' in capsys.readouterr().out

    def test_project_root_not_found(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            install(Context(), start=str(tmp_path))

        assert exc_info.value.code == 1
        assert 'Project root not found' in capsys.readouterr().err

    def test_unknown_package_manager(self, host_project, capsys):
        with pytest.raises(SystemExit) as exc_info:
            install(Context(), start=str(host_project), package_manager='npm')

        assert exc_info.value.code == 1
        assert 'Unknown package manager: npm' in capsys.readouterr().err


class TestCopyTemplateTask:

    def test_uses_configured_location(self, host_project, capsys):
        ctx = Context(config=Config(overrides={'envs': {'source_dir': 'lib'}}))

        copy_template(ctx, start=str(host_project))

        assert (host_project / 'lib' / 'envs' / '__init__.py').is_file()
        assert 'envs module written to' in capsys.readouterr().out


class TestCheckDepsTask:

    def test_reports_missing_as_yaml(self, host_project, capsys):
        (host_project / 'uv.lock').write_text('')

        check_deps(Context(), start=str(host_project))

        report = yaml.safe_load(capsys.readouterr().out)
        assert report['package_manager'] == 'uv'
        assert report['missing'] == ['pydantic>=2.0.0', 'python-dotenv>=1.0.0']
        assert not (host_project / 'src').exists()


class TestShowEnvsTask:

    def test_prints_normalized_configuration(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('PORT', '8080')
        monkeypatch.setenv('NATS_SERVERS', 'nats://a:4222,nats://b:4222')
        monkeypatch.setenv('DB_URI', 'postgresql://localhost/app')

        show_envs(Context())

        assert yaml.safe_load(capsys.readouterr().out) == {
            'port': 8080,
            'nats_servers': ['nats://a:4222', 'nats://b:4222'],
            'db_uri': 'postgresql://localhost/app',
        }

    def test_invalid_environment_exits(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv('PORT', raising=False)
        monkeypatch.setenv('NATS_SERVERS', 'nats://a:4222')
        monkeypatch.setenv('DB_URI', 'postgresql://localhost/app')

        with pytest.raises(SystemExit) as exc_info:
            show_envs(Context())

        assert exc_info.value.code == 1
        assert 'config validation error' in capsys.readouterr().err


def test_program_runs_tasks(host_project, capsys):
    from envs_var_validator.cli import program

    program.run(['envs-var-validator', 'check-deps', '--start', str(host_project)], exit=False)

    report = yaml.safe_load(capsys.readouterr().out)
    assert report['package_manager'] == 'pip'
