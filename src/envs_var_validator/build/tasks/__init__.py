"""
envs-var-validator tasks package.

Modules are collected by the top-level __init__.py using Collection.from_module().
"""

import logging

from ...run.logging import bootstrap_logging

# Defaults for the "envs" configuration section; override in invoke.yaml
# or with INVOKE_ENVS_* environment variables.
DEFAULT_SETTINGS = {
    'source_dir': 'src',
    'package_dir': 'envs',
    'filename': '__init__.py',
    'max_levels': 32,
    'package_manager': None,
    'distribution': 'envs-var-validator',
}


def setup_logging(debug=False):
    """Set up logging configuration based on debug flag."""
    bootstrap_logging()
    if debug:
        logging.getLogger('envs_var_validator').setLevel(logging.DEBUG)
        for handler in logging.getLogger().handlers:
            handler.setLevel(logging.DEBUG)
        print("🐛 Debug logging enabled")


def get_settings(ctx):
    """Merge the context's "envs" configuration over the defaults."""
    settings = dict(DEFAULT_SETTINGS)
    envs_config = ctx.config.get('envs') or {}
    for key in DEFAULT_SETTINGS:
        if key in envs_config:
            settings[key] = envs_config[key]
    return settings
