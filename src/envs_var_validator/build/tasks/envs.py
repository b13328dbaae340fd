"""
Environment Display Task

Validates the current environment and shows the resulting configuration.
"""

import sys
import yaml
import logging
from invoke import task

from . import setup_logging
from ...run.envs import ConfigValidationError, get_envs

logger = logging.getLogger(__name__)


@task(help={
    'dotenv': 'Path of the .env file to load (default: .env in the current directory)',
    'debug': 'Enable debug logging'
})
def show_envs(ctx, dotenv=None, debug=False):
    """
    Validate PORT, NATS_SERVERS and DB_URI and print the normalized settings.

    Outputs:
        stdout: YAML configuration (parseable)
        stderr: Diagnostic information
    """
    setup_logging(debug)

    try:
        envs = get_envs(dotenv)
    except ConfigValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    print("✅ Environment configuration is valid", file=sys.stderr)
    config_dict = envs.model_dump()
    config_dict['nats_servers'] = list(config_dict['nats_servers'])
    yaml.safe_dump(config_dict, sys.stdout, default_flow_style=False, sort_keys=True)
