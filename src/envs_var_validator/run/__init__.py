"""
Runtime side of envs-var-validator.

The envs module is the template copied into consuming projects.
"""

from .envs import ConfigValidationError, Envs, EnvVars, get_envs, load_envs, reset_envs, split_servers

__all__ = [
    'ConfigValidationError',
    'Envs',
    'EnvVars',
    'get_envs',
    'load_envs',
    'reset_envs',
    'split_servers',
]
