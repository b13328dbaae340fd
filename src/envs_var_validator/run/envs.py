"""
Validated environment configuration.

Reads PORT, NATS_SERVERS and DB_URI from the environment (optionally seeded
from a .env file in the working directory), validates them and exposes a
single immutable Envs object. Call get_envs() at startup and read settings
from the returned object instead of os.environ.

This module is copied verbatim into consuming projects, so it may only import
the standard library, pydantic and python-dotenv.
"""
import logging
import os
from pathlib import Path
from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, ValidationError

logger = logging.getLogger(__name__)

NATS_SERVERS_SEPARATOR = ","
# Union-typed variables whose per-branch errors are reported as one message
NUMBER_FIELDS = ("PORT",)


class ConfigValidationError(ValueError):
    """Raised when required environment configuration is missing or malformed."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(f"config validation error: {message}")
        self.errors = errors or []


class EnvVars(BaseModel):
    """Schema of the raw environment. Unknown variables are ignored."""
    model_config = ConfigDict(extra='ignore')

    PORT: Union[int, FiniteFloat]
    NATS_SERVERS: List[Annotated[str, Field(min_length=1)]]
    DB_URI: str = Field(min_length=1)


class Envs(BaseModel):
    """Normalized configuration consumed by the application."""
    model_config = ConfigDict(frozen=True)

    port: Union[int, float]
    nats_servers: Tuple[str, ...]
    db_uri: str


def split_servers(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated NATS_SERVERS value; None stays None."""
    if value is None:
        return None
    return value.split(NATS_SERVERS_SEPARATOR)


def _format_errors(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for error in errors:
        loc = ".".join(str(part) for part in error['loc'])
        parts.append(f'"{loc}" {error["msg"]}')
    return "; ".join(parts)


def _collect_errors(error: ValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in error.errors():
        loc = tuple(err['loc'])
        if loc[0] in NUMBER_FIELDS and err['type'] != 'missing':
            if any(existing['loc'] == loc[:1] for existing in errors):
                continue
            errors.append({'loc': loc[:1], 'msg': 'must be a number', 'type': 'number'})
        else:
            errors.append({'loc': loc, 'msg': err['msg'], 'type': err['type']})
    return errors


def load_envs(environ: Mapping[str, str]) -> Envs:
    """
    Build the configuration from an environment snapshot.

    Args:
        environ: Mapping of variable name to raw string value.

    Returns:
        A frozen Envs instance.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
            Every failing field is reported in a single error.
    """
    raw = dict(environ)
    servers = split_servers(raw.get('NATS_SERVERS'))
    if servers is not None:
        raw['NATS_SERVERS'] = servers

    try:
        env_vars = EnvVars.model_validate(raw)
    except ValidationError as e:
        errors = _collect_errors(e)
        raise ConfigValidationError(_format_errors(errors), errors) from None

    # One line per exported setting; a new variable needs a new line here.
    return Envs(
        port=env_vars.PORT,
        nats_servers=tuple(env_vars.NATS_SERVERS),
        db_uri=env_vars.DB_URI,
    )


_envs: Optional[Envs] = None


def get_envs(dotenv_path: Optional[Union[str, Path]] = None) -> Envs:
    """
    Return the process-wide configuration, building it on first use.

    A .env file in the current working directory (or dotenv_path) is loaded
    first; variables already present in the environment take precedence.
    """
    global _envs

    if _envs is not None:
        return _envs

    env_file = Path(dotenv_path) if dotenv_path else Path.cwd() / '.env'
    if env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
        logger.debug(f"Loaded environment file {env_file}")
    elif dotenv_path:
        logger.warning(f"Environment file {env_file} not found; using the process environment only")

    _envs = load_envs(os.environ)
    logger.debug(f"Environment configuration validated (port={_envs.port})")
    return _envs


def reset_envs() -> None:
    """Forget the cached configuration so the next get_envs() rebuilds it."""
    global _envs
    _envs = None
