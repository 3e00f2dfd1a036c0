"""Apply or roll back the transport_events schema with Alembic.

Invoked by the migrate Lambda. Credentials stored in Secrets Manager are copied
into the AURORA_* environment variables that alembic/env.py reads through
``get_config()``.
"""

import io
import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

import boto3
from alembic.config import Config

from alembic import command
from tracklog.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_ALEMBIC_INI = "/var/task/alembic.ini"
DEFAULT_SCRIPT_LOCATION = "/var/task/alembic"

# Secrets Manager key -> environment variable consumed by get_config()
SECRET_ENV_VARS = {
    "username": "AURORA_USER",
    "password": "AURORA_PASSWORD",
    "host": "AURORA_HOST",
    "port": "AURORA_PORT",
    "dbname": "AURORA_DATABASE",
}


def _load_credentials_from_secret(secret_arn: str) -> None:
    sm = boto3.client("secretsmanager", region_name=os.environ.get("AWS_REGION", "us-east-1"))
    secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    for key, env_var in SECRET_ENV_VARS.items():
        if secret.get(key) is not None:
            os.environ[env_var] = str(secret[key])


def _alembic_config() -> Config:
    cfg = Config(os.environ.get("ALEMBIC_CONFIG", DEFAULT_ALEMBIC_INI))
    cfg.set_main_option("script_location", os.environ.get("ALEMBIC_SCRIPT_LOCATION", DEFAULT_SCRIPT_LOCATION))
    return cfg


@contextmanager
def _alembic_output() -> Iterator[io.StringIO]:
    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    alembic_logger = logging.getLogger("alembic")
    alembic_logger.addHandler(handler)
    try:
        yield buffer
    finally:
        alembic_logger.removeHandler(handler)


def run_migrations(revision: str = "head", *, downgrade: bool = False) -> dict[str, str]:
    """Move the schema to ``revision``; returns Alembic's log output.

    Failures are raised as StorageError so the deployment step invoking the
    Lambda sees them.
    """
    secret_arn = os.environ.get("AURORA_SECRET_ARN")
    if secret_arn:
        _load_credentials_from_secret(secret_arn)

    direction = "downgrade" if downgrade else "upgrade"
    step = command.downgrade if downgrade else command.upgrade
    with _alembic_output() as output:
        try:
            step(_alembic_config(), revision)
        except Exception as e:
            logger.error("Schema %s to %s failed: %s", direction, revision, e)
            raise StorageError(f"Schema {direction} to {revision} failed: {e}") from e
    logger.info("Schema %s to %s complete", direction, revision)
    return {"status": "success", "direction": direction, "revision": revision, "output": output.getvalue()}
