"""Database connection helpers for Lambda runtime."""

from __future__ import annotations

import base64
import json
import os
import re
from typing import Any
from urllib.parse import quote_plus

import boto3
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from app.exceptions import ConfigurationError

DATABASE_URL_VAR = "DATABASE_URL"
DATABASE_SECRET_ARN_VAR = "DATABASE_SECRET_ARN"

_URL_CREDENTIALS_PATTERN = re.compile(
    r"(?P<prefix>[A-Za-z][A-Za-z0-9+.\-]*://)(.+):(.+)(?P<suffix>@.+)"
)

_SECRET_CACHE: dict[str, dict[str, Any]] = {}


def get_database_url() -> str:
    """Resolve the database URL from env or Secrets Manager.

    Raises:
        ConfigurationError: If neither source yields a usable URL.
    """

    database_url = (os.getenv(DATABASE_URL_VAR) or "").strip()
    if database_url:
        return database_url

    secret_arn = (os.getenv(DATABASE_SECRET_ARN_VAR) or "").strip()
    if not secret_arn:
        raise ConfigurationError(
            DATABASE_URL_VAR,
            detail=f"Set {DATABASE_URL_VAR} or {DATABASE_SECRET_ARN_VAR}",
        )

    try:
        secret = _get_secret(secret_arn)
    except (BotoCoreError, ClientError, RuntimeError, ValueError) as exc:
        raise ConfigurationError(
            DATABASE_SECRET_ARN_VAR, detail=str(exc), missing=False
        ) from exc

    username = (
        os.getenv("DATABASE_USERNAME") or secret.get("username") or secret.get("user")
    )
    password = secret.get("password")
    host = os.getenv("DATABASE_HOST") or secret.get("host")
    port = os.getenv("DATABASE_PORT") or secret.get("port") or 5432
    database = (
        secret.get("dbname")
        or secret.get("database")
        or os.getenv("DATABASE_NAME")
        or "test"
    )

    if not username or not host or not password:
        raise ConfigurationError(
            DATABASE_SECRET_ARN_VAR,
            detail="Secret is missing database connection fields",
            missing=False,
        )

    return (
        "postgresql+psycopg://"
        f"{quote_plus(str(username))}:{quote_plus(str(password))}"
        f"@{host}:{port}/{database}"
    )


def _get_secret(secret_arn: str) -> dict[str, Any]:
    """Fetch and parse a JSON secret from AWS Secrets Manager."""

    if secret_arn in _SECRET_CACHE:
        return _SECRET_CACHE[secret_arn]

    client = boto3.client("secretsmanager")
    response = client.get_secret_value(SecretId=secret_arn)
    secret_str = response.get("SecretString")
    if not secret_str and response.get("SecretBinary"):
        secret_str = base64.b64decode(response["SecretBinary"]).decode("utf-8")

    if not secret_str:
        raise RuntimeError("Secret value is empty")

    secret_payload = json.loads(secret_str)
    if not isinstance(secret_payload, dict):
        raise ValueError("Secret value must be a JSON object")
    _SECRET_CACHE[secret_arn] = secret_payload
    return secret_payload


def clear_secret_cache() -> None:
    """Clear cached secrets (useful in tests)."""
    _SECRET_CACHE.clear()


def redact_database_url(database_url: str) -> str:
    """Replace the user and password of a database URL with dummy values.

    URLs without credentials are returned unchanged.

    Examples:
        >>> redact_database_url("postgresql://app:secret@db:5432/test")
        'postgresql://REDACTED:REDACTED@db:5432/test'
        >>> redact_database_url("sqlite:///tmp/logs.db")
        'sqlite:///tmp/logs.db'
    """
    return _URL_CREDENTIALS_PATTERN.sub(
        r"\g<prefix>REDACTED:REDACTED\g<suffix>", database_url, count=1
    )


def is_sqlite_url(database_url: str) -> bool:
    """Return True if the URL targets SQLite."""
    return database_url.split(":", 1)[0].split("+", 1)[0].lower() == "sqlite"


def is_postgresql_url(database_url: str) -> bool:
    """Return True if the URL targets PostgreSQL."""
    scheme = database_url.split(":", 1)[0].split("+", 1)[0].lower()
    return scheme in {"postgresql", "postgres"}
