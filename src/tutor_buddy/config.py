"""Configuration module for Tutor Buddy.

This module provides centralized configuration management: API server
settings, logging level, and the relational store configuration. All values
can be overridden via environment variables (optionally from a ``.env`` file).

The store configuration is resolved once at startup into a ``StoreConfig``
object that is passed to the gateway explicitly.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from sqlalchemy.engine import URL

from tutor_buddy.core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# --- Deployment Modes ---

MODE_PROD = "PROD"
MODE_DEV = "DEV"
MODE_TEST = "TEST"
MODES = (MODE_PROD, MODE_DEV, MODE_TEST)

# Tables used while running tests carry this suffix
TEST_TABLE_SUFFIX = "-test"

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS", "http://localhost:8080,http://127.0.0.1:8080"
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Database Defaults ---

DEFAULT_DB_NAME = "tutor-buddy"
DEFAULT_DB_DRIVER = "mysql+pymysql"
DEFAULT_DB_HOST = "127.0.0.1"
DEFAULT_DB_PORT = 3306
DEFAULT_POOL_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_STATEMENT_TIMEOUT = 30.0

# Currency recorded when a payment does not name one
DEFAULT_CURRENCY = "INR"


class TableNames(BaseModel):
    """Physical table names for one deployment mode."""

    model_config = ConfigDict(frozen=True)

    users: str = "users"
    tutors: str = "tutors"
    students: str = "students"
    batches: str = "batches"
    tutor_batch_map: str = "tutor_batch_map"
    batch_student_map: str = "batch_student_map"
    payments: str = "payments"

    @classmethod
    def for_mode(cls, mode: str) -> "TableNames":
        """Return the table names used in the given mode.

        Args:
            mode: One of ``PROD``, ``DEV`` or ``TEST``.

        Returns:
            Production names, or names suffixed with ``-test`` in TEST mode.
        """
        if mode != MODE_TEST:
            return cls()
        return cls(
            **{
                field: name + TEST_TABLE_SUFFIX
                for field, name in cls().model_dump().items()
            }
        )


class StoreConfig(BaseModel):
    """Everything the gateway needs to reach its relational store."""

    model_config = ConfigDict(frozen=True)

    mode: str
    database_url: str
    tables: TableNames
    pool_timeout: float = DEFAULT_POOL_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    statement_timeout: float = DEFAULT_STATEMENT_TIMEOUT


def get_mode() -> str:
    """Read the deployment mode from the environment.

    Both ``MODE`` and the legacy lowercase ``mode`` are honoured and the value
    is case-insensitive.

    Raises:
        ConfigurationError: If the value is not a known mode.
    """
    raw = os.getenv("MODE") or os.getenv("mode") or MODE_DEV
    mode = raw.strip().upper()
    if mode not in MODES:
        raise ConfigurationError(
            f"Unknown MODE '{raw}'. Expected one of: {', '.join(MODES)}"
        )
    return mode


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got '{value}'") from exc


def build_database_url(mode: str) -> str:
    """Build the SQLAlchemy URL for the given mode.

    ``DATABASE_URL`` wins when set. Otherwise PROD connects through the
    Cloud SQL unix socket of ``DB_INSTANCE`` and every other mode connects
    to ``DB_HOST``/``DB_PORT``.

    Args:
        mode: Deployment mode.

    Returns:
        Database URL string, password included.

    Raises:
        ConfigurationError: If PROD is selected without ``DB_INSTANCE``.
    """
    override = os.getenv("DATABASE_URL")
    if override and override.strip():
        return override.strip()

    host: Optional[str] = None
    port: Optional[int] = None
    query = {}
    if mode == MODE_PROD:
        instance = os.getenv("DB_INSTANCE")
        if not instance:
            raise ConfigurationError("DB_INSTANCE must be set when MODE is PROD")
        query["unix_socket"] = f"/cloudsql/{instance}"
    else:
        host = os.getenv("DB_HOST", DEFAULT_DB_HOST)
        port = int(os.getenv("DB_PORT", str(DEFAULT_DB_PORT)))

    url = URL.create(
        drivername=os.getenv("DB_DRIVER", DEFAULT_DB_DRIVER),
        username=os.getenv("DB_USER") or None,
        password=os.getenv("DB_PASSWORD") or None,
        host=host,
        port=port,
        database=os.getenv("DB_NAME", DEFAULT_DB_NAME),
        query=query,
    )
    return url.render_as_string(hide_password=False)


def load_store_config() -> StoreConfig:
    """Resolve the store configuration from the environment.

    Called once at startup; the result is handed to the gateway.
    """
    mode = get_mode()
    return StoreConfig(
        mode=mode,
        database_url=build_database_url(mode),
        tables=TableNames.for_mode(mode),
        pool_timeout=_float_env("DB_POOL_TIMEOUT", DEFAULT_POOL_TIMEOUT),
        connect_timeout=_float_env("DB_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        statement_timeout=_float_env("DB_STATEMENT_TIMEOUT", DEFAULT_STATEMENT_TIMEOUT),
    )
