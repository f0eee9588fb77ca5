"""Database engine creation.

This module builds the SQLAlchemy engine for a ``StoreConfig``. Connection
acquisition and statement execution are both bounded by the configured
timeouts.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from tutor_buddy.config import StoreConfig

logger = logging.getLogger(__name__)


def create_store_engine(config: StoreConfig) -> Engine:
    """Create the engine used by the gateway.

    Args:
        config: Store configuration.

    Returns:
        A SQLAlchemy Engine. In-memory SQLite URLs share one connection so
        that every scoped connection sees the same database.
    """
    url = make_url(config.database_url)
    connect_args = {}
    engine_kwargs = {}

    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        # Seconds to wait on a locked database before failing the statement
        connect_args["timeout"] = config.statement_timeout
        if url.database in (None, "", ":memory:"):
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_timeout"] = config.pool_timeout
    else:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_timeout"] = config.pool_timeout
        if url.get_driver_name() == "pymysql":
            connect_args["connect_timeout"] = int(config.connect_timeout)
            connect_args["read_timeout"] = int(config.statement_timeout)
            connect_args["write_timeout"] = int(config.statement_timeout)

    logger.info(
        "Creating %s engine for mode %s", url.get_backend_name(), config.mode
    )
    return create_engine(url, connect_args=connect_args, **engine_kwargs)
