"""Relational store gateway.

The gateway is the single entry point to the relational store. It groups
the domain managers and owns the engine they share. It keeps no state
besides its configuration, so one instance can serve concurrent callers.

Example:
    gateway = StoreGateway.from_config(load_store_config())
    tutor_id = gateway.tutor.create_profile(user_id)
    batch_id = gateway.batch.create(tutor_id, "Algebra I", "Math", "12 Elm St")
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from tutor_buddy.config import StoreConfig
from tutor_buddy.core.database import create_store_engine
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.utils.batch_manager import BatchManager
from tutor_buddy.utils.payment_manager import PaymentManager
from tutor_buddy.utils.student_manager import StudentManager
from tutor_buddy.utils.tutor_manager import TutorManager
from tutor_buddy.utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class StoreGateway:
    """Facade over the user, tutor, batch, student and payment managers."""

    def __init__(self, config: StoreConfig, engine: Optional[Engine] = None):
        """Initialize the gateway.

        Args:
            config: Store configuration resolved at startup.
            engine: Engine to use; built from ``config`` when omitted.
        """
        self.config = config
        self.engine = engine if engine is not None else create_store_engine(config)
        self.tables = StoreTables(config.tables)

        self.user = UserManager(self.engine, self.tables)
        self.tutor = TutorManager(self.engine, self.tables)
        self.batch = BatchManager(self.engine, self.tables)
        self.student = StudentManager(self.engine, self.tables)
        self.payment = PaymentManager(self.engine, self.tables)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "StoreGateway":
        return cls(config)

    def create_schema(self) -> None:
        """Create any missing tables for the configured mode."""
        logger.info("Ensuring %s tables exist", self.config.mode)
        self.tables.create_all(self.engine)

    def drop_schema(self) -> None:
        self.tables.drop_all(self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
