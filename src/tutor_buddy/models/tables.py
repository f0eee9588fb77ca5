"""Relational schema for Tutor Buddy.

Table names depend on the deployment mode, so the schema is built per
``TableNames`` instance instead of being declared at import time.
Mapping tables carry no foreign keys; the gateway keeps them consistent.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    false,
)

from tutor_buddy.config import TableNames


class StoreTables:
    """SQLAlchemy tables for one set of table names."""

    def __init__(self, names: TableNames):
        """Build the tables.

        Args:
            names: Physical table names to use.
        """
        self.names = names
        self.metadata = MetaData()

        self.users = Table(
            names.users,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("first_name", String(100), nullable=False),
            Column("last_name", String(100), nullable=False),
            Column("email", String(255), nullable=True),
            Column("facebook_id", String(64), unique=True, nullable=False),
            Column("facebook_token", String(512), nullable=True),
            Column("session_id", String(128), nullable=True),
            Column("tutor_profile_id", Integer, nullable=True),
        )

        # A tutor profile has no attributes of its own yet
        self.tutors = Table(
            names.tutors,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
        )

        self.students = Table(
            names.students,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("first_name", String(100), nullable=False),
            Column("last_name", String(100), nullable=False),
            Column("phone", String(32), nullable=True),
            Column("email", String(255), nullable=True),
            Column("verified", Boolean, nullable=False, server_default=false()),
        )

        self.batches = Table(
            names.batches,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("name", String(255), nullable=False),
            Column("subject", String(255), nullable=True),
            Column("address_text", Text, nullable=True),
        )

        self.tutor_batch_map = Table(
            names.tutor_batch_map,
            self.metadata,
            Column("tutor_id", Integer, primary_key=True, autoincrement=False),
            Column("batch_id", Integer, primary_key=True, autoincrement=False),
        )

        self.batch_student_map = Table(
            names.batch_student_map,
            self.metadata,
            Column("batch_id", Integer, primary_key=True, autoincrement=False),
            Column("student_id", Integer, primary_key=True, autoincrement=False),
        )

        self.payments = Table(
            names.payments,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("batch_id", Integer, nullable=False),
            Column("student_id", Integer, nullable=False),
            Column("amount", Numeric(10, 2), nullable=False),
            Column("currency", String(3), nullable=False),
            Column("time", DateTime, nullable=False),  # UTC, stored naive
            Column("tutor_comment", Text, nullable=True),
        )

    def create_all(self, bind) -> None:
        """Create any missing tables."""
        self.metadata.create_all(bind)

    def drop_all(self, bind) -> None:
        self.metadata.drop_all(bind)
