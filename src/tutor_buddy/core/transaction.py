"""Scoped connections and transactions.

Every gateway operation runs inside exactly one of the two scopes defined
here. The scope owns the connection for the duration of the operation and
releases it on exit, success or failure.

``scoped_connection`` is for single-statement operations: driver errors
become ``QueryError``.

``scoped_transaction`` is for multi-statement operations: it begins a
transaction, lets the caller run named steps, commits on success, and rolls
back on any failure before the error propagates. Driver errors become
``TransactionStartError``, ``StatementError`` or ``CommitError``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.engine import Connection, Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from tutor_buddy.core.exceptions import (
    CommitError,
    QueryError,
    StatementError,
    TransactionStartError,
)

logger = logging.getLogger(__name__)


class StatementScope:
    """Runs statements for one operation on one connection."""

    def __init__(
        self, connection: Connection, operation: str, transactional: bool = False
    ):
        """Initialize the scope.

        Args:
            connection: Connection owned by the enclosing scope.
            operation: Name of the gateway operation, used in errors and logs.
            transactional: Whether failures are steps of a transaction.
        """
        self.connection = connection
        self.operation = operation
        self.transactional = transactional

    def _execute(self, statement: Executable, step: Optional[str]):
        try:
            return self.connection.execute(statement)
        except SQLAlchemyError as exc:
            logger.error(
                "Error while executing %s%s: %s",
                self.operation,
                f" (step {step})" if step else "",
                exc,
            )
            if self.transactional:
                raise StatementError(self.operation, step or "statement") from exc
            raise QueryError(self.operation) from exc

    def fetch_all(self, statement: Executable, step: Optional[str] = None) -> List[Row]:
        """Execute a query and return every row."""
        return list(self._execute(statement, step).fetchall())

    def insert(self, statement: Executable, step: Optional[str] = None) -> int:
        """Execute an insert and return the generated primary key."""
        result = self._execute(statement, step)
        return result.inserted_primary_key[0]

    def modify(self, statement: Executable, step: Optional[str] = None) -> int:
        """Execute an update or delete and return the number of matched rows."""
        return self._execute(statement, step).rowcount


def _rollback(connection: Connection, operation: str) -> None:
    try:
        connection.rollback()
    except SQLAlchemyError as exc:
        # The failure that triggered the rollback is what the caller sees
        logger.error("Error while rolling back %s: %s", operation, exc)
    else:
        logger.error("Rolled back transaction for %s", operation)


@contextmanager
def scoped_connection(engine: Engine, operation: str) -> Iterator[StatementScope]:
    """Acquire a connection for a single-statement operation.

    Args:
        engine: Engine to acquire the connection from.
        operation: Name of the gateway operation.

    Yields:
        StatementScope bound to the connection.

    Raises:
        QueryError: If the connection cannot be acquired, a statement fails,
            or the write cannot be committed.
    """
    try:
        connection = engine.connect()
    except SQLAlchemyError as exc:
        logger.error("Error while connecting for %s: %s", operation, exc)
        raise QueryError(operation) from exc

    with connection:
        yield StatementScope(connection, operation)
        try:
            connection.commit()
        except SQLAlchemyError as exc:
            logger.error("Error while committing %s: %s", operation, exc)
            raise QueryError(operation) from exc


@contextmanager
def scoped_transaction(engine: Engine, operation: str) -> Iterator[StatementScope]:
    """Run several statements as one all-or-nothing unit.

    Args:
        engine: Engine to acquire the connection from.
        operation: Name of the gateway operation.

    Yields:
        StatementScope whose failures are reported as ``StatementError``.

    Raises:
        TransactionStartError: If no connection or transaction can be obtained.
        StatementError: If a step fails. The transaction is rolled back first.
        CommitError: If the commit fails. The transaction is rolled back first.
    """
    try:
        connection = engine.connect()
    except SQLAlchemyError as exc:
        logger.error("Error while starting transaction for %s: %s", operation, exc)
        raise TransactionStartError(operation) from exc

    with connection:
        try:
            connection.begin()
        except SQLAlchemyError as exc:
            logger.error("Error while starting transaction for %s: %s", operation, exc)
            raise TransactionStartError(operation) from exc

        try:
            yield StatementScope(connection, operation, transactional=True)
        except BaseException:
            _rollback(connection, operation)
            raise

        try:
            connection.commit()
        except SQLAlchemyError as exc:
            logger.error("Error while committing transaction in %s: %s", operation, exc)
            _rollback(connection, operation)
            raise CommitError(operation) from exc
