"""Batch management utilities.

A batch is owned by exactly one tutor through the tutor-batch mapping table.
Creating and deleting a batch touch both tables inside one transaction.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine

from tutor_buddy.core.transaction import scoped_connection, scoped_transaction
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.schemas.batch import Batch, BatchOwnership
from tutor_buddy.utils.converters import row_to_batch

logger = logging.getLogger(__name__)


class BatchManager:
    """Manages batches and their ownership."""

    def __init__(self, engine: Engine, tables: StoreTables):
        self.engine = engine
        self.tables = tables

    def list_for_tutor(self, tutor_id: int) -> List[Batch]:
        """List the batches owned by a tutor, oldest first."""
        batches, owners = self.tables.batches, self.tables.tutor_batch_map
        query = (
            select(batches)
            .join(owners, owners.c.batch_id == batches.c.id)
            .where(owners.c.tutor_id == tutor_id)
            .order_by(batches.c.id)
        )
        with scoped_connection(self.engine, "batch.list_for_tutor") as scope:
            rows = scope.fetch_all(query)
        return [row_to_batch(row) for row in rows]

    def create(
        self,
        tutor_id: int,
        name: str,
        subject: Optional[str],
        address_text: Optional[str],
    ) -> int:
        """Create a batch owned by a tutor.

        Args:
            tutor_id: Tutor profile id of the owner.
            name: Batch name.
            subject: Subject taught.
            address_text: Free-text address.

        Returns:
            The generated batch id.

        Raises:
            TransactionError: If either insert fails. Nothing is written.
        """
        with scoped_transaction(self.engine, "batch.create") as scope:
            batch_id = scope.insert(
                insert(self.tables.batches).values(
                    name=name, subject=subject, address_text=address_text
                ),
                step="insert_batch",
            )
            scope.insert(
                insert(self.tables.tutor_batch_map).values(
                    tutor_id=tutor_id, batch_id=batch_id
                ),
                step="map_owner",
            )
        logger.info("Created batch %s for tutor %s", batch_id, tutor_id)
        return batch_id

    def get_owner(self, batch_id: int) -> BatchOwnership:
        """Look up the tutor owning a batch.

        Zero or several owners are reported through the result, not raised.

        Args:
            batch_id: Id of the batch.

        Returns:
            BatchOwnership tagged as found, not found or integrity violation.

        Raises:
            QueryError: If the query fails.
        """
        owners = self.tables.tutor_batch_map
        with scoped_connection(self.engine, "batch.get_owner") as scope:
            rows = scope.fetch_all(
                select(owners.c.tutor_id).where(owners.c.batch_id == batch_id)
            )

        if not rows:
            logger.info("Found no owner for batch %s", batch_id)
            return BatchOwnership.not_found(batch_id)
        if len(rows) > 1:
            logger.error(
                "Found multiple owners for batch %s: %s",
                batch_id,
                [row.tutor_id for row in rows],
            )
            return BatchOwnership.integrity_violation(batch_id)

        tutor_id = rows[0].tutor_id
        logger.info("Found tutorId %s for batch %s", tutor_id, batch_id)
        return BatchOwnership.found(batch_id, tutor_id)

    def delete(self, batch_id: int) -> None:
        """Delete a batch together with every mapping row that refers to it.

        Student rows are kept; their enrolment in this batch and the payments
        recorded for it are removed.

        Raises:
            TransactionError: If any delete fails. Nothing is removed.
        """
        tables = self.tables
        with scoped_transaction(self.engine, "batch.delete") as scope:
            scope.modify(
                delete(tables.batches).where(tables.batches.c.id == batch_id),
                step="delete_batch",
            )
            scope.modify(
                delete(tables.tutor_batch_map).where(
                    tables.tutor_batch_map.c.batch_id == batch_id
                ),
                step="delete_owner",
            )
            scope.modify(
                delete(tables.batch_student_map).where(
                    tables.batch_student_map.c.batch_id == batch_id
                ),
                step="delete_students",
            )
            scope.modify(
                delete(tables.payments).where(tables.payments.c.batch_id == batch_id),
                step="delete_payments",
            )
        logger.info("Deleted batch %s", batch_id)
