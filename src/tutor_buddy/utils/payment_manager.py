"""Payment bookkeeping.

Payments are recorded by the tutor; no payment provider is involved.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import pytz
from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from tutor_buddy.config import DEFAULT_CURRENCY
from tutor_buddy.core.transaction import scoped_connection
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.schemas.payment import Payment
from tutor_buddy.utils.converters import row_to_payment, utc_for_storage

logger = logging.getLogger(__name__)


class PaymentManager:
    """Manages payments made by students of a batch."""

    def __init__(self, engine: Engine, tables: StoreTables):
        self.engine = engine
        self.tables = tables

    def record(
        self,
        batch_id: int,
        student_id: int,
        amount: Decimal,
        currency: str = DEFAULT_CURRENCY,
        time: Optional[datetime] = None,
        tutor_comment: Optional[str] = None,
    ) -> int:
        """Record a payment by a student in a batch.

        Args:
            batch_id: Batch the payment is for.
            student_id: Paying student.
            amount: Amount paid.
            currency: ISO 4217 currency code.
            time: When the payment was made; defaults to now. Naive values
                are taken as UTC.
            tutor_comment: Optional note from the tutor.

        Returns:
            The generated payment id.

        Raises:
            QueryError: If the insert fails.
        """
        if time is None:
            time = datetime.now(pytz.utc)
        statement = insert(self.tables.payments).values(
            batch_id=batch_id,
            student_id=student_id,
            amount=amount,
            currency=currency,
            time=utc_for_storage(time),
            tutor_comment=tutor_comment,
        )
        with scoped_connection(self.engine, "payment.record") as scope:
            payment_id = scope.insert(statement)
        logger.info(
            "Recorded payment %s of %s %s for student %s in batch %s",
            payment_id,
            amount,
            currency,
            student_id,
            batch_id,
        )
        return payment_id

    def list_for_batch(self, batch_id: int) -> List[Payment]:
        """List the payments recorded for a batch, oldest first."""
        payments = self.tables.payments
        query = (
            select(payments)
            .where(payments.c.batch_id == batch_id)
            .order_by(payments.c.time, payments.c.id)
        )
        with scoped_connection(self.engine, "payment.list_for_batch") as scope:
            rows = scope.fetch_all(query)
        return [row_to_payment(row) for row in rows]
