"""Student management utilities."""

import logging
from typing import List, Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from tutor_buddy.core.transaction import scoped_connection, scoped_transaction
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.schemas.student import Student
from tutor_buddy.utils.converters import row_to_student

logger = logging.getLogger(__name__)


class StudentManager:
    """Manages students and their enrolment in batches."""

    def __init__(self, engine: Engine, tables: StoreTables):
        self.engine = engine
        self.tables = tables

    def add_to_batch(
        self,
        batch_id: int,
        first_name: str,
        last_name: str,
        phone: Optional[str],
        email: Optional[str],
    ) -> int:
        """Create an unverified student and enrol them in a batch.

        Sending the verification email is left to the caller.

        Args:
            batch_id: Batch to enrol the student in.
            first_name: First name.
            last_name: Last name.
            phone: Phone number.
            email: Email address.

        Returns:
            The generated student id.

        Raises:
            TransactionError: If either insert fails. Nothing is written.
        """
        with scoped_transaction(self.engine, "student.add_to_batch") as scope:
            logger.info("Creating new entry in students table...")
            student_id = scope.insert(
                insert(self.tables.students).values(
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone,
                    email=email,
                    verified=False,
                ),
                step="insert_student",
            )

            logger.info(
                "Creating mapping entry for batch %s, student %s...", batch_id, student_id
            )
            scope.insert(
                insert(self.tables.batch_student_map).values(
                    batch_id=batch_id, student_id=student_id
                ),
                step="map_student",
            )
        return student_id

    def list_for_batch(self, batch_id: int) -> List[Student]:
        students, enrolments = self.tables.students, self.tables.batch_student_map
        query = (
            select(students)
            .join(enrolments, enrolments.c.student_id == students.c.id)
            .where(enrolments.c.batch_id == batch_id)
            .order_by(students.c.id)
        )
        with scoped_connection(self.engine, "student.list_for_batch") as scope:
            rows = scope.fetch_all(query)
        return [row_to_student(row) for row in rows]
