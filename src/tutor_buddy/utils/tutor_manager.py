"""Tutor profile management.

A tutor profile is provisioned for a user in two steps that must succeed or
fail together: insert an empty tutor row, then link the user to it.
"""

import logging
from typing import Optional

from sqlalchemy import insert, or_, select, update
from sqlalchemy.engine import Engine

from tutor_buddy.core.exceptions import StatementError, TutorProfileExistsError
from tutor_buddy.core.transaction import scoped_connection, scoped_transaction
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.schemas.tutor import TutorProfile
from tutor_buddy.utils.converters import row_to_tutor_profile

logger = logging.getLogger(__name__)


class TutorManager:
    """Manages tutor profiles and their link to users."""

    def __init__(self, engine: Engine, tables: StoreTables):
        self.engine = engine
        self.tables = tables

    def get_profile(self, user_id: int) -> Optional[TutorProfile]:
        """Get the tutor profile linked to a user.

        Args:
            user_id: Id of the user.

        Returns:
            The TutorProfile, or None if the user has no tutor profile.

        Raises:
            QueryError: If the query fails.
        """
        tutors, users = self.tables.tutors, self.tables.users
        query = (
            select(tutors)
            .join(users, users.c.tutor_profile_id == tutors.c.id)
            .where(users.c.id == user_id)
        )
        with scoped_connection(self.engine, "tutor.get_profile") as scope:
            rows = scope.fetch_all(query)
        if not rows:
            return None
        return row_to_tutor_profile(rows[0])

    def create_profile(self, user_id: int) -> int:
        """Create a tutor profile and link it to a user.

        The link is only written while the user has no tutor profile, so a
        user ends up with at most one even when requests race.

        Args:
            user_id: Id of the user becoming a tutor.

        Returns:
            The generated tutor profile id.

        Raises:
            TutorProfileExistsError: If the user already has a tutor profile.
            TransactionError: If any step fails, including when the user does
                not exist. Nothing is written in either case.
        """
        operation = "tutor.create_profile"
        users = self.tables.users
        with scoped_transaction(self.engine, operation) as scope:
            tutor_id = scope.insert(insert(self.tables.tutors), step="insert_tutor")

            matched = scope.modify(
                update(users)
                .where(users.c.id == user_id)
                .where(or_(users.c.tutor_profile_id.is_(None), users.c.tutor_profile_id == 0))
                .values(tutor_profile_id=tutor_id),
                step="link_user",
            )
            if not matched:
                rows = scope.fetch_all(
                    select(users.c.tutor_profile_id).where(users.c.id == user_id),
                    step="check_user",
                )
                if rows:
                    logger.warning(
                        "User %s already has tutor profile %s",
                        user_id,
                        rows[0].tutor_profile_id,
                    )
                    raise TutorProfileExistsError(
                        operation, user_id, rows[0].tutor_profile_id
                    )
                logger.error(
                    "Error while mapping created tutor profile ID %s to user %s: no such user",
                    tutor_id,
                    user_id,
                )
                raise StatementError(
                    operation, "link_user", f"User '{user_id}' does not exist"
                )

        logger.info("Created tutor profile %s for user %s", tutor_id, user_id)
        return tutor_id
