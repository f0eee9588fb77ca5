"""User management utilities.

This module provides lookups, creation and session bookkeeping for users.
Users are created on their first successful social login and identified by
the provider's id from then on.
"""

import logging
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from tutor_buddy.core.exceptions import NotFoundError
from tutor_buddy.core.transaction import scoped_connection
from tutor_buddy.models.tables import StoreTables
from tutor_buddy.schemas.user import UserProfile, UserRecord
from tutor_buddy.utils.converters import row_to_user, row_to_user_profile

logger = logging.getLogger(__name__)


class UserManager:
    """Manages user rows."""

    def __init__(self, engine: Engine, tables: StoreTables):
        """Initialize UserManager.

        Args:
            engine: Engine connections are acquired from, one per call.
            tables: Resolved store tables.
        """
        self.engine = engine
        self.tables = tables

    def find_by_external_id(self, external_id: str) -> UserRecord:
        """Get a user by the social login provider's id.

        Args:
            external_id: Provider id (unique per user).

        Returns:
            The matching UserRecord.

        Raises:
            NotFoundError: If no user has this id.
            QueryError: If the query fails.
        """
        users = self.tables.users
        with scoped_connection(self.engine, "user.find_by_external_id") as scope:
            rows = scope.fetch_all(select(users).where(users.c.facebook_id == external_id))
        if not rows:
            raise NotFoundError("user.find_by_external_id", "user", external_id)
        return row_to_user(rows[0])

    def find_by_session(self, session_id: str) -> UserRecord:
        """Get the user currently holding a session token.

        Raises:
            NotFoundError: If no user holds this token.
            QueryError: If the query fails.
        """
        users = self.tables.users
        with scoped_connection(self.engine, "user.find_by_session") as scope:
            rows = scope.fetch_all(select(users).where(users.c.session_id == session_id))
        if not rows:
            raise NotFoundError("user.find_by_session", "session", session_id)
        return row_to_user(rows[0])

    def create_session(self, user_id: int, session_id: str) -> None:
        """Store a new session token for a user.

        The caller is responsible for passing an existing user; an unknown
        id is logged and otherwise ignored.
        """
        users = self.tables.users
        with scoped_connection(self.engine, "user.create_session") as scope:
            matched = scope.modify(
                update(users).where(users.c.id == user_id).values(session_id=session_id)
            )
        if not matched:
            logger.warning("create_session matched no user with id %s", user_id)

    def update_external_token(self, user_id: int, external_token: str) -> None:
        """Replace the stored provider access token of a user.

        Raises:
            NotFoundError: If the user does not exist.
            QueryError: If the update fails.
        """
        users = self.tables.users
        with scoped_connection(self.engine, "user.update_external_token") as scope:
            matched = scope.modify(
                update(users)
                .where(users.c.id == user_id)
                .values(facebook_token=external_token)
            )
        if not matched:
            raise NotFoundError("user.update_external_token", "user", user_id)

    def terminate_session(self, user_id: int) -> None:
        """Clear the session token of a user."""
        users = self.tables.users
        with scoped_connection(self.engine, "user.terminate_session") as scope:
            scope.modify(update(users).where(users.c.id == user_id).values(session_id=None))

    def get_profile(self, user_id: int) -> UserProfile:
        """Get the profile fields of a user.

        Raises:
            NotFoundError: If the user does not exist.
            QueryError: If the query fails.
        """
        users = self.tables.users
        query = select(
            users.c.first_name,
            users.c.last_name,
            users.c.email,
            users.c.tutor_profile_id,
        ).where(users.c.id == user_id)
        with scoped_connection(self.engine, "user.get_profile") as scope:
            rows = scope.fetch_all(query)
        if not rows:
            logger.error("get_profile returned nothing for user ID %s", user_id)
            raise NotFoundError("user.get_profile", "user", user_id)
        return row_to_user_profile(rows[0])

    def create(
        self,
        first_name: str,
        last_name: str,
        email: Optional[str],
        external_id: str,
        external_token: str,
    ) -> int:
        """Create a new user.

        Args:
            first_name: First name.
            last_name: Last name.
            email: Email address.
            external_id: Social login provider id; must be unique.
            external_token: Provider access token.

        Returns:
            The generated user id.

        Raises:
            QueryError: If the insert fails, e.g. the external id is taken.
        """
        statement = insert(self.tables.users).values(
            first_name=first_name,
            last_name=last_name,
            email=email,
            facebook_id=external_id,
            facebook_token=external_token,
        )
        with scoped_connection(self.engine, "user.create") as scope:
            user_id = scope.insert(statement)
        logger.info("Created user %s for external id %s", user_id, external_id)
        return user_id

    def is_tutor(self, user_id: int) -> bool:
        """Check whether a user has a tutor profile.

        Raises:
            NotFoundError: If the user does not exist.
            QueryError: If the query fails.
        """
        users = self.tables.users
        with scoped_connection(self.engine, "user.is_tutor") as scope:
            rows = scope.fetch_all(
                select(users.c.tutor_profile_id).where(users.c.id == user_id)
            )
        if not rows:
            raise NotFoundError("user.is_tutor", "user", user_id)
        return bool(rows[0].tutor_profile_id)
