"""Custom exception classes for Tutor Buddy.

Every fault raised by the data-access layer derives from ``StoreError`` and
chains the underlying driver exception as ``__cause__``.
"""

from typing import Any, Optional


class TutorBuddyError(Exception):
    """Base exception for all Tutor Buddy errors."""

    pass


class ConfigurationError(TutorBuddyError):
    """Raised when there is a configuration error."""

    pass


class StoreError(TutorBuddyError):
    """Base exception for relational store failures."""

    def __init__(self, operation: str, message: Optional[str] = None):
        """Initialize the exception.

        Args:
            operation: Name of the gateway operation that failed.
            message: Optional human readable detail.
        """
        self.operation = operation
        super().__init__(message or f"Store operation '{operation}' failed")


class QueryError(StoreError):
    """Raised when a single statement fails (connectivity, constraint, syntax)."""

    pass


class NotFoundError(StoreError):
    """Raised when a lookup finds zero rows where exactly one was expected."""

    def __init__(self, operation: str, entity: str, key: Any):
        """Initialize the exception.

        Args:
            operation: Name of the gateway operation.
            entity: Kind of record that was looked up, e.g. ``user``.
            key: The lookup key that matched nothing.
        """
        self.entity = entity
        self.key = key
        super().__init__(operation, f"{entity.capitalize()} '{key}' not found")


class TransactionError(StoreError):
    """Base exception for failures inside a multi-statement operation.

    When raised, the transaction has already been rolled back.
    """

    pass


class TransactionStartError(TransactionError):
    """Raised when a transaction cannot be started."""

    def __init__(self, operation: str):
        super().__init__(operation, f"Could not start transaction for '{operation}'")


class StatementError(TransactionError):
    """Raised when one step of a transaction fails."""

    def __init__(self, operation: str, step: str, message: Optional[str] = None):
        """Initialize the exception.

        Args:
            operation: Name of the gateway operation.
            step: Name of the step that failed.
            message: Optional detail replacing the default message.
        """
        self.step = step
        super().__init__(
            operation, message or f"Step '{step}' of '{operation}' failed"
        )


class TutorProfileExistsError(TransactionError):
    """Raised when provisioning a tutor profile for a user who already has one."""

    def __init__(self, operation: str, user_id: int, tutor_profile_id: int):
        """Initialize the exception.

        Args:
            operation: Name of the gateway operation.
            user_id: Id of the user.
            tutor_profile_id: Tutor profile already linked to the user.
        """
        self.user_id = user_id
        self.tutor_profile_id = tutor_profile_id
        super().__init__(
            operation,
            f"User '{user_id}' already has tutor profile '{tutor_profile_id}'",
        )


class CommitError(TransactionError):
    """Raised when committing a transaction fails."""

    def __init__(self, operation: str):
        super().__init__(operation, f"Could not commit transaction for '{operation}'")
