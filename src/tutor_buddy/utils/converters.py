"""Conversions from database rows to schema objects."""

from datetime import datetime
from decimal import Decimal

import pytz
from sqlalchemy.engine import Row

from tutor_buddy.schemas.batch import Batch
from tutor_buddy.schemas.payment import Payment
from tutor_buddy.schemas.student import Student
from tutor_buddy.schemas.tutor import TutorProfile
from tutor_buddy.schemas.user import UserProfile, UserRecord


def row_to_user(row: Row) -> UserRecord:
    return UserRecord(**row._mapping)


def row_to_user_profile(row: Row) -> UserProfile:
    return UserProfile(**row._mapping)


def row_to_tutor_profile(row: Row) -> TutorProfile:
    return TutorProfile(**row._mapping)


def row_to_batch(row: Row) -> Batch:
    return Batch(**row._mapping)


def row_to_student(row: Row) -> Student:
    data = dict(row._mapping)
    data["verified"] = bool(data["verified"])
    return Student(**data)


def row_to_payment(row: Row) -> Payment:
    data = dict(row._mapping)
    data["amount"] = Decimal(str(data["amount"])).quantize(Decimal("0.01"))
    data["time"] = utc_from_storage(data["time"])
    return Payment(**data)


def utc_for_storage(value: datetime) -> datetime:
    """Normalize a timestamp to naive UTC for DATETIME columns.

    Naive input is taken to be UTC already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def utc_from_storage(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp read back from storage."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)
