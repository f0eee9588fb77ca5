"""Batch schema definitions.

This module defines the Batch model and the tagged result returned when
looking up the owner of a batch.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Batch(BaseModel):
    """A named teaching group."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    subject: Optional[str] = None
    address_text: Optional[str] = None


class OwnershipStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    INTEGRITY_VIOLATION = "integrity_violation"


class BatchOwnership(BaseModel):
    """Result of an owner lookup.

    Exactly one of three outcomes: the single owning tutor was found, no
    owner was found, or more than one owner was found (a data-integrity
    violation). ``tutor_id`` is set only for ``FOUND``.
    """

    model_config = ConfigDict(frozen=True)

    batch_id: int
    status: OwnershipStatus
    tutor_id: Optional[int] = None

    @model_validator(mode="after")
    def check_tutor_id(self) -> "BatchOwnership":
        if (self.status == OwnershipStatus.FOUND) != (self.tutor_id is not None):
            raise ValueError("tutor_id must be set exactly when status is 'found'")
        return self

    @classmethod
    def found(cls, batch_id: int, tutor_id: int) -> "BatchOwnership":
        return cls(batch_id=batch_id, status=OwnershipStatus.FOUND, tutor_id=tutor_id)

    @classmethod
    def not_found(cls, batch_id: int) -> "BatchOwnership":
        return cls(batch_id=batch_id, status=OwnershipStatus.NOT_FOUND)

    @classmethod
    def integrity_violation(cls, batch_id: int) -> "BatchOwnership":
        return cls(batch_id=batch_id, status=OwnershipStatus.INTEGRITY_VIOLATION)

    @property
    def is_found(self) -> bool:
        return self.status == OwnershipStatus.FOUND

    def is_owned_by(self, tutor_id: int) -> bool:
        return self.is_found and self.tutor_id == tutor_id


# --- API models ---

class CreateBatchRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subject: Optional[str] = Field(default=None, max_length=255)
    address_text: Optional[str] = None


class CreateBatchResponse(BaseModel):
    batch_id: int
