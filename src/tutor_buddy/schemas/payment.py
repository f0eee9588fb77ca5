"""Payment schema definitions."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tutor_buddy.config import DEFAULT_CURRENCY


class Payment(BaseModel):
    """A payment recorded by a tutor for a student of one of their batches."""

    model_config = ConfigDict(frozen=True)

    id: int
    batch_id: int
    student_id: int
    amount: Decimal
    currency: str
    time: datetime = Field(description="When the payment was made, in UTC.")
    tutor_comment: Optional[str] = None


class RecordPaymentRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    currency: str = Field(default=DEFAULT_CURRENCY, pattern="^[A-Z]{3}$")
    time: Optional[datetime] = Field(
        default=None, description="Payment time; defaults to now. Naive values are UTC."
    )
    tutor_comment: Optional[str] = None


class RecordPaymentResponse(BaseModel):
    payment_id: int
