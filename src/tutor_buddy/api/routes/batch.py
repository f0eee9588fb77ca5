"""Batch, student and payment routes.

Every route acting on an existing batch first checks that the calling tutor
owns it.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from tutor_buddy.core.dependencies import CurrentTutorIdDep, GatewayDep
from tutor_buddy.schemas.batch import (
    Batch,
    CreateBatchRequest,
    CreateBatchResponse,
    OwnershipStatus,
)
from tutor_buddy.schemas.payment import (
    Payment,
    RecordPaymentRequest,
    RecordPaymentResponse,
)
from tutor_buddy.schemas.student import AddStudentRequest, AddStudentResponse, Student
from tutor_buddy.utils.gateway import StoreGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Batch"])


def _require_owner(gateway: StoreGateway, batch_id: int, tutor_id: int) -> None:
    ownership = gateway.batch.get_owner(batch_id)
    if ownership.status == OwnershipStatus.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Batch not found",
        )
    if ownership.status == OwnershipStatus.INTEGRITY_VIOLATION:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Batch has more than one owner",
        )
    if not ownership.is_owned_by(tutor_id):
        logger.warning(
            "Tutor %s tried to access batch %s owned by %s",
            tutor_id,
            batch_id,
            ownership.tutor_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the batch owner can access this batch",
        )


@router.get("/batches", response_model=List[Batch], summary="List my batches")
def list_batches(tutor_id: CurrentTutorIdDep, gateway: GatewayDep) -> List[Batch]:
    return gateway.batch.list_for_tutor(tutor_id)


@router.post(
    "/batches",
    response_model=CreateBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a batch",
)
def create_batch(
    req: CreateBatchRequest, tutor_id: CurrentTutorIdDep, gateway: GatewayDep
) -> CreateBatchResponse:
    name = req.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Batch name cannot be empty.",
        )
    batch_id = gateway.batch.create(tutor_id, name, req.subject, req.address_text)
    return CreateBatchResponse(batch_id=batch_id)


@router.delete(
    "/batch/{batch_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a batch",
)
def delete_batch(batch_id: int, tutor_id: CurrentTutorIdDep, gateway: GatewayDep) -> None:
    _require_owner(gateway, batch_id, tutor_id)
    gateway.batch.delete(batch_id)


@router.get(
    "/batch/{batch_id}/students",
    response_model=List[Student],
    summary="List students of a batch",
)
def list_students(
    batch_id: int, tutor_id: CurrentTutorIdDep, gateway: GatewayDep
) -> List[Student]:
    _require_owner(gateway, batch_id, tutor_id)
    return gateway.student.list_for_batch(batch_id)


@router.post(
    "/batch/{batch_id}/students",
    response_model=AddStudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a student to a batch",
)
def add_student(
    batch_id: int,
    req: AddStudentRequest,
    tutor_id: CurrentTutorIdDep,
    gateway: GatewayDep,
) -> AddStudentResponse:
    _require_owner(gateway, batch_id, tutor_id)
    student_id = gateway.student.add_to_batch(
        batch_id, req.first_name, req.last_name, req.phone, req.email
    )
    return AddStudentResponse(student_id=student_id)


@router.post(
    "/batch/{batch_id}/student/{student_id}/payments",
    response_model=RecordPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
def record_payment(
    batch_id: int,
    student_id: int,
    req: RecordPaymentRequest,
    tutor_id: CurrentTutorIdDep,
    gateway: GatewayDep,
) -> RecordPaymentResponse:
    _require_owner(gateway, batch_id, tutor_id)
    enrolled = {student.id for student in gateway.student.list_for_batch(batch_id)}
    if student_id not in enrolled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student is not enrolled in this batch",
        )
    payment_id = gateway.payment.record(
        batch_id,
        student_id,
        req.amount,
        currency=req.currency,
        time=req.time,
        tutor_comment=req.tutor_comment,
    )
    return RecordPaymentResponse(payment_id=payment_id)


@router.get(
    "/batch/{batch_id}/payments",
    response_model=List[Payment],
    summary="List payments of a batch",
)
def list_payments(
    batch_id: int, tutor_id: CurrentTutorIdDep, gateway: GatewayDep
) -> List[Payment]:
    _require_owner(gateway, batch_id, tutor_id)
    return gateway.payment.list_for_batch(batch_id)
