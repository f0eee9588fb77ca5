from decimal import Decimal

import pytest
from sqlalchemy import insert

from tutor_buddy.core.exceptions import StatementError
from tutor_buddy.schemas.batch import OwnershipStatus


def test_create_then_get_owner(gateway, tutor_id, batch_id):
    ownership = gateway.batch.get_owner(batch_id)
    assert ownership.status == OwnershipStatus.FOUND
    assert ownership.tutor_id == tutor_id
    assert ownership.is_owned_by(tutor_id)


def test_list_for_tutor(gateway, tutor_id, batch_id):
    second = gateway.batch.create(tutor_id, "Physics", "Science", "3 Oak Rd")

    batches = gateway.batch.list_for_tutor(tutor_id)
    assert [batch.id for batch in batches] == [batch_id, second]
    assert batches[0].name == "Algebra I"
    assert batches[0].subject == "Math"
    assert batches[0].address_text == "12 Elm St"


def test_list_for_tutor_without_batches(gateway, tutor_id):
    assert gateway.batch.list_for_tutor(tutor_id) == []


def test_list_for_tutor_only_returns_own_batches(gateway, tutor_id, batch_id):
    other_user = gateway.user.create("Oz", "Other", "oz@example.com", "fb-200", "tok")
    other_tutor = gateway.tutor.create_profile(other_user)
    gateway.batch.create(other_tutor, "Chemistry", "Science", "")

    assert [batch.id for batch in gateway.batch.list_for_tutor(tutor_id)] == [batch_id]


def test_get_owner_not_found(gateway):
    ownership = gateway.batch.get_owner(404)
    assert ownership.status == OwnershipStatus.NOT_FOUND
    assert ownership.tutor_id is None
    assert not ownership.is_found


def test_get_owner_multiple_owners(gateway, tutor_id, batch_id):
    with gateway.engine.begin() as conn:
        conn.execute(
            insert(gateway.tables.tutor_batch_map).values(tutor_id=tutor_id + 1, batch_id=batch_id)
        )

    ownership = gateway.batch.get_owner(batch_id)
    assert ownership.status == OwnershipStatus.INTEGRITY_VIOLATION
    assert ownership.tutor_id is None
    assert not ownership.is_owned_by(tutor_id)


def test_create_failing_mapping_writes_nothing(gateway, tutor_id, count_rows):
    gateway.tables.tutor_batch_map.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.create(tutor_id, "Algebra I", "Math", "12 Elm St")
    assert exc_info.value.step == "map_owner"
    assert exc_info.value.operation == "batch.create"
    assert count_rows(gateway.tables.batches) == 0


def test_delete(gateway, tutor_id, batch_id, count_rows):
    gateway.batch.delete(batch_id)

    assert gateway.batch.get_owner(batch_id).status == OwnershipStatus.NOT_FOUND
    assert gateway.batch.list_for_tutor(tutor_id) == []
    assert count_rows(gateway.tables.batches) == 0


def test_delete_removes_enrolments_and_payments_but_keeps_students(
    gateway, batch_id, count_rows
):
    student_id = gateway.student.add_to_batch(batch_id, "Ann", "Lee", "555-0100", "ann@example.com")
    gateway.payment.record(batch_id, student_id, Decimal("500.00"))

    gateway.batch.delete(batch_id)

    assert gateway.student.list_for_batch(batch_id) == []
    assert gateway.payment.list_for_batch(batch_id) == []
    assert count_rows(gateway.tables.students) == 1


def test_delete_without_owner_row(gateway, batch_id, count_rows):
    with gateway.engine.begin() as conn:
        conn.execute(gateway.tables.tutor_batch_map.delete())

    gateway.batch.delete(batch_id)
    assert count_rows(gateway.tables.batches) == 0


def test_delete_failing_late_step_keeps_batch_and_owner(gateway, tutor_id, batch_id):
    gateway.tables.payments.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.delete(batch_id)
    assert exc_info.value.step == "delete_payments"

    assert gateway.batch.get_owner(batch_id).tutor_id == tutor_id
    assert [batch.id for batch in gateway.batch.list_for_tutor(tutor_id)] == [batch_id]


def test_create_failing_first_step_writes_nothing(gateway, tutor_id, count_rows):
    gateway.tables.batches.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.create(tutor_id, "Algebra I", "Math", "12 Elm St")
    assert exc_info.value.step == "insert_batch"
    assert count_rows(gateway.tables.tutor_batch_map) == 0


def test_delete_failing_first_step_keeps_owner(gateway, tutor_id, batch_id, count_rows):
    gateway.tables.batches.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.delete(batch_id)
    assert exc_info.value.step == "delete_batch"
    assert gateway.batch.get_owner(batch_id).tutor_id == tutor_id
    assert count_rows(gateway.tables.tutor_batch_map) == 1


def test_delete_failing_owner_step_keeps_batch(gateway, batch_id, count_rows):
    gateway.tables.tutor_batch_map.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.delete(batch_id)
    assert exc_info.value.step == "delete_owner"
    assert count_rows(gateway.tables.batches, gateway.tables.batches.c.id == batch_id) == 1


def test_delete_failing_enrolment_step_keeps_batch_and_owner(
    gateway, tutor_id, batch_id, count_rows
):
    gateway.student.add_to_batch(batch_id, "Ann", "Lee", None, None)
    gateway.tables.batch_student_map.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.batch.delete(batch_id)
    assert exc_info.value.step == "delete_students"
    assert count_rows(gateway.tables.batches) == 1
    assert gateway.batch.get_owner(batch_id).tutor_id == tutor_id
