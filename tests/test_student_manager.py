import pytest

from tutor_buddy.core.exceptions import StatementError


def test_add_to_batch_then_list(gateway, batch_id):
    student_id = gateway.student.add_to_batch(
        batch_id, "Ann", "Lee", "555-0100", "ann@example.com"
    )

    students = gateway.student.list_for_batch(batch_id)
    assert len(students) == 1
    student = students[0]
    assert student.id == student_id
    assert student.first_name == "Ann"
    assert student.last_name == "Lee"
    assert student.phone == "555-0100"
    assert student.email == "ann@example.com"
    assert student.verified is False


def test_list_for_batch_is_scoped_to_batch(gateway, tutor_id, batch_id):
    other_batch = gateway.batch.create(tutor_id, "Physics", "Science", "3 Oak Rd")
    gateway.student.add_to_batch(batch_id, "Ann", "Lee", None, None)
    gateway.student.add_to_batch(other_batch, "Bo", "Kim", None, None)

    assert [s.first_name for s in gateway.student.list_for_batch(batch_id)] == ["Ann"]
    assert [s.first_name for s in gateway.student.list_for_batch(other_batch)] == ["Bo"]


def test_list_for_empty_batch(gateway, batch_id):
    assert gateway.student.list_for_batch(batch_id) == []


def test_add_to_batch_failing_mapping_writes_nothing(gateway, batch_id, count_rows):
    gateway.tables.batch_student_map.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.student.add_to_batch(batch_id, "Ann", "Lee", "555-0100", "ann@example.com")
    assert exc_info.value.step == "map_student"
    assert count_rows(gateway.tables.students) == 0


def test_add_to_batch_failing_insert(gateway, batch_id):
    gateway.tables.students.drop(gateway.engine)

    with pytest.raises(StatementError) as exc_info:
        gateway.student.add_to_batch(batch_id, "Ann", "Lee", "555-0100", "ann@example.com")
    assert exc_info.value.step == "insert_student"
