from tutor_buddy.schemas.batch import OwnershipStatus


def test_tutor_batch_student_lifecycle(gateway):
    user_id = gateway.user.create("Uma", "One", "uma@example.com", "fb-u1", "tok-u1")
    assert gateway.user.is_tutor(user_id) is False

    tutor_id = gateway.tutor.create_profile(user_id)
    assert gateway.user.is_tutor(user_id) is True

    batch_id = gateway.batch.create(tutor_id, "Algebra I", "Math", "12 Elm St")
    assert gateway.batch.get_owner(batch_id).tutor_id == tutor_id

    student_id = gateway.student.add_to_batch(
        batch_id, "Ann", "Lee", "555-0100", "ann@example.com"
    )
    [student] = gateway.student.list_for_batch(batch_id)
    assert student.id == student_id
    assert student.verified is False

    gateway.batch.delete(batch_id)
    assert gateway.batch.get_owner(batch_id).status == OwnershipStatus.NOT_FOUND
    assert gateway.batch.list_for_tutor(tutor_id) == []


def test_test_mode_uses_suffixed_tables(gateway):
    assert gateway.tables.users.name == "users-test"
    assert gateway.tables.batch_student_map.name == "batch_student_map-test"
