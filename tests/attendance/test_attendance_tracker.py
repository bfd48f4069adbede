from datetime import datetime, timedelta

import pytest

from src.volunteer_hub.volunteer_hub.core.enums import AttendanceStatus, PenaltyType, Role
from src.volunteer_hub.volunteer_hub.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import RecordingLock, World


def _absent_history(world, volunteer, organization, marks):
    """Seed ABSENT applications for ``volunteer`` marked at the given instants."""
    for i, marked_at in enumerate(marks):
        post_id = world.add_post(organization, title=f"Past event {i}")
        world.add_application(volunteer, post_id, attendance=AttendanceStatus.ABSENT, marked_at=marked_at)


def _mark_new_absence(world, volunteer, organization, now):
    post_id = world.add_post(organization, title="Today")
    application_id = world.add_application(volunteer, post_id)
    return world.container.attendance_tracker.mark_attendance(organization, application_id, "ABSENT", now=now)


def test_mark_present_records_timestamp_and_issues_nothing(world, organization, volunteer, fixed_now):
    post_id = world.add_post(organization)
    application_id = world.add_application(volunteer, post_id)

    result = world.container.attendance_tracker.mark_attendance(organization, application_id, "PRESENT", now=fixed_now)

    assert result.application.attendance_status == AttendanceStatus.PRESENT
    assert result.application.attendance_marked_at == fixed_now
    assert result.penalty is None
    assert world.penalties.penalties == {}


def test_resetting_to_not_marked_clears_timestamp(world, organization, volunteer, fixed_now):
    post_id = world.add_post(organization)
    application_id = world.add_application(volunteer, post_id, attendance=AttendanceStatus.PRESENT, marked_at=fixed_now)

    result = world.container.attendance_tracker.mark_attendance(organization, application_id, "NOT_MARKED", now=fixed_now)

    assert result.application.attendance_status == AttendanceStatus.NOT_MARKED
    assert result.application.attendance_marked_at is None


def test_third_recent_absence_issues_warning(world, organization, volunteer, fixed_now):
    _absent_history(world, volunteer, organization, [fixed_now - timedelta(days=10), fixed_now - timedelta(days=20)])

    result = _mark_new_absence(world, volunteer, organization, fixed_now)

    assert result.recent_absences == 3
    assert result.penalty.type == PenaltyType.WARNING
    assert result.penalty.expires_at is None
    assert result.penalty.issued_by is None


def test_fifth_absence_restricts_and_seventh_suspends(world, organization, volunteer, fixed_now):
    _absent_history(world, volunteer, organization, [fixed_now - timedelta(days=d) for d in (1, 2, 3, 4)])

    fifth = _mark_new_absence(world, volunteer, organization, fixed_now)
    sixth = _mark_new_absence(world, volunteer, organization, fixed_now)
    seventh = _mark_new_absence(world, volunteer, organization, fixed_now)

    assert fifth.penalty.type == PenaltyType.TEMPORARY_RESTRICTION
    assert fifth.penalty.expires_at == fixed_now + timedelta(days=30)
    assert sixth.penalty is None
    assert seventh.penalty.type == PenaltyType.SUSPENSION
    assert seventh.penalty.expires_at == fixed_now + timedelta(days=60)


def test_every_absence_from_seven_on_suspends_again(world, organization, volunteer, fixed_now):
    _absent_history(world, volunteer, organization, [fixed_now - timedelta(days=d) for d in range(1, 8)])

    result = _mark_new_absence(world, volunteer, organization, fixed_now)

    assert result.recent_absences == 8
    assert result.penalty.type == PenaltyType.SUSPENSION


def test_absences_outside_ninety_days_are_not_counted(world, organization, volunteer, fixed_now):
    window_start = fixed_now - timedelta(days=90)
    _absent_history(
        world,
        volunteer,
        organization,
        [window_start, fixed_now - timedelta(days=1), window_start - timedelta(milliseconds=1)],
    )

    result = _mark_new_absence(world, volunteer, organization, fixed_now)

    # The mark exactly at the window start still counts; the one just before it does not.
    assert result.recent_absences == 3
    assert result.penalty.type == PenaltyType.WARNING


def test_remarking_present_does_not_retract_penalty(world, organization, volunteer, fixed_now):
    _absent_history(world, volunteer, organization, [fixed_now - timedelta(days=1), fixed_now - timedelta(days=2)])
    result = _mark_new_absence(world, volunteer, organization, fixed_now)
    tracker = world.container.attendance_tracker

    tracker.mark_attendance(organization, result.application.application_id, "PRESENT", now=fixed_now)

    assert len(world.penalties.of_type(volunteer.user_id, PenaltyType.WARNING)) == 1
    assert tracker.recent_absences(volunteer.user_id, now=fixed_now) == 2


def test_remarking_absent_reissues_at_same_count(world, organization, volunteer, fixed_now):
    _absent_history(world, volunteer, organization, [fixed_now - timedelta(days=1), fixed_now - timedelta(days=2)])
    result = _mark_new_absence(world, volunteer, organization, fixed_now)
    application_id = result.application.application_id
    tracker = world.container.attendance_tracker

    tracker.mark_attendance(organization, application_id, "PRESENT", now=fixed_now)
    again = tracker.mark_attendance(organization, application_id, "ABSENT", now=fixed_now + timedelta(hours=1))

    assert again.penalty.type == PenaltyType.WARNING
    assert len(world.penalties.of_type(volunteer.user_id, PenaltyType.WARNING)) == 2


def test_only_post_author_may_mark(world, organization, volunteer, fixed_now):
    other_org = world.add_user(Role.ORGANIZATION, name="Other Org")
    post_id = world.add_post(organization)
    application_id = world.add_application(volunteer, post_id)

    with pytest.raises(AuthorizationError):
        world.container.attendance_tracker.mark_attendance(other_org, application_id, "ABSENT", now=fixed_now)

    assert world.applications.get_by_id(application_id).attendance_status == AttendanceStatus.NOT_MARKED


def test_invalid_status_and_missing_application(world, organization, volunteer, fixed_now):
    tracker = world.container.attendance_tracker
    post_id = world.add_post(organization)
    application_id = world.add_application(volunteer, post_id)

    with pytest.raises(ValidationError):
        tracker.mark_attendance(organization, application_id, "LATE", now=fixed_now)
    with pytest.raises(NotFoundError):
        tracker.mark_attendance(organization, 999, "PRESENT", now=fixed_now)


def test_marking_runs_under_the_volunteer_lock(fixed_now):
    lock = RecordingLock()
    world = World(volunteer_lock=lock)
    organization = world.add_user(Role.ORGANIZATION)
    volunteer = world.add_user(Role.VOLUNTEER)
    post_id = world.add_post(organization)
    application_id = world.add_application(volunteer, post_id)

    world.container.attendance_tracker.mark_attendance(organization, application_id, "ABSENT", now=fixed_now)

    assert lock.acquired == [volunteer.user_id]
    assert lock.held == set()


def _round_like_datetime3(value):
    # MySQL DATETIME(3) rounds half up to the millisecond.
    if value is None:
        return None
    millis = (value.microsecond + 500) // 1000
    return value.replace(microsecond=0) + timedelta(milliseconds=millis)


def test_absence_stored_at_millisecond_precision_is_counted(world, organization, volunteer):
    store = world.applications
    original_update = store.update_attendance

    def update_attendance(*, application_id, attendance_status, marked_at):
        return original_update(
            application_id=application_id,
            attendance_status=attendance_status,
            marked_at=_round_like_datetime3(marked_at),
        )

    store.update_attendance = update_attendance
    now = datetime(2025, 6, 1, 12, 0, 0, 123600)
    _absent_history(world, volunteer, organization, [now - timedelta(days=1), now - timedelta(days=2)])

    result = _mark_new_absence(world, volunteer, organization, now)

    assert result.application.attendance_marked_at == datetime(2025, 6, 1, 12, 0, 0, 123000)
    assert result.recent_absences == 3
    assert result.penalty.type == PenaltyType.WARNING
