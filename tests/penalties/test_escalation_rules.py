from datetime import datetime, timedelta

import pytest

from src.volunteer_hub.volunteer_hub.core.enums import PenaltyStatus, PenaltyType
from src.volunteer_hub.volunteer_hub.penalties.escalation import decide_escalation
from src.volunteer_hub.volunteer_hub.penalties.model import Penalty, is_effective


@pytest.mark.parametrize("count", [0, 1, 2, 4, 6])
def test_counts_between_tiers_issue_nothing(count):
    assert decide_escalation(count) is None


def test_third_absence_is_a_warning_without_expiry():
    template = decide_escalation(3)

    assert template.type == PenaltyType.WARNING
    assert template.reason == "Multiple Absences"
    assert template.expires_at(datetime(2025, 1, 1)) is None


def test_fifth_absence_restricts_for_thirty_days():
    now = datetime(2025, 1, 1, 9, 30)
    template = decide_escalation(5)

    assert template.type == PenaltyType.TEMPORARY_RESTRICTION
    assert template.reason == "Excessive Absences"
    assert template.expires_at(now) == now + timedelta(days=30)


@pytest.mark.parametrize("count", [7, 8, 12])
def test_seven_or_more_absences_suspend_for_sixty_days(count):
    now = datetime(2025, 1, 1)
    template = decide_escalation(count)

    assert template.type == PenaltyType.SUSPENSION
    assert template.expires_at(now) == now + timedelta(days=60)
    assert str(count) in template.description


def _penalty(**overrides):
    values = dict(
        penalty_id=1,
        user_id=1,
        type=PenaltyType.TEMPORARY_RESTRICTION,
        status=PenaltyStatus.ACTIVE,
        reason="r",
        created_at=datetime(2025, 1, 1),
    )
    values.update(overrides)
    return Penalty(**values)


def test_effective_requires_active_status_and_future_expiry():
    now = datetime(2025, 2, 1)

    assert is_effective(_penalty(expires_at=None), now)
    assert is_effective(_penalty(expires_at=now + timedelta(seconds=1)), now)
    assert not is_effective(_penalty(expires_at=now), now)
    assert not is_effective(_penalty(expires_at=now - timedelta(days=1)), now)
    assert not is_effective(_penalty(status=PenaltyStatus.RESOLVED), now)
    assert not is_effective(_penalty(status=PenaltyStatus.EXPIRED), now)
