import pytest

from src.volunteer_hub.volunteer_hub.common.http import to_json
from src.volunteer_hub.volunteer_hub.core.enums import Role
from src.volunteer_hub.volunteer_hub.core.exceptions import ValidationError


def test_profile_includes_organization_name_but_no_password(world, organization):
    profile = world.container.profile_service.get(organization)

    data = to_json(profile)
    assert profile.organization_name == "Green Org"
    assert data["role"] == "ORGANIZATION"
    assert "passwordHash" not in data


def test_partial_profile_update(world, volunteer):
    service = world.container.profile_service
    service.update(volunteer, bio="Weekend helper", location="Hanoi", skills=[" first aid ", "cooking", ""])

    profile = service.update(volunteer, name="Vera V.", location="")

    assert profile.name == "Vera V."
    assert profile.bio == "Weekend helper"
    assert profile.location is None
    assert profile.skills == ("first aid", "cooking")


def test_profile_update_validation(world, volunteer):
    service = world.container.profile_service

    with pytest.raises(ValidationError):
        service.update(volunteer, name="V")
    with pytest.raises(ValidationError):
        service.update(volunteer, skills="first aid")
    with pytest.raises(ValidationError):
        service.update(volunteer, skills=["first aid", 3])

    assert service.get(volunteer).name == "Vera Volunteer"


def test_volunteer_directory_lists_volunteers_newest_first(world, volunteer, organization, admin):
    newer = world.add_user(Role.VOLUNTEER, name="Nam")

    directory = world.container.profile_service.list_volunteers()

    assert [p.user_id for p in directory] == [newer.user_id, volunteer.user_id]
    assert all(p.role == Role.VOLUNTEER for p in directory)
