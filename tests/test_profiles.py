import uuid

import pytest

from app.core.errors import InvalidInput
from app.modules.profiles import service as profile_service
from app.modules.profiles.models import Profile, UserRole
from app.modules.profiles.schemas import ProfileUpdate

API = "/api/v1"


async def test_first_sight_provisions_a_user_profile(db):
    profile_id = uuid.uuid4()

    profile = await profile_service.get_or_create_profile(db, profile_id, "new@snapstudio.io")

    assert profile.id == profile_id
    assert profile.email == "new@snapstudio.io"
    assert profile.role == UserRole.USER
    assert await profile_service.get_or_create_profile(db, profile_id) is profile


async def test_taken_email_provisions_without_it(db, make_profile):
    await make_profile(email="taken@snapstudio.io")
    profile_id = uuid.uuid4()

    profile = await profile_service.get_or_create_profile(db, profile_id, "taken@snapstudio.io")

    assert profile.id == profile_id
    assert profile.email is None


async def test_concurrent_first_sight_returns_stored_profile(db, session_factory, monkeypatch):
    profile_id = uuid.uuid4()
    async with session_factory() as other:
        other.add(Profile(id=profile_id, email="race@snapstudio.io", role=UserRole.USER, balance=0))
        await other.commit()

    # The existence check runs before the other request commits
    async def not_there_yet(*args, **kwargs):
        return None

    monkeypatch.setattr(profile_service, "get_profile", not_there_yet)

    profile = await profile_service.get_or_create_profile(db, profile_id, "race@snapstudio.io")

    assert profile.id == profile_id
    assert profile.email == "race@snapstudio.io"


async def test_taken_username_is_invalid_input(db, make_profile):
    first = await make_profile()
    second = await make_profile()
    await profile_service.update_profile(db, first, ProfileUpdate(username="pixelsmith"))

    with pytest.raises(InvalidInput):
        await profile_service.update_profile(db, second, ProfileUpdate(username="pixelsmith"))


async def test_me_with_taken_email_still_signs_in(client, make_profile, auth_headers):
    await make_profile(email="taken@snapstudio.io")
    user_id = uuid.uuid4()

    response = await client.get(f"{API}/profiles/me", headers=auth_headers(user_id, "taken@snapstudio.io"))

    assert response.status_code == 200
    assert response.json()["id"] == str(user_id)
    assert response.json()["email"] is None


async def test_updating_to_taken_username_is_422(client, auth_headers):
    first, second = uuid.uuid4(), uuid.uuid4()
    await client.put(f"{API}/profiles/me", json={"username": "pixelsmith"}, headers=auth_headers(first))

    response = await client.put(f"{API}/profiles/me", json={"username": "pixelsmith"}, headers=auth_headers(second))

    assert response.status_code == 422
    assert response.json()["kind"] == "InvalidInput"
