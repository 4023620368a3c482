"""
Tests for the credential service.
"""

import threading

import pytest

from core.entities import Role
from core.exceptions import (
    AccountDeactivatedError,
    DuplicateError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
)
from core.security import create_access_token, hash_password, verify_password
from core.storage import Query
from services import credentials as credentials_module
from services.credentials import PASSWORD_FIELD, public_user, user_summary


@pytest.mark.asyncio
async def test_register_hashes_password(credentials, storage):
    user = await credentials.register(name="Asha", email="Asha@Test.org", password="secret123")

    assert user["email"] == "asha@test.org"
    assert user["role"] == Role.MEMBER.value
    assert PASSWORD_FIELD not in user

    stored = await storage.users.find_one(Query.by_id(user["id"]))
    assert stored[PASSWORD_FIELD] != "secret123"
    assert stored[PASSWORD_FIELD].startswith("$2")


@pytest.mark.asyncio
async def test_register_duplicate_email(credentials):
    await credentials.register(name="Asha", email="asha@test.org", password="secret123")

    with pytest.raises(DuplicateError) as exc_info:
        await credentials.register(name="Other", email="ASHA@test.org", password="secret456")
    assert exc_info.value.message == "User already exists with this email"


@pytest.mark.asyncio
async def test_login_success_updates_last_login(credentials, storage):
    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")

    token, logged_in = await credentials.login(" Asha@test.org ", "secret123")

    assert token
    assert logged_in["id"] == user["id"]
    assert logged_in["lastLogin"] is not None
    assert PASSWORD_FIELD not in logged_in


@pytest.mark.asyncio
async def test_login_wrong_password(credentials):
    await credentials.register(name="Asha", email="asha@test.org", password="secret123")

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await credentials.login("asha@test.org", "wrong-pass")
    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(credentials):
    with pytest.raises(InvalidCredentialsError):
        await credentials.login("nobody@test.org", "secret123")


@pytest.mark.asyncio
async def test_login_deactivated(credentials, storage):
    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")
    await storage.users.update(Query.by_id(user["id"]), {"isActive": False})

    with pytest.raises(AccountDeactivatedError) as exc_info:
        await credentials.login("asha@test.org", "secret123")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_change_password(credentials):
    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await credentials.change_password(user["id"], "not-it", "newsecret")
    assert exc_info.value.message == "Current password is incorrect"

    await credentials.change_password(user["id"], "secret123", "newsecret")

    with pytest.raises(InvalidCredentialsError):
        await credentials.login("asha@test.org", "secret123")
    token, _ = await credentials.login("asha@test.org", "newsecret")
    assert token


@pytest.mark.asyncio
async def test_change_password_unknown_user(credentials):
    with pytest.raises(NotFoundError):
        await credentials.change_password("missing", "a", "bbbbbb")


@pytest.mark.asyncio
async def test_resolve_principal(credentials, test_settings):
    user = await credentials.register(
        name="Mod", email="mod@test.org", password="secret123", role=Role.MODERATOR
    )
    token = create_access_token(user["id"], user["role"], settings=test_settings)

    principal = await credentials.resolve_principal(token)

    assert principal["id"] == user["id"]
    assert principal["role"] == "moderator"
    assert PASSWORD_FIELD not in principal


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_resolve_principal_without_token(credentials, token):
    with pytest.raises(UnauthorizedError) as exc_info:
        await credentials.resolve_principal(token)
    assert exc_info.value.message == "No token provided"


@pytest.mark.asyncio
async def test_resolve_principal_deleted_user(credentials, storage, test_settings):
    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")
    token = create_access_token(user["id"], user["role"], settings=test_settings)
    await storage.users.delete(Query.by_id(user["id"]))

    with pytest.raises(UnauthorizedError) as exc_info:
        await credentials.resolve_principal(token)
    assert exc_info.value.message == "User not found"


@pytest.mark.asyncio
async def test_resolve_principal_deactivated(credentials, storage, test_settings):
    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")
    token = create_access_token(user["id"], user["role"], settings=test_settings)
    await storage.users.update(Query.by_id(user["id"]), {"isActive": False})

    with pytest.raises(UnauthorizedError) as exc_info:
        await credentials.resolve_principal(token)
    assert exc_info.value.message == "Account deactivated"


@pytest.mark.asyncio
async def test_ensure_default_admin_is_idempotent(credentials, storage, test_settings):
    assert await credentials.ensure_default_admin() is True
    assert await credentials.ensure_default_admin() is False

    admins = await storage.users.find_many(Query(equals={"role": "admin"}))
    assert len(admins) == 1
    assert admins[0]["email"] == test_settings.admin_email

    token, _ = await credentials.login(test_settings.admin_email, test_settings.admin_password)
    assert token


@pytest.mark.asyncio
async def test_ensure_default_admin_skips_when_admin_exists(credentials, storage):
    await credentials.register(
        name="Existing", email="boss@test.org", password="secret123", role=Role.ADMIN
    )

    assert await credentials.ensure_default_admin() is False
    assert await storage.users.count() == 1


def test_public_user_and_summary():
    doc = {
        "id": "u1",
        "name": "Asha",
        "email": "asha@test.org",
        PASSWORD_FIELD: "hash",
        "role": "member",
        "position": "Web Lead",
        "department": "CSE",
        "isActive": True,
    }

    assert PASSWORD_FIELD not in public_user(doc)
    assert PASSWORD_FIELD in doc
    assert user_summary(doc) == {
        "id": "u1",
        "name": "Asha",
        "email": "asha@test.org",
        "role": "member",
        "position": "Web Lead",
        "department": "CSE",
    }


@pytest.mark.asyncio
async def test_bcrypt_runs_off_the_event_loop(credentials, monkeypatch):
    loop_thread = threading.get_ident()
    seen: list[tuple[str, int]] = []

    def recording_hash(password, rounds=None):
        seen.append(("hash", threading.get_ident()))
        return hash_password(password, rounds)

    def recording_verify(password, hashed):
        seen.append(("verify", threading.get_ident()))
        return verify_password(password, hashed)

    monkeypatch.setattr(credentials_module, "hash_password", recording_hash)
    monkeypatch.setattr(credentials_module, "verify_password", recording_verify)

    user = await credentials.register(name="Asha", email="asha@test.org", password="secret123")
    await credentials.login("asha@test.org", "secret123")
    await credentials.change_password(user["id"], "secret123", "newsecret1")

    assert [step for step, _ in seen] == ["hash", "verify", "verify", "hash"]
    assert all(thread != loop_thread for _, thread in seen)
