import pytest

from carevault.core.storage import StorageKeys
from carevault.session import Role, Session


@pytest.fixture
def session(store):
    return Session(store)


async def test_login_writes_session_keys(store, session):
    role = await session.login("admin", "admin@health.gov")

    assert role == Role.ADMIN
    assert await store.get(StorageKeys.USER_ROLE) == "admin"
    assert await store.get(StorageKeys.USER_EMAIL) == "admin@health.gov"
    assert await store.get(StorageKeys.IS_AUTHENTICATED) == "true"
    assert await session.is_authenticated()
    assert await session.role() == Role.ADMIN


@pytest.mark.parametrize("email", ["", "nurse", "nurse@health", "a b@c.d"])
async def test_login_rejects_bad_email(session, email):
    with pytest.raises(ValueError):
        await session.login("nurse", email)
    assert not await session.is_authenticated()


async def test_login_rejects_unknown_role(session):
    with pytest.raises(ValueError):
        await session.login("doctor", "doc@health.gov")


async def test_require_role(session):
    with pytest.raises(PermissionError):
        await session.require_role("nurse")

    await session.login(Role.NURSE, "nurse@health.gov")
    await session.require_role("nurse")
    with pytest.raises(PermissionError):
        await session.require_role(Role.ADMIN)


async def test_unknown_stored_role_reads_as_none(store, session):
    await store.set(StorageKeys.USER_ROLE, "superuser")
    assert await session.role() is None


async def test_logout_clears_everything(store, session):
    await store.set(StorageKeys.PATIENTS, "[]")
    await session.login("nurse", "nurse@health.gov")
    await session.logout()

    assert not await session.is_authenticated()
    assert await session.email() is None
    assert store.data == {}
