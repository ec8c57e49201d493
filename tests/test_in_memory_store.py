import pytest

from carevault.stores.in_memory import InMemoryStore


async def test_set_and_get(store):
    """A value written under a key is read back unchanged."""
    await store.set("patients", "[]")
    assert await store.get("patients") == "[]"


async def test_get_missing_key_returns_none(store):
    assert await store.get("nope") is None


async def test_set_overwrites(store):
    """Last write wins; there is no merge."""
    await store.set("userRole", "admin")
    await store.set("userRole", "nurse")
    assert await store.get("userRole") == "nurse"


async def test_remove_and_clear(store):
    await store.set("a", "1")
    await store.set("b", "2")

    await store.remove("a")
    await store.remove("a")  # removing twice is harmless
    assert await store.get("a") is None
    assert await store.get("b") == "2"

    await store.clear()
    assert store.data == {}


async def test_rejects_non_string_values(store):
    with pytest.raises(TypeError):
        await store.set("patients", [])


async def test_initial_contents_are_copied():
    initial = {"lastSync": "2025-01-01T00:00:00.000Z"}
    store = InMemoryStore(initial)
    await store.clear()
    assert initial == {"lastSync": "2025-01-01T00:00:00.000Z"}
