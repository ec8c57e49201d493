import json

from carevault.core.codec import decode
from carevault.core.storage import StorageKeys
from carevault.seed import demo_patients, demo_records, initialize_app_data


async def test_seeds_empty_store(store):
    assert await initialize_app_data(store) is True

    patients = json.loads(await store.get(StorageKeys.PATIENTS))
    records = json.loads(await store.get(StorageKeys.MEDICAL_RECORDS))
    assert [p["id"] for p in patients] == ["P001", "P002", "P003", "P004", "P005"]
    assert len(records) == 5
    for record in records:
        assert decode(record["encryptedContent"]) == record["content"]


async def test_seeding_is_not_a_user_change(store):
    """Seeding writes directly, so no sync is marked."""
    await initialize_app_data(store)
    assert await store.get(StorageKeys.SYNC_STATUS) is None


async def test_does_not_overwrite_existing_data(store):
    await store.set(StorageKeys.PATIENTS, "[]")
    assert await initialize_app_data(store) is True
    assert await store.get(StorageKeys.PATIENTS) == "[]"
    assert await store.get(StorageKeys.MEDICAL_RECORDS) is not None

    assert await initialize_app_data(store) is False


def test_demo_records_reference_demo_patients():
    ids = {p.id for p in demo_patients()}
    for record in demo_records():
        assert record.patient_id in ids
        assert record.patient_name != "Unknown"


async def test_empty_values_count_as_missing(store):
    await store.set(StorageKeys.PATIENTS, "")
    await store.set(StorageKeys.MEDICAL_RECORDS, "")

    assert await initialize_app_data(store) is True
    assert len(json.loads(await store.get(StorageKeys.PATIENTS))) == 5
    assert len(json.loads(await store.get(StorageKeys.MEDICAL_RECORDS))) == 5
