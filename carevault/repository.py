import asyncio
import uuid
from datetime import date, timedelta
from typing import Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from carevault.core.codec import decode, encode
from carevault.core.config import get_logger
from carevault.core.storage import StorageKeys
from carevault.core.sync_status import utc_timestamp
from carevault.models import (
    DashboardStats,
    MedicalRecord,
    Patient,
    PatientRecordGroup,
    RecordType,
    RiskLevel,
)
from carevault.orchestrator import SyncOrchestrator

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def new_id() -> str:
    return str(uuid.uuid4())


class PersistedCollection(Generic[T]):
    """A flat list of models stored as one JSON array under ``key``.

    Reads parse the whole array and writes replace it; every write goes
    through the orchestrator so it is marked for sync.
    """
    key: str
    model: Type[T]

    def __init__(self, orchestrator: SyncOrchestrator):
        self.orchestrator = orchestrator
        self.storage = orchestrator.storage
        self._adapter = TypeAdapter(List[self.model])

    async def load(self) -> List[T]:
        raw = await self.storage.get(self.key)
        if not raw:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Stored '{self.key}' is unreadable, treating as empty ({e.error_count()} error(s))")
            return []

    async def save(self, items: List[T]) -> asyncio.Task:
        return await self.orchestrator.save_and_sync(self.key, [item.to_storage() for item in items])

    async def add(self, item: T) -> T:
        async with self.orchestrator.lock_for(self.key):
            items = await self.load()
            items.append(item)
            await self.save(items)
        return item

    async def get(self, item_id: str) -> Optional[T]:
        for item in await self.load():
            if item.id == item_id:
                return item
        return None


class PatientRepository(PersistedCollection[Patient]):
    key = StorageKeys.PATIENTS
    model = Patient

    async def register(self, **fields) -> Patient:
        """Creates a patient with a fresh id from form fields (snake_case or camelCase)."""
        patient = Patient(id=new_id(), **fields)
        await self.add(patient)
        logger.info(f"Registered patient {patient.id}")
        return patient

    async def search(self, term: str = "") -> List[Patient]:
        needle = (term or "").lower()
        return [p for p in await self.load() if needle in p.full_name.lower()]


class MedicalRecordRepository(PersistedCollection[MedicalRecord]):
    key = StorageKeys.MEDICAL_RECORDS
    model = MedicalRecord

    def __init__(self, orchestrator: SyncOrchestrator, patients: Optional[PatientRepository] = None):
        super().__init__(orchestrator)
        self.patients = patients or PatientRepository(orchestrator)

    async def add_record(
            self,
            patient_id: str,
            type: Union[RecordType, str],
            title: str,
            content: str,
            uploaded_by: Optional[str] = None,
            file_url: Optional[str] = None,
    ) -> MedicalRecord:
        missing = [name for name, value in (
            ("patient_id", patient_id), ("type", type), ("title", title), ("content", content)
        ) if not value]
        if missing:
            raise ValueError(f"Missing required record fields: {', '.join(missing)}")

        patient = await self.patients.get(patient_id)
        if uploaded_by is None:
            # Attribute to whoever is signed in
            uploaded_by = await self.storage.get(StorageKeys.USER_EMAIL) or "Unknown"
        record = MedicalRecord(
            id=new_id(),
            patient_id=patient_id,
            patient_name=patient.full_name if patient else "Unknown",
            type=RecordType(type),
            title=title,
            content=content,
            encrypted_content=encode(content),
            date=utc_timestamp(),
            uploaded_by=uploaded_by,
            file_url=file_url,
        )
        await self.add(record)
        logger.info(f"Added {record.type.value} record {record.id} for patient {patient_id}")
        return record

    async def for_patient(self, patient_id: str) -> List[MedicalRecord]:
        return [r for r in await self.load() if r.patient_id == patient_id]

    async def grouped_by_patient(self) -> List[PatientRecordGroup]:
        """Groups records by patient, in order of each patient's first record."""
        groups: dict = {}
        for record in await self.load():
            group = groups.get(record.patient_id)
            if group is None:
                group = groups[record.patient_id] = PatientRecordGroup(
                    patient_id=record.patient_id, patient_name=record.patient_name
                )
            group.records.append(record)
        return list(groups.values())

    async def search_groups(self, term: str = "") -> List[PatientRecordGroup]:
        needle = (term or "").lower()
        return [
            g for g in await self.grouped_by_patient()
            if needle in g.patient_name.lower() or any(needle in r.title.lower() for r in g.records)
        ]

    @staticmethod
    def read_content(record: MedicalRecord) -> str:
        return decode(record.encrypted_content)


def _parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def dashboard_stats(patients: List[Patient], records: List[MedicalRecord], today: Optional[date] = None) -> DashboardStats:
    today = today or date.today()
    week_ago = today - timedelta(days=7)
    next_week = today + timedelta(days=7)

    recent = 0
    upcoming = 0
    for p in patients:
        visit = _parse_day(p.last_visit)
        if visit and visit > week_ago:
            recent += 1
        appointment = _parse_day(p.next_appointment)
        if appointment and today <= appointment <= next_week:
            upcoming += 1

    return DashboardStats(
        total_patients=len(patients),
        total_records=len(records),
        high_risk_patients=sum(1 for p in patients if p.risk_level == RiskLevel.HIGH),
        recent_visits=recent,
        upcoming_appointments=upcoming,
    )
