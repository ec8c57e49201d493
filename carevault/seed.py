"""Demo patients and records written into an empty store on first start."""
import json
from typing import List

from carevault.core.codec import encode
from carevault.core.config import get_logger
from carevault.core.storage import BaseKeyValueStore, StorageKeys
from carevault.models import MedicalRecord, Patient

logger = get_logger(__name__)


def demo_patients() -> List[Patient]:
    rows = [
        ("P001", "John", "Smith", "1985-03-15", "Male", "+1-555-0101", "john.smith@email.com",
         "123 Main St, New York, NY 10001", "O+", "Penicillin", "2025-01-15", "2025-02-20", "low"),
        ("P002", "Sarah", "Johnson", "1978-07-22", "Female", "+1-555-0102", "sarah.j@email.com",
         "456 Oak Ave, Los Angeles, CA 90001", "A+", "None", "2025-01-18", "2025-02-15", "medium"),
        ("P003", "Michael", "Davis", "1992-11-08", "Male", "+1-555-0103", "m.davis@email.com",
         "789 Pine Rd, Chicago, IL 60601", "B+", "Latex, Aspirin", "2025-01-20", "2025-03-01", "low"),
        ("P004", "Emily", "Brown", "1965-05-30", "Female", "+1-555-0104", "emily.brown@email.com",
         "321 Elm St, Houston, TX 77001", "AB+", "Shellfish", "2025-01-12", "2025-02-10", "high"),
        ("P005", "David", "Wilson", "1988-09-17", "Male", "+1-555-0105", "d.wilson@email.com",
         "654 Maple Dr, Phoenix, AZ 85001", "O-", "Peanuts", "2025-01-22", "2025-02-25", "medium"),
    ]
    fields = ("id", "first_name", "last_name", "date_of_birth", "gender", "phone", "email",
              "address", "blood_type", "allergies", "last_visit", "next_appointment", "risk_level")
    return [Patient(**dict(zip(fields, row))) for row in rows]


def demo_records() -> List[MedicalRecord]:
    names = {p.id: p.full_name for p in demo_patients()}
    rows = [
        ("R001", "P001", "note", "Annual Physical Examination",
         "Patient presents for routine annual physical. Vitals stable. No acute concerns noted.",
         "2025-01-15", "Dr. Anderson"),
        ("R002", "P001", "lab", "Blood Work - Complete Panel",
         "Complete blood count and metabolic panel. All values within normal range.",
         "2025-01-10", "Lab Tech"),
        ("R003", "P002", "prescription", "Blood Pressure Medication",
         "Lisinopril 10mg, once daily. 30-day supply with 2 refills.",
         "2025-01-18", "Dr. Martinez"),
        ("R004", "P003", "imaging", "Chest X-Ray",
         "Routine chest x-ray. No abnormalities detected. Lungs clear.",
         "2025-01-20", "Radiology Dept"),
        ("R005", "P004", "note", "Follow-up Visit - Diabetes Management",
         "Blood sugar levels improving with current medication. Patient demonstrates good understanding of diet modifications.",
         "2025-01-12", "Dr. Chen"),
    ]
    return [
        MedicalRecord(
            id=rid, patient_id=pid, patient_name=names.get(pid, "Unknown"), type=rtype, title=title,
            content=content, encrypted_content=encode(content), date=day, uploaded_by=author,
        )
        for rid, pid, rtype, title, content, day, author in rows
    ]


async def initialize_app_data(storage: BaseKeyValueStore) -> bool:
    """Seeds demo collections that are missing. Returns True if anything was written.

    Seeding writes straight to storage: it is not a user change, so nothing
    is marked for sync.
    """
    seeded = False
    if not await storage.get(StorageKeys.PATIENTS):
        await storage.set(StorageKeys.PATIENTS, json.dumps([p.to_storage() for p in demo_patients()]))
        seeded = True
    if not await storage.get(StorageKeys.MEDICAL_RECORDS):
        await storage.set(StorageKeys.MEDICAL_RECORDS, json.dumps([r.to_storage() for r in demo_records()]))
        seeded = True
    if seeded:
        logger.info("Seeded demo patients and records")
    return seeded
