from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecordType(str, Enum):
    NOTE = "note"
    LAB = "lab"
    PRESCRIPTION = "prescription"
    IMAGING = "imaging"


class _StoredModel(BaseModel):
    # Stored JSON uses camelCase keys; Python code uses snake_case
    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==========================================
# Patients
# ==========================================
class Patient(_StoredModel):
    id: str
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    date_of_birth: str = Field("", alias="dateOfBirth")
    gender: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    blood_type: str = Field("", alias="bloodType")
    allergies: str = ""
    last_visit: Optional[str] = Field(None, alias="lastVisit")
    next_appointment: Optional[str] = Field(None, alias="nextAppointment")
    risk_level: Optional[RiskLevel] = Field(None, alias="riskLevel")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ==========================================
# Medical records
# ==========================================
class MedicalRecord(_StoredModel):
    id: str
    patient_id: str = Field(..., alias="patientId", description="Id of the owning patient (not enforced)")
    patient_name: str = Field("Unknown", alias="patientName")
    type: RecordType
    title: str
    content: str = Field(..., description="Plaintext body, kept alongside the encoded copy")
    encrypted_content: str = Field("", alias="encryptedContent", description="codec.encode(content) at write time")
    date: str
    uploaded_by: str = Field("Unknown", alias="uploadedBy")
    file_url: Optional[str] = Field(None, alias="fileUrl")

    @field_validator("type", mode="before")
    @classmethod
    def _legacy_type_names(cls, value):
        # Early seed data spelled lab results as "lab_result"
        return RecordType.LAB if value == "lab_result" else value


class PatientRecordGroup(BaseModel):
    patient_id: str
    patient_name: str
    records: List[MedicalRecord] = Field(default_factory=list)

    @property
    def total_records(self) -> int:
        return len(self.records)


class DashboardStats(BaseModel):
    total_patients: int = 0
    total_records: int = 0
    high_risk_patients: int = 0
    recent_visits: int = 0
    upcoming_appointments: int = 0
