# patientdesk/schemas/patient.py
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator

from patientdesk.schemas.admission import AdmissionFields, AdmissionResponse


def _strip_required(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    return v


class PatientCreate(BaseModel):
    """
    Patient intake: the identity record plus, usually, the first admission.

    MRN duplicates are accepted; see Patient model.
    """

    mrn: str
    name: str
    date_of_birth: date | None = None
    gender: str | None = None
    admission: AdmissionFields | None = None

    @field_validator("mrn")
    @classmethod
    def validate_mrn(cls, v: str) -> str:
        return _strip_required(v, "MRN")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Name")

    @field_validator("date_of_birth")
    @classmethod
    def validate_dob(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class PatientUpdate(BaseModel):
    mrn: str | None = None
    name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None

    @field_validator("mrn", "name")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _strip_required(v, "Field")


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    mrn: str
    name: str
    date_of_birth: date | None = None
    gender: str | None = None
    created_at: datetime

    # Derived from the most recent admission
    doctor_name: str | None = None
    department: str | None = None
    diagnosis: str | None = None
    admission_date: datetime | None = None

    # Most recent first
    admissions: list[AdmissionResponse] = []
