# patientdesk/schemas/admission.py
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator

from patientdesk.domain.shifts import SafetyType, ShiftType
from patientdesk.models.admission import AdmissionStatus, DischargeType


def _required_department(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Department is required")
    return v


class AdmissionFields(BaseModel):
    admission_date: datetime
    department: str
    admitting_doctor_id: int | None = None
    diagnosis: str = ""
    safety_type: SafetyType | None = None
    shift_type: ShiftType
    # Accepted for compatibility but always recomputed from admission_date
    is_weekend: bool | None = None

    @field_validator("department")
    @classmethod
    def validate_department(cls, v: str) -> str:
        return _required_department(v)


class AdmissionCreate(AdmissionFields):
    patient_id: int


class AdmissionUpdate(BaseModel):
    """Partial update. Lifecycle status changes go through discharge."""

    admission_date: datetime | None = None
    department: str | None = None
    admitting_doctor_id: int | None = None
    diagnosis: str | None = None
    safety_type: SafetyType | None = None
    shift_type: ShiftType | None = None
    is_weekend: bool | None = None

    @field_validator("department")
    @classmethod
    def validate_department(cls, v: str | None) -> str | None:
        return None if v is None else _required_department(v)


class AdmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    admitting_doctor_id: int | None
    status: AdmissionStatus
    department: str
    admission_date: datetime
    discharge_date: datetime | None
    diagnosis: str
    visit_number: int
    safety_type: SafetyType | None = None
    shift_type: ShiftType
    is_weekend: bool
    discharge_type: DischargeType | None = None
    follow_up_required: bool = False
    follow_up_date: date | None = None

    # Computed for frontend convenience
    doctor_name: str | None = None


class ActiveAdmission(BaseModel):
    """Row of the active_admissions projection (admission + patient + clinician)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    mrn: str
    name: str
    admission_date: datetime
    department: str
    safety_type: SafetyType | None = None
    shift_type: ShiftType
    is_weekend: bool
    doctor_name: str | None = None
    diagnosis: str
    status: AdmissionStatus
    visit_number: int
    admitting_doctor_id: int | None = None


class ActivePatient(BaseModel):
    """
    Entry of the discharge worklist: either an active admission or an
    active consultation shown as a pseudo-admission.
    """

    id: int
    patient_id: int
    mrn: str
    name: str
    admission_date: datetime
    department: str
    doctor_name: str | None = None
    diagnosis: str
    status: AdmissionStatus = AdmissionStatus.ACTIVE
    admitting_doctor_id: int | None = None
    shift_type: ShiftType
    is_weekend: bool
    safety_type: SafetyType | None = None
    visit_number: int | None = None
    is_consultation: bool = False
    consultation_id: int | None = None
