# patientdesk/schemas/consultation.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from patientdesk.domain.shifts import ShiftType
from patientdesk.models.consultation import ConsultationStatus


class ConsultationCreate(BaseModel):
    patient_id: int
    consultation_specialty: str
    reason: str = ""
    requesting_department: str | None = None
    doctor_id: int | None = None
    shift_type: ShiftType | None = None

    @field_validator("consultation_specialty")
    @classmethod
    def validate_specialty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Consultation specialty is required")
        return v


class ConsultationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    mrn: str
    patient_name: str
    consultation_specialty: str
    requesting_department: str | None = None
    reason: str
    doctor_id: int | None = None
    doctor_name: str | None = None
    shift_type: ShiftType | None = None
    status: ConsultationStatus
    completion_note: str | None = None
    completed_by: int | None = None
    completed_at: datetime | None = None
    created_at: datetime
