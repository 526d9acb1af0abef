# patientdesk/schemas/discharge.py
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, field_validator, model_validator

from patientdesk.models.admission import DischargeType


class DischargeKind(str, Enum):
    ADMISSION = "admission"
    CONSULTATION = "consultation"


class DischargeData(BaseModel):
    """What the clinician fills in on the discharge form."""

    discharge_date: datetime
    discharge_type: DischargeType = DischargeType.REGULAR
    follow_up_required: bool = False
    follow_up_date: date | None = None
    discharge_note: str

    @field_validator("discharge_note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Discharge note is required")
        return v

    @model_validator(mode="after")
    def validate_follow_up(self) -> "DischargeData":
        if self.follow_up_date and not self.follow_up_required:
            raise ValueError("follow_up_date given but follow_up_required is false")
        return self


class DischargeRequest(DischargeData):
    kind: DischargeKind = DischargeKind.ADMISSION
    record_id: int
    discharged_by_id: int


class DischargeResponse(BaseModel):
    kind: DischargeKind
    record_id: int
    patient_id: int
    status: str
    note_id: int
