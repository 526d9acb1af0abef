# patientdesk/schemas/note.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class NoteCreate(BaseModel):
    patient_id: int
    doctor_id: int | None = None
    note_type: str
    content: str

    @field_validator("note_type", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int | None
    note_type: str
    content: str
    created_at: datetime
