# patientdesk/models/medical_note.py
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patientdesk.models.base import Base
from patientdesk.models.user import User
from patientdesk.utils.datetime_utils import utc_now


class NoteType(str, PyEnum):
    DISCHARGE_SUMMARY = "Discharge Summary"
    CONSULTATION_NOTE = "Consultation Note"
    PROGRESS_NOTE = "Progress Note"


class MedicalNote(Base):
    """
    Free-text clinical note attached to a patient. Append-only.
    """

    __tablename__ = "medical_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    doctor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Plain string rather than an enum: staff may add their own note types
    note_type: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    doctor: Mapped["User"] = relationship("User")
