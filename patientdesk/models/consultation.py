# patientdesk/models/consultation.py
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patientdesk.domain.shifts import ShiftType
from patientdesk.models.admission import SHIFT_TYPE_ENUM
from patientdesk.models.base import Base
from patientdesk.models.patient import Patient
from patientdesk.models.user import User
from patientdesk.utils.datetime_utils import utc_now


class ConsultationStatus(str, PyEnum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Consultation(Base):
    """
    Inter-department consultation request.

    Patient MRN and name are copied at request time so the consultation
    list can be rendered without joining patients.
    """

    __tablename__ = "consultations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mrn: Mapped[str] = mapped_column(String(50), nullable=False)
    patient_name: Mapped[str] = mapped_column(String(200), nullable=False)

    consultation_specialty: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    requesting_department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    doctor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="Consultant assigned to the request, if any",
    )
    doctor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    shift_type: Mapped[ShiftType | None] = mapped_column(SHIFT_TYPE_ENUM, nullable=True)

    status: Mapped[ConsultationStatus] = mapped_column(
        Enum(
            ConsultationStatus,
            name="consultation_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ConsultationStatus.ACTIVE,
        index=True,
    )

    # Completion
    completion_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    patient: Mapped["Patient"] = relationship("Patient")
    doctor: Mapped["User"] = relationship("User", foreign_keys=[doctor_id])
