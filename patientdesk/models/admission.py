# patientdesk/models/admission.py
from datetime import date, datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patientdesk.domain.shifts import SafetyType, ShiftType
from patientdesk.models.base import Base
from patientdesk.models.patient import Patient
from patientdesk.models.user import User
from patientdesk.utils.datetime_utils import utc_now


class AdmissionStatus(str, PyEnum):
    ACTIVE = "active"
    DISCHARGED = "discharged"
    TRANSFERRED = "transferred"


class DischargeType(str, PyEnum):
    REGULAR = "regular"
    AGAINST_MEDICAL_ADVICE = "against-medical-advice"
    TRANSFER = "transfer"


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


# Enum types keep the exact lower-case wire values (e.g. "short-stay")
SHIFT_TYPE_ENUM = Enum(ShiftType, name="shift_type", values_callable=_values)
SAFETY_TYPE_ENUM = Enum(SafetyType, name="safety_type", values_callable=_values)
ADMISSION_STATUS_ENUM = Enum(AdmissionStatus, name="admission_status", values_callable=_values)
DISCHARGE_TYPE_ENUM = Enum(DischargeType, name="discharge_type", values_callable=_values)


class Admission(Base):
    """
    Hospital stay of a patient.

    is_weekend is derived from admission_date by the admission service on
    every write; shift_type must belong to the matching vocabulary.
    """

    __tablename__ = "admissions"
    __table_args__ = (
        Index(
            "idx_admissions_safety_type",
            "safety_type",
            postgresql_where=text("safety_type IS NOT NULL"),
        ),
        Index("idx_admissions_visit_number", "patient_id", "visit_number"),
        Index("idx_admissions_shift_type", "shift_type"),
        Index("idx_admissions_is_weekend", "is_weekend"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign Keys
    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    admitting_doctor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="Attending clinician; may be unassigned",
    )

    # Admission Details
    admission_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, nullable=False, default="")
    visit_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default=text("1"),
    )
    safety_type: Mapped[SafetyType | None] = mapped_column(SAFETY_TYPE_ENUM, nullable=True)
    shift_type: Mapped[ShiftType] = mapped_column(SHIFT_TYPE_ENUM, nullable=False)
    is_weekend: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    # Status
    status: Mapped[AdmissionStatus] = mapped_column(
        ADMISSION_STATUS_ENUM,
        nullable=False,
        default=AdmissionStatus.ACTIVE,
        index=True,
    )

    # Discharge
    discharge_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    discharge_type: Mapped[DischargeType | None] = mapped_column(DISCHARGE_TYPE_ENUM, nullable=True)
    follow_up_required: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    # Relationships
    patient: Mapped["Patient"] = relationship("Patient", back_populates="admissions")
    admitting_doctor: Mapped["User"] = relationship(
        "User", foreign_keys=[admitting_doctor_id]
    )

    @property
    def doctor_name(self) -> str | None:
        return self.admitting_doctor.name if self.admitting_doctor else None
