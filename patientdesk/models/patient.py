# patientdesk/models/patient.py
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patientdesk.models.base import Base
from patientdesk.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from patientdesk.models.admission import Admission


class Patient(Base):
    """
    Patient identity record.

    NOTE:
    - mrn is indexed but deliberately NOT unique; a patient may be
      registered again under the same medical record number.
    - Deleting a patient deletes its admissions, consultations and notes.
    """

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    mrn: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)

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

    admissions: Mapped[list["Admission"]] = relationship(
        "Admission",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Admission.admission_date.desc()",
    )
