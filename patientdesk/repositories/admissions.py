# patientdesk/repositories/admissions.py
from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from patientdesk.models.admission import Admission, AdmissionStatus
from patientdesk.models.patient import Patient
from patientdesk.models.user import User
from patientdesk.repositories.base import Repository


class AdmissionRepository(Repository[Admission]):
    model = Admission
    entity = "Admission"

    def find(self, record_id: int) -> Admission | None:
        return (
            self.db.query(Admission)
            .options(joinedload(Admission.patient), joinedload(Admission.admitting_doctor))
            .filter(Admission.id == record_id)
            .first()
        )

    def list(
        self,
        *,
        patient_id: int | None = None,
        status: AdmissionStatus | None = None,
        department: str | None = None,
    ) -> list[Admission]:
        query = self.db.query(Admission).options(joinedload(Admission.admitting_doctor))
        if patient_id is not None:
            query = query.filter(Admission.patient_id == patient_id)
        if status is not None:
            query = query.filter(Admission.status == status)
        if department:
            query = query.filter(Admission.department == department)
        return query.order_by(Admission.admission_date.desc(), Admission.id.desc()).all()

    def max_visit_number(self, patient_id: int) -> int:
        value = (
            self.db.query(func.max(Admission.visit_number))
            .filter(Admission.patient_id == patient_id)
            .scalar()
        )
        return value or 0

    def active_rows(self) -> list[tuple]:
        """
        The active_admissions projection: admission joined to patient and
        (optionally) the attending clinician, active rows only.
        """
        return (
            self.db.query(
                Admission.id,
                Admission.patient_id,
                Patient.mrn,
                Patient.name,
                Admission.admission_date,
                Admission.department,
                Admission.safety_type,
                Admission.shift_type,
                Admission.is_weekend,
                User.name.label("doctor_name"),
                Admission.diagnosis,
                Admission.status,
                Admission.visit_number,
                Admission.admitting_doctor_id,
            )
            .join(Patient, Admission.patient_id == Patient.id)
            .outerjoin(User, Admission.admitting_doctor_id == User.id)
            .filter(Admission.status == AdmissionStatus.ACTIVE)
            .order_by(Admission.admission_date.desc(), Admission.id.desc())
            .all()
        )
