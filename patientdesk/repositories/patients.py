# patientdesk/repositories/patients.py
from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from patientdesk.models.admission import Admission
from patientdesk.models.patient import Patient
from patientdesk.repositories.base import Repository


class PatientRepository(Repository[Patient]):
    model = Patient
    entity = "Patient"

    def _with_admissions(self):
        return self.db.query(Patient).options(
            selectinload(Patient.admissions).joinedload(Admission.admitting_doctor)
        )

    def list(self, *, search: str | None = None) -> list[Patient]:
        """Newest registrations first, admissions and their clinicians preloaded."""
        query = self._with_admissions()
        term = (search or "").strip()
        if term:
            # "%" and "_" in the search text match literally
            query = query.filter(
                or_(
                    Patient.name.icontains(term, autoescape=True),
                    Patient.mrn.icontains(term, autoescape=True),
                )
            )
        return query.order_by(Patient.created_at.desc(), Patient.id.desc()).all()

    def find(self, record_id: int) -> Patient | None:
        return self._with_admissions().filter(Patient.id == record_id).first()

    def list_by_mrn(self, mrn: str) -> list[Patient]:
        return self.db.query(Patient).filter(Patient.mrn == mrn).order_by(Patient.id.asc()).all()
