# patientdesk/repositories/consultations.py
from __future__ import annotations

from patientdesk.models.consultation import Consultation, ConsultationStatus
from patientdesk.repositories.base import Repository


class ConsultationRepository(Repository[Consultation]):
    model = Consultation
    entity = "Consultation"

    def list(
        self,
        *,
        status: ConsultationStatus | None = None,
        specialty: str | None = None,
        patient_id: int | None = None,
    ) -> list[Consultation]:
        query = self.db.query(Consultation)
        if status is not None:
            query = query.filter(Consultation.status == status)
        if specialty:
            query = query.filter(Consultation.consultation_specialty == specialty)
        if patient_id is not None:
            query = query.filter(Consultation.patient_id == patient_id)
        return query.order_by(Consultation.created_at.desc(), Consultation.id.desc()).all()
