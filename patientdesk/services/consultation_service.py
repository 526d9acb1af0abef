# patientdesk/services/consultation_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.database import transaction
from patientdesk.core.exceptions import InvalidTransition, PersistenceError
from patientdesk.core.redis import invalidate_reports
from patientdesk.models.consultation import Consultation, ConsultationStatus
from patientdesk.models.user import User
from patientdesk.repositories.consultations import ConsultationRepository
from patientdesk.repositories.patients import PatientRepository
from patientdesk.repositories.users import UserRepository
from patientdesk.schemas.consultation import ConsultationCreate
from patientdesk.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


def create_consultation(db: Session, *, payload: ConsultationCreate) -> Consultation:
    """
    Open a consultation request. Patient MRN/name and the consultant's
    name are copied onto the request.
    """
    patient = PatientRepository(db).get(payload.patient_id)
    doctor = UserRepository(db).get(payload.doctor_id) if payload.doctor_id is not None else None

    consultation = Consultation(
        patient_id=patient.id,
        mrn=patient.mrn,
        patient_name=patient.name,
        consultation_specialty=payload.consultation_specialty,
        requesting_department=payload.requesting_department,
        reason=payload.reason,
        doctor_id=doctor.id if doctor else None,
        doctor_name=doctor.name if doctor else None,
        shift_type=payload.shift_type,
        status=ConsultationStatus.ACTIVE,
    )

    repo = ConsultationRepository(db)
    try:
        with transaction(db):
            repo.add(consultation)
    except SQLAlchemyError as exc:
        logger.exception("Failed to create consultation patient=%s", payload.patient_id)
        raise PersistenceError("Failed to create consultation.") from exc

    invalidate_reports()
    return repo.get(consultation.id)


def complete_consultation(
    consultation: Consultation,
    *,
    completion_note: str,
    completed_by: User,
) -> Consultation:
    """
    Mark an active consultation completed. Does not commit: the discharge
    service runs this together with the note insert.
    """
    if consultation.status != ConsultationStatus.ACTIVE:
        raise InvalidTransition(
            f"Cannot complete consultation with status {consultation.status.value}"
        )
    consultation.status = ConsultationStatus.COMPLETED
    consultation.completion_note = completion_note
    consultation.completed_by = completed_by.id
    consultation.completed_at = utc_now()
    return consultation


def list_consultations(
    db: Session,
    *,
    status: ConsultationStatus | None = None,
    specialty: str | None = None,
    patient_id: int | None = None,
) -> list[Consultation]:
    return ConsultationRepository(db).list(status=status, specialty=specialty, patient_id=patient_id)
