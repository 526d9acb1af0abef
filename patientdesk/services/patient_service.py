# patientdesk/services/patient_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.database import transaction
from patientdesk.core.exceptions import PersistenceError
from patientdesk.core.redis import invalidate_reports
from patientdesk.models.patient import Patient
from patientdesk.repositories.patients import PatientRepository
from patientdesk.schemas.admission import AdmissionResponse
from patientdesk.schemas.patient import PatientCreate, PatientResponse, PatientUpdate
from patientdesk.services.admission_service import build_admission

logger = logging.getLogger(__name__)


def intake_patient(db: Session, *, payload: PatientCreate) -> Patient:
    """
    Register a patient and, when given, their first admission (visit 1).

    Both rows are written in one transaction: a rejected admission leaves
    no orphan patient behind.
    """
    repo = PatientRepository(db)
    patient = Patient(
        mrn=payload.mrn,
        name=payload.name,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
    )

    duplicates = repo.list_by_mrn(payload.mrn)
    if duplicates:
        logger.info(
            "Registering patient with existing MRN=%s (%d earlier record(s))",
            payload.mrn,
            len(duplicates),
        )

    try:
        with transaction(db):
            repo.add(patient)
            if payload.admission is not None:
                admission = build_admission(
                    db,
                    patient_id=patient.id,
                    fields=payload.admission,
                    visit_number=1,
                )
                db.add(admission)
                db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to register patient mrn=%s", payload.mrn)
        raise PersistenceError("Failed to register patient.") from exc

    invalidate_reports()
    return repo.get(patient.id)


def update_patient(db: Session, *, patient_id: int, payload: PatientUpdate) -> Patient:
    repo = PatientRepository(db)
    patient = repo.get(patient_id)

    data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    try:
        with transaction(db):
            repo.update(patient, data)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update patient id=%s", patient_id)
        raise PersistenceError("Failed to update patient.") from exc

    invalidate_reports()
    return repo.get(patient_id)


def delete_patient(db: Session, *, patient_id: int) -> None:
    """Delete a patient; admissions, consultations and notes go with it."""
    repo = PatientRepository(db)
    patient = repo.get(patient_id)
    try:
        with transaction(db):
            repo.delete(patient)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete patient id=%s", patient_id)
        raise PersistenceError("Failed to delete patient.") from exc

    invalidate_reports()
    logger.info("Deleted patient id=%s", patient_id)


def list_patients(db: Session, *, search: str | None = None) -> list[Patient]:
    return PatientRepository(db).list(search=search)


def to_patient_response(patient: Patient) -> PatientResponse:
    """
    Patient with display fields taken from the most recent admission.

    Admissions are re-sorted here rather than trusting load order, since
    the patient may have been refreshed from a partially loaded session.
    """
    admissions = sorted(
        patient.admissions,
        key=lambda a: (a.admission_date, a.id),
        reverse=True,
    )
    latest = admissions[0] if admissions else None

    return PatientResponse(
        id=patient.id,
        mrn=patient.mrn,
        name=patient.name,
        date_of_birth=patient.date_of_birth,
        gender=patient.gender,
        created_at=patient.created_at,
        doctor_name=latest.doctor_name if latest else None,
        department=latest.department if latest else None,
        diagnosis=latest.diagnosis if latest else None,
        admission_date=latest.admission_date if latest else None,
        admissions=[AdmissionResponse.model_validate(a) for a in admissions],
    )
