# patientdesk/services/discharge_service.py
"""
Discharge processing.

One request either discharges an admission or completes a consultation,
and always records a clinical note. Both writes share a single
transaction; if the note insert fails the status change is rolled back.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.database import transaction
from patientdesk.core.exceptions import BusinessRuleViolation, InvalidTransition, PersistenceError
from patientdesk.core.redis import invalidate_reports
from patientdesk.models.admission import Admission, AdmissionStatus, DischargeType
from patientdesk.models.medical_note import MedicalNote, NoteType
from patientdesk.models.user import User
from patientdesk.repositories.admissions import AdmissionRepository
from patientdesk.repositories.consultations import ConsultationRepository
from patientdesk.repositories.notes import MedicalNoteRepository
from patientdesk.repositories.users import UserRepository
from patientdesk.schemas.discharge import DischargeData, DischargeKind, DischargeRequest, DischargeResponse
from patientdesk.services.consultation_service import complete_consultation
from patientdesk.utils.datetime_utils import as_utc

logger = logging.getLogger(__name__)


def discharge_admission(admission: Admission, data: DischargeData) -> Admission:
    """
    Close an active admission. A transfer discharge leaves the admission
    as "transferred", every other type as "discharged".
    """
    if admission.status != AdmissionStatus.ACTIVE:
        raise InvalidTransition(
            f"Cannot discharge admission with status {admission.status.value}"
        )

    discharge_date = as_utc(data.discharge_date)
    if discharge_date < as_utc(admission.admission_date):
        raise BusinessRuleViolation("Discharge date cannot be before admission date.")

    admission.status = (
        AdmissionStatus.TRANSFERRED
        if data.discharge_type == DischargeType.TRANSFER
        else AdmissionStatus.DISCHARGED
    )
    admission.discharge_date = discharge_date
    admission.discharge_type = data.discharge_type
    admission.follow_up_required = data.follow_up_required
    admission.follow_up_date = data.follow_up_date
    return admission


def _note(patient_id: int, author: User, note_type: NoteType, content: str) -> MedicalNote:
    return MedicalNote(
        patient_id=patient_id,
        doctor_id=author.id,
        note_type=note_type.value,
        content=content,
    )


def process_discharge(db: Session, *, request: DischargeRequest) -> DischargeResponse:
    author = UserRepository(db).get(request.discharged_by_id)
    notes = MedicalNoteRepository(db)

    try:
        with transaction(db):
            if request.kind == DischargeKind.CONSULTATION:
                consultation = ConsultationRepository(db).get(request.record_id)
                complete_consultation(
                    consultation,
                    completion_note=request.discharge_note,
                    completed_by=author,
                )
                patient_id = consultation.patient_id
                status = consultation.status.value
                note = notes.add(
                    _note(patient_id, author, NoteType.CONSULTATION_NOTE, request.discharge_note)
                )
            else:
                admission = AdmissionRepository(db).get(request.record_id)
                discharge_admission(admission, request)
                patient_id = admission.patient_id
                status = admission.status.value
                note = notes.add(
                    _note(patient_id, author, NoteType.DISCHARGE_SUMMARY, request.discharge_note)
                )
            note_id = note.id
    except SQLAlchemyError as exc:
        logger.exception(
            "Discharge rolled back kind=%s record=%s", request.kind.value, request.record_id
        )
        raise PersistenceError("Failed to process discharge.") from exc

    invalidate_reports()
    logger.info(
        "Processed discharge kind=%s record=%s status=%s by=%s",
        request.kind.value,
        request.record_id,
        status,
        author.id,
    )
    return DischargeResponse(
        kind=request.kind,
        record_id=request.record_id,
        patient_id=patient_id,
        status=status,
        note_id=note_id,
    )
