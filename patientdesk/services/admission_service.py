# patientdesk/services/admission_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.config import get_settings
from patientdesk.core.database import transaction
from patientdesk.core.exceptions import PersistenceError, ShiftRuleViolation
from patientdesk.core.redis import invalidate_reports
from patientdesk.domain.shifts import ShiftCheck, classify_admission
from patientdesk.models.admission import Admission, AdmissionStatus
from patientdesk.repositories.admissions import AdmissionRepository
from patientdesk.repositories.patients import PatientRepository
from patientdesk.repositories.users import UserRepository
from patientdesk.schemas.admission import (
    ActiveAdmission,
    AdmissionCreate,
    AdmissionFields,
    AdmissionResponse,
    AdmissionUpdate,
)
from patientdesk.utils.datetime_utils import as_utc

logger = logging.getLogger(__name__)

# Fields an update may explicitly clear
CLEARABLE_FIELDS = {"admitting_doctor_id", "safety_type"}


def apply_shift_rules(admission: Admission) -> ShiftCheck:
    """
    Must run before every admission insert or update.

    Recomputes is_weekend from admission_date (whatever the caller sent is
    overwritten), then checks shift_type against the new flag.
    """
    admission.admission_date = as_utc(admission.admission_date)
    check = classify_admission(
        admission.admission_date,
        admission.shift_type,
        tz=get_settings().hospital_timezone,
    )
    if not check.ok:
        raise ShiftRuleViolation(check.reason)
    admission.is_weekend = check.is_weekend
    return check


def build_admission(
    db: Session,
    *,
    patient_id: int,
    fields: AdmissionFields,
    visit_number: int,
) -> Admission:
    """Validated, unsaved admission. Caller adds it inside its own transaction."""
    if fields.admitting_doctor_id is not None:
        UserRepository(db).get(fields.admitting_doctor_id)

    admission = Admission(
        patient_id=patient_id,
        admission_date=fields.admission_date,
        department=fields.department,
        admitting_doctor_id=fields.admitting_doctor_id,
        diagnosis=fields.diagnosis,
        safety_type=fields.safety_type,
        shift_type=fields.shift_type,
        status=AdmissionStatus.ACTIVE,
        visit_number=visit_number,
    )
    apply_shift_rules(admission)
    return admission


def create_admission(db: Session, *, payload: AdmissionCreate) -> Admission:
    """
    Admit an existing patient again.

    visit_number continues from the patient's highest visit so far.
    """
    repo = AdmissionRepository(db)
    PatientRepository(db).get(payload.patient_id)

    admission = build_admission(
        db,
        patient_id=payload.patient_id,
        fields=payload,
        visit_number=repo.max_visit_number(payload.patient_id) + 1,
    )

    try:
        with transaction(db):
            repo.add(admission)
    except SQLAlchemyError as exc:
        logger.exception("Failed to create admission patient=%s", payload.patient_id)
        raise PersistenceError("Failed to create admission.") from exc

    invalidate_reports()
    return repo.get(admission.id)


def update_admission(db: Session, *, admission_id: int, payload: AdmissionUpdate) -> Admission:
    repo = AdmissionRepository(db)
    admission = repo.get(admission_id)

    data = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    # Derived column, never client-settable
    data.pop("is_weekend", None)
    if data.get("admitting_doctor_id") is not None:
        UserRepository(db).get(data["admitting_doctor_id"])

    try:
        with transaction(db):
            for field, value in data.items():
                setattr(admission, field, value)
            apply_shift_rules(admission)
            db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to update admission adm=%s", admission_id)
        raise PersistenceError("Failed to update admission.") from exc

    invalidate_reports()
    return repo.get(admission_id)


def list_admissions(
    db: Session,
    *,
    patient_id: int | None = None,
    status: AdmissionStatus | None = None,
) -> list[Admission]:
    return AdmissionRepository(db).list(patient_id=patient_id, status=status)


def list_active_admissions(db: Session) -> list[ActiveAdmission]:
    rows = AdmissionRepository(db).active_rows()
    return [ActiveAdmission.model_validate(dict(row._mapping)) for row in rows]


def to_admission_response(admission: Admission) -> AdmissionResponse:
    return AdmissionResponse.model_validate(admission)
