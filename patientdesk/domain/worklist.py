# patientdesk/domain/worklist.py
"""
Consultations listed next to admissions.

Several views show an active consultation as if it were an admission. The
projection fills in the admission-only fields with placeholders.
"""

from patientdesk.domain.shifts import ShiftType, default_shift, is_weekend
from patientdesk.schemas.admission import ActivePatient
from patientdesk.utils.datetime_utils import as_utc

PENDING_ASSIGNMENT = "Pending Assignment"


def consultation_as_active_patient(consultation) -> ActivePatient:
    """
    Discharge worklist entry for a consultation.

    ``consultation`` is anything with the consultation attributes (ORM row or
    ConsultationResponse). Shift defaults to morning and the weekend flag is
    always false here.
    """
    return ActivePatient(
        id=consultation.id,
        patient_id=consultation.patient_id,
        mrn=consultation.mrn,
        name=consultation.patient_name,
        admission_date=consultation.created_at,
        department=consultation.consultation_specialty,
        doctor_name=consultation.doctor_name or PENDING_ASSIGNMENT,
        diagnosis=consultation.reason,
        admitting_doctor_id=consultation.doctor_id,
        shift_type=consultation.shift_type or ShiftType.MORNING,
        is_weekend=False,
        is_consultation=True,
        consultation_id=consultation.id,
    )


def consultation_as_census_entry(consultation, tz: str | None = None) -> ActivePatient:
    """
    Specialty census entry for a consultation.

    Unlike the worklist, the census classifies the request date so weekend
    consultations show a weekend shift.
    """
    requested_at = as_utc(consultation.created_at)
    weekend = is_weekend(requested_at, tz)
    return ActivePatient(
        id=consultation.id,
        patient_id=consultation.patient_id,
        mrn=consultation.mrn,
        name=consultation.patient_name,
        admission_date=consultation.created_at,
        department=consultation.consultation_specialty,
        doctor_name=consultation.doctor_name or PENDING_ASSIGNMENT,
        diagnosis=consultation.reason,
        admitting_doctor_id=consultation.doctor_id,
        shift_type=default_shift(requested_at, tz),
        is_weekend=weekend,
        visit_number=1,
        is_consultation=True,
        consultation_id=consultation.id,
    )
