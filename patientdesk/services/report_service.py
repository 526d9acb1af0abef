# patientdesk/services/report_service.py
"""
Reports over patients and consultations.

Filtering mirrors the reports screen: specialty, free-text search on name
or MRN, and a date range that only applies once both ends are set.
Results are cached in Redis when available.
"""

import logging
from datetime import date, datetime

from pydantic import ValidationError
from sqlalchemy.orm import Session

from patientdesk.core.config import get_settings
from patientdesk.core.redis import REPORT_KEY_PREFIX, cache_get, cache_set
from patientdesk.domain.worklist import consultation_as_census_entry
from patientdesk.models.admission import AdmissionStatus
from patientdesk.models.consultation import ConsultationStatus
from patientdesk.repositories.consultations import ConsultationRepository
from patientdesk.repositories.patients import PatientRepository
from patientdesk.schemas.consultation import ConsultationResponse
from patientdesk.schemas.report import ReportFilters, ReportResponse, ReportType, SpecialtyCensus
from patientdesk.services.patient_service import to_patient_response

logger = logging.getLogger(__name__)

ALL_SPECIALTIES = "all"


def _matches_search(query: str, *values: str) -> bool:
    if not query:
        return True
    needle = query.strip().lower()
    return any(needle in (value or "").lower() for value in values)


def _in_range(value: datetime | None, start: date | None, end: date | None) -> bool:
    if not start or not end:
        return True
    if value is None:
        return False
    return start <= value.date() <= end


def _matches_specialty(specialty: str, department: str | None) -> bool:
    return specialty == ALL_SPECIALTIES or department == specialty


def build_report(db: Session, *, filters: ReportFilters) -> ReportResponse:
    cache_key = REPORT_KEY_PREFIX + filters.cache_key()
    cached = cache_get(cache_key)
    if cached:
        try:
            return ReportResponse.model_validate_json(cached)
        except ValidationError:
            logger.warning("Discarding unreadable cached report key=%s", cache_key)

    patients = []
    if filters.report_type in (ReportType.ALL, ReportType.ADMISSIONS):
        for patient in PatientRepository(db).list():
            row = to_patient_response(patient)
            if (
                _matches_specialty(filters.specialty, row.department)
                and _matches_search(filters.search, row.name, row.mrn)
                and _in_range(row.admission_date, filters.start_date, filters.end_date)
            ):
                patients.append(row)

    consultations = []
    if filters.report_type in (ReportType.ALL, ReportType.CONSULTATIONS):
        for consultation in ConsultationRepository(db).list():
            if (
                _matches_specialty(filters.specialty, consultation.consultation_specialty)
                and _matches_search(filters.search, consultation.patient_name, consultation.mrn)
                and _in_range(consultation.created_at, filters.start_date, filters.end_date)
            ):
                consultations.append(ConsultationResponse.model_validate(consultation))

    report = ReportResponse(
        filters=filters,
        patients=patients,
        consultations=consultations,
        patient_count=len(patients),
        consultation_count=len(consultations),
    )
    cache_set(cache_key, report.model_dump_json(), ttl=get_settings().report_cache_ttl)
    return report


def specialty_census(db: Session, *, specialty: str | None = None) -> SpecialtyCensus:
    """
    Patients with an active admission in ``specialty`` and the specialty's
    open consultations. ``None`` means every specialty.
    """
    patients = [
        to_patient_response(patient)
        for patient in PatientRepository(db).list()
        if any(
            (not specialty or admission.department == specialty)
            and admission.status == AdmissionStatus.ACTIVE
            for admission in patient.admissions
        )
    ]

    tz = get_settings().hospital_timezone
    consultations = [
        consultation_as_census_entry(c, tz)
        for c in ConsultationRepository(db).list(status=ConsultationStatus.ACTIVE, specialty=specialty)
    ]
    return SpecialtyCensus(specialty=specialty, patients=patients, consultations=consultations)
