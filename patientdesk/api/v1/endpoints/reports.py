# patientdesk/api/v1/endpoints/reports.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db
from patientdesk.core.exceptions import BusinessRuleViolation
from patientdesk.schemas.report import ReportFilters, ReportResponse, ReportType, SpecialtyCensus
from patientdesk.services import report_service

router = APIRouter()


@router.get("", response_model=ReportResponse)
def get_report(
    report_type: ReportType = Query(ReportType.ALL, description="all, admissions or consultations"),
    specialty: str = Query("all", description="Department / consultation specialty, or 'all'"),
    search: str = Query("", description="Case-insensitive match on name or MRN"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
) -> ReportResponse:
    """
    Filtered patients and consultations. The date range is applied only
    when both start_date and end_date are given (both inclusive).
    """
    try:
        filters = ReportFilters(
            report_type=report_type,
            specialty=specialty,
            search=search,
            start_date=start_date,
            end_date=end_date,
        )
    except ValidationError as exc:
        raise BusinessRuleViolation(exc.errors()[0]["msg"]) from exc
    return report_service.build_report(db, filters=filters)


@router.get("/specialties", response_model=SpecialtyCensus)
def get_census(db: Session = Depends(get_db)) -> SpecialtyCensus:
    """
    Census across every specialty.
    """
    return report_service.specialty_census(db)


@router.get("/specialties/{specialty}", response_model=SpecialtyCensus)
def get_specialty_census(specialty: str, db: Session = Depends(get_db)) -> SpecialtyCensus:
    """
    Patients with an active admission in the specialty plus its open
    consultations.
    """
    return report_service.specialty_census(db, specialty=specialty)
