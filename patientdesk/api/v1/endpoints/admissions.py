# patientdesk/api/v1/endpoints/admissions.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db
from patientdesk.models.admission import AdmissionStatus
from patientdesk.repositories.admissions import AdmissionRepository
from patientdesk.schemas.admission import (
    ActiveAdmission,
    AdmissionCreate,
    AdmissionResponse,
    AdmissionUpdate,
)
from patientdesk.services import admission_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=AdmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_admission(payload: AdmissionCreate, db: Session = Depends(get_db)) -> AdmissionResponse:
    """
    Admit an existing patient.

    Rules:
    - Patient must exist
    - admitting_doctor_id, when given, must be an existing user
    - is_weekend is derived from admission_date (Friday/Saturday)
    - shift_type must be a weekend shift iff is_weekend
    - visit_number is one more than the patient's last visit
    """
    admission = admission_service.create_admission(db, payload=payload)
    logger.info(
        "Admitted patient=%s adm=%s visit=%s", admission.patient_id, admission.id, admission.visit_number
    )
    return admission_service.to_admission_response(admission)


@router.get("", response_model=list[AdmissionResponse])
def list_admissions(
    patient_id: Optional[int] = Query(None, description="Filter by patient ID"),
    status: Optional[AdmissionStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
) -> list[AdmissionResponse]:
    """
    List admissions, most recent admission_date first.
    """
    admissions = admission_service.list_admissions(db, patient_id=patient_id, status=status)
    return [admission_service.to_admission_response(a) for a in admissions]


@router.get("/active", response_model=list[ActiveAdmission])
def list_active_admissions(db: Session = Depends(get_db)) -> list[ActiveAdmission]:
    """
    Active admissions joined with patient and attending clinician.
    """
    return admission_service.list_active_admissions(db)


@router.get("/{admission_id}", response_model=AdmissionResponse)
def get_admission(admission_id: int, db: Session = Depends(get_db)) -> AdmissionResponse:
    admission = AdmissionRepository(db).get(admission_id)
    return admission_service.to_admission_response(admission)


@router.patch("/{admission_id}", response_model=AdmissionResponse)
def update_admission(
    admission_id: int,
    payload: AdmissionUpdate,
    db: Session = Depends(get_db),
) -> AdmissionResponse:
    """
    Update admission details. The weekend flag is re-derived and the shift
    type re-validated on the merged record before anything is written.
    """
    admission = admission_service.update_admission(db, admission_id=admission_id, payload=payload)
    return admission_service.to_admission_response(admission)
