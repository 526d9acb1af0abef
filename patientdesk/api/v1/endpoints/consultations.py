# patientdesk/api/v1/endpoints/consultations.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db
from patientdesk.models.consultation import ConsultationStatus
from patientdesk.repositories.consultations import ConsultationRepository
from patientdesk.schemas.consultation import ConsultationCreate, ConsultationResponse
from patientdesk.services import consultation_service

router = APIRouter()


@router.post(
    "",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_consultation(
    payload: ConsultationCreate,
    db: Session = Depends(get_db),
) -> ConsultationResponse:
    consultation = consultation_service.create_consultation(db, payload=payload)
    return ConsultationResponse.model_validate(consultation)


@router.get("", response_model=list[ConsultationResponse])
def list_consultations(
    status: Optional[ConsultationStatus] = Query(None, description="Filter by status"),
    specialty: Optional[str] = Query(None, description="Filter by consultation specialty"),
    patient_id: Optional[int] = Query(None, description="Filter by patient ID"),
    db: Session = Depends(get_db),
) -> list[ConsultationResponse]:
    consultations = consultation_service.list_consultations(
        db, status=status, specialty=specialty, patient_id=patient_id
    )
    return [ConsultationResponse.model_validate(c) for c in consultations]


@router.get("/{consultation_id}", response_model=ConsultationResponse)
def get_consultation(consultation_id: int, db: Session = Depends(get_db)) -> ConsultationResponse:
    return ConsultationResponse.model_validate(ConsultationRepository(db).get(consultation_id))
