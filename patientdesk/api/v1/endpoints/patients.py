# patientdesk/api/v1/endpoints/patients.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db
from patientdesk.repositories.patients import PatientRepository
from patientdesk.schemas.patient import PatientCreate, PatientResponse, PatientUpdate
from patientdesk.services import patient_service

router = APIRouter()


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_patient(payload: PatientCreate, db: Session = Depends(get_db)) -> PatientResponse:
    """
    Patient intake.

    Rules:
    - MRN need not be unique
    - The optional first admission gets visit_number 1 and status active
    - Admission shift_type must match the weekend flag of admission_date
    """
    patient = patient_service.intake_patient(db, payload=payload)
    return patient_service.to_patient_response(patient)


@router.get("", response_model=list[PatientResponse])
def list_patients(
    search: Optional[str] = Query(None, description="Match on name or MRN"),
    db: Session = Depends(get_db),
) -> list[PatientResponse]:
    """
    List patients, newest registration first, each with its admission
    history (most recent admission first).
    """
    patients = patient_service.list_patients(db, search=search)
    return [patient_service.to_patient_response(p) for p in patients]


@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(patient_id: int, db: Session = Depends(get_db)) -> PatientResponse:
    patient = PatientRepository(db).get(patient_id)
    return patient_service.to_patient_response(patient)


@router.patch("/{patient_id}", response_model=PatientResponse)
def update_patient(
    patient_id: int,
    payload: PatientUpdate,
    db: Session = Depends(get_db),
) -> PatientResponse:
    patient = patient_service.update_patient(db, patient_id=patient_id, payload=payload)
    return patient_service.to_patient_response(patient)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(patient_id: int, db: Session = Depends(get_db)) -> Response:
    """
    Delete a patient together with its admissions, consultations and notes.
    """
    patient_service.delete_patient(db, patient_id=patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
