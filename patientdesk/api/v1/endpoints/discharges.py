# patientdesk/api/v1/endpoints/discharges.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db
from patientdesk.schemas.discharge import DischargeRequest, DischargeResponse
from patientdesk.services import discharge_service

router = APIRouter()


@router.post("", response_model=DischargeResponse)
def process_discharge(payload: DischargeRequest, db: Session = Depends(get_db)) -> DischargeResponse:
    """
    Discharge an admission or complete a consultation.

    Rules:
    - The record must still be active
    - Discharge date cannot be before the admission date
    - A discharge type of "transfer" leaves the admission "transferred"
    - A Discharge Summary / Consultation Note is written in the same transaction
    """
    return discharge_service.process_discharge(db, request=payload)
