# patientdesk/api/v1/endpoints/notes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db, transaction
from patientdesk.core.exceptions import PersistenceError
from patientdesk.models.medical_note import MedicalNote
from patientdesk.repositories.notes import MedicalNoteRepository
from patientdesk.repositories.patients import PatientRepository
from patientdesk.repositories.users import UserRepository
from patientdesk.schemas.note import NoteCreate, NoteResponse

router = APIRouter()


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(payload: NoteCreate, db: Session = Depends(get_db)) -> NoteResponse:
    """
    Append a clinical note. Notes are never edited.
    """
    PatientRepository(db).get(payload.patient_id)
    if payload.doctor_id is not None:
        UserRepository(db).get(payload.doctor_id)

    repo = MedicalNoteRepository(db)
    note = MedicalNote(**payload.model_dump())
    try:
        with transaction(db):
            repo.add(note)
    except SQLAlchemyError as exc:
        raise PersistenceError("Failed to create note.") from exc
    return NoteResponse.model_validate(repo.get(note.id))


@router.get("", response_model=list[NoteResponse])
def list_notes(
    patient_id: int = Query(..., description="Patient whose notes to list"),
    note_type: Optional[str] = Query(None, description="Filter by note type"),
    db: Session = Depends(get_db),
) -> list[NoteResponse]:
    """
    Notes for a patient, newest first.
    """
    notes = MedicalNoteRepository(db).list(patient_id=patient_id, note_type=note_type)
    return [NoteResponse.model_validate(n) for n in notes]
