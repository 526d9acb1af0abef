# patientdesk/repositories/notes.py
from __future__ import annotations

from patientdesk.models.medical_note import MedicalNote
from patientdesk.repositories.base import Repository


class MedicalNoteRepository(Repository[MedicalNote]):
    model = MedicalNote
    entity = "Medical note"

    def list(self, *, patient_id: int, note_type: str | None = None) -> list[MedicalNote]:
        query = self.db.query(MedicalNote).filter(MedicalNote.patient_id == patient_id)
        if note_type:
            query = query.filter(MedicalNote.note_type == note_type)
        return query.order_by(MedicalNote.created_at.desc(), MedicalNote.id.desc()).all()
