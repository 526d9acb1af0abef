import pytest
from sqlalchemy.exc import SQLAlchemyError

from patientdesk.core.exceptions import PersistenceError
from patientdesk.models.admission import Admission, AdmissionStatus
from patientdesk.models.medical_note import MedicalNote
from patientdesk.repositories.notes import MedicalNoteRepository
from patientdesk.schemas.discharge import DischargeRequest
from patientdesk.services import discharge_service


def _discharge(client, record_id, author_id, **fields):
    body = {
        "record_id": record_id,
        "discharged_by_id": author_id,
        "discharge_date": "2024-06-12T14:00:00Z",
        "discharge_note": "Stable, discharged home on oral medication.",
        **fields,
    }
    return client.post("/api/v1/discharges", json=body)


def _open_consultation(client, patient_id, doctor_id=None):
    r = client.post(
        "/api/v1/consultations",
        json={
            "patient_id": patient_id,
            "consultation_specialty": "Nephrology",
            "requesting_department": "Cardiology",
            "reason": "Rising creatinine",
            "doctor_id": doctor_id,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_discharge_admission_writes_summary_note(client, admit_patient, doctor):
    patient = admit_patient()
    admission_id = patient["admissions"][0]["id"]

    r = _discharge(
        client,
        admission_id,
        doctor["id"],
        follow_up_required=True,
        follow_up_date="2024-06-26",
    )

    assert r.status_code == 200, r.text
    result = r.json()
    assert result["status"] == "discharged"
    assert result["kind"] == "admission"

    admission = client.get(f"/api/v1/admissions/{admission_id}").json()
    assert admission["status"] == "discharged"
    assert admission["discharge_date"].startswith("2024-06-12T14:00:00")
    assert admission["discharge_type"] == "regular"
    assert admission["follow_up_date"] == "2024-06-26"

    notes = client.get("/api/v1/notes", params={"patient_id": patient["id"]}).json()
    assert len(notes) == 1
    assert notes[0]["id"] == result["note_id"]
    assert notes[0]["note_type"] == "Discharge Summary"
    assert notes[0]["doctor_id"] == doctor["id"]

    assert client.get("/api/v1/admissions/active").json() == []


def test_transfer_leaves_admission_transferred(client, admit_patient, doctor):
    admission_id = admit_patient()["admissions"][0]["id"]

    r = _discharge(client, admission_id, doctor["id"], discharge_type="transfer")

    assert r.status_code == 200, r.text
    assert r.json()["status"] == "transferred"


def test_second_discharge_is_an_invalid_transition(client, admit_patient, doctor):
    patient = admit_patient()
    admission_id = patient["admissions"][0]["id"]
    assert _discharge(client, admission_id, doctor["id"]).status_code == 200

    r = _discharge(client, admission_id, doctor["id"])

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "invalid_transition"
    notes = client.get("/api/v1/notes", params={"patient_id": patient["id"]}).json()
    assert len(notes) == 1


def test_discharge_before_admission_is_rejected(client, admit_patient, doctor):
    admission_id = admit_patient()["admissions"][0]["id"]

    r = _discharge(client, admission_id, doctor["id"], discharge_date="2024-06-01T08:00:00Z")

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "business_rule_violation"
    assert client.get(f"/api/v1/admissions/{admission_id}").json()["status"] == "active"


def test_discharge_requires_note(client, admit_patient, doctor):
    admission_id = admit_patient()["admissions"][0]["id"]

    r = _discharge(client, admission_id, doctor["id"], discharge_note="   ")

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "validation_error"


def test_complete_consultation_through_discharge(client, admit_patient, doctor):
    patient = admit_patient()
    consultation = _open_consultation(client, patient["id"], doctor["id"])
    assert consultation["mrn"] == patient["mrn"]
    assert consultation["doctor_name"] == "Dr. Salma Haddad"

    r = _discharge(client, consultation["id"], doctor["id"], kind="consultation")

    assert r.status_code == 200, r.text
    assert r.json()["status"] == "completed"

    completed = client.get(f"/api/v1/consultations/{consultation['id']}").json()
    assert completed["status"] == "completed"
    assert completed["completed_by"] == doctor["id"]
    assert completed["completion_note"].startswith("Stable")
    assert completed["completed_at"] is not None

    notes = client.get(
        "/api/v1/notes", params={"patient_id": patient["id"], "note_type": "Consultation Note"}
    ).json()
    assert len(notes) == 1

    # Admission untouched
    assert client.get("/api/v1/admissions/active").json()[0]["patient_id"] == patient["id"]


def test_unknown_author_is_not_found(client, admit_patient):
    admission_id = admit_patient()["admissions"][0]["id"]

    r = _discharge(client, admission_id, 999)

    assert r.status_code == 404


def test_failed_note_insert_rolls_back_status_change(db, client, admit_patient, doctor, monkeypatch):
    patient = admit_patient()
    admission_id = patient["admissions"][0]["id"]

    def failing_add(self, obj):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(MedicalNoteRepository, "add", failing_add)

    request = DischargeRequest(
        record_id=admission_id,
        discharged_by_id=doctor["id"],
        discharge_date="2024-06-12T14:00:00Z",
        discharge_note="Discharged home.",
    )
    with pytest.raises(PersistenceError):
        discharge_service.process_discharge(db, request=request)

    db.expire_all()
    assert db.get(Admission, admission_id).status == AdmissionStatus.ACTIVE
    assert db.query(MedicalNote).count() == 0
