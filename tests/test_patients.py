from patientdesk.models.admission import Admission
from patientdesk.models.consultation import Consultation
from patientdesk.models.medical_note import MedicalNote


def test_patient_without_admission(client):
    r = client.post("/api/v1/patients", json={"mrn": " MRN-050 ", "name": "Huda Kareem"})

    assert r.status_code == 201, r.text
    patient = r.json()
    assert patient["mrn"] == "MRN-050"
    assert patient["admissions"] == []
    assert patient["doctor_name"] is None
    assert patient["admission_date"] is None


def test_blank_name_is_a_validation_error(client):
    r = client.post("/api/v1/patients", json={"mrn": "MRN-051", "name": "  "})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "validation_error"


def test_duplicate_mrn_is_accepted(admit_patient):
    first = admit_patient(mrn="MRN-777")
    second = admit_patient(mrn="MRN-777", name="Omar Nasser Jr.")

    assert first["id"] != second["id"]


def test_list_and_search(client, admit_patient):
    admit_patient(mrn="MRN-001", name="Omar Nasser")
    admit_patient(mrn="MRN-002", name="Lina Saad")

    everyone = client.get("/api/v1/patients").json()
    assert [p["mrn"] for p in everyone] == ["MRN-002", "MRN-001"]

    by_name = client.get("/api/v1/patients", params={"search": "lina"}).json()
    assert [p["name"] for p in by_name] == ["Lina Saad"]

    by_mrn = client.get("/api/v1/patients", params={"search": "001"}).json()
    assert [p["mrn"] for p in by_mrn] == ["MRN-001"]


def test_display_fields_follow_latest_admission(client, admit_patient):
    patient = admit_patient()
    r = client.post(
        "/api/v1/admissions",
        json={
            "patient_id": patient["id"],
            "admission_date": "2024-06-12T09:00:00Z",
            "department": "Neurology",
            "diagnosis": "Migraine",
            "shift_type": "night",
        },
    )
    assert r.status_code == 201, r.text

    refreshed = client.get(f"/api/v1/patients/{patient['id']}").json()

    assert refreshed["department"] == "Neurology"
    assert refreshed["diagnosis"] == "Migraine"
    assert [a["visit_number"] for a in refreshed["admissions"]] == [2, 1]


def test_update_patient(client, admit_patient):
    patient = admit_patient()

    r = client.patch(f"/api/v1/patients/{patient['id']}", json={"name": "Omar A. Nasser"})

    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Omar A. Nasser"
    assert r.json()["mrn"] == patient["mrn"]


def test_delete_patient_cascades(db, client, admit_patient, doctor):
    patient = admit_patient()
    client.post(
        "/api/v1/consultations",
        json={"patient_id": patient["id"], "consultation_specialty": "Nephrology", "reason": "AKI"},
    )
    client.post(
        "/api/v1/notes",
        json={
            "patient_id": patient["id"],
            "doctor_id": doctor["id"],
            "note_type": "Progress Note",
            "content": "Improving.",
        },
    )

    r = client.delete(f"/api/v1/patients/{patient['id']}")

    assert r.status_code == 204
    assert client.get(f"/api/v1/patients/{patient['id']}").status_code == 404
    assert db.query(Admission).count() == 0
    assert db.query(Consultation).count() == 0
    assert db.query(MedicalNote).count() == 0


def test_delete_unknown_patient(client):
    r = client.delete("/api/v1/patients/123")

    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_notes_listed_newest_first(client, admit_patient):
    patient = admit_patient()
    for content in ("Day 1: admitted.", "Day 2: improving."):
        r = client.post(
            "/api/v1/notes",
            json={"patient_id": patient["id"], "note_type": "Progress Note", "content": content},
        )
        assert r.status_code == 201, r.text

    notes = client.get("/api/v1/notes", params={"patient_id": patient["id"]}).json()

    assert [n["content"] for n in notes] == ["Day 2: improving.", "Day 1: admitted."]
