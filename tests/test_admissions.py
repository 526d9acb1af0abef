FRIDAY = "2024-06-07T10:00:00Z"
SATURDAY = "2024-06-08T22:30:00Z"
MONDAY = "2024-06-10T09:00:00Z"


def _admit_again(client, patient_id, **fields):
    body = {
        "patient_id": patient_id,
        "admission_date": MONDAY,
        "department": "Cardiology",
        "diagnosis": "Follow-up",
        "shift_type": "evening",
        **fields,
    }
    return client.post("/api/v1/admissions", json=body)


def test_intake_creates_first_visit(admit_patient, doctor):
    patient = admit_patient(admitting_doctor_id=doctor["id"], safety_type="short-stay")

    assert len(patient["admissions"]) == 1
    admission = patient["admissions"][0]
    assert admission["visit_number"] == 1
    assert admission["status"] == "active"
    assert admission["is_weekend"] is False
    assert admission["safety_type"] == "short-stay"
    assert patient["doctor_name"] == "Dr. Salma Haddad"
    assert patient["department"] == "Cardiology"
    assert patient["diagnosis"] == "Chest pain"


def test_client_weekend_flag_is_overridden(admit_patient):
    patient = admit_patient(admission_date=FRIDAY, shift_type="weekend_morning", is_weekend=False)

    assert patient["admissions"][0]["is_weekend"] is True


def test_weekend_admission_with_weekday_shift_is_rejected(client, admit_patient):
    r = client.post(
        "/api/v1/patients",
        json={
            "mrn": "MRN-900",
            "name": "Rejected Intake",
            "admission": {
                "admission_date": FRIDAY,
                "department": "Cardiology",
                "shift_type": "morning",
            },
        },
    )

    assert r.status_code == 422, r.text
    body = r.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "shift_rule_violation"
    assert body["error"]["message"] == "Weekend admissions must use weekend shift types"
    # Intake is atomic: no orphan patient
    assert client.get("/api/v1/patients", params={"search": "MRN-900"}).json() == []


def test_weekday_admission_with_weekend_shift_is_rejected(client, admit_patient):
    patient = admit_patient()

    r = _admit_again(client, patient["id"], shift_type="weekend_night")

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "shift_rule_violation"
    assert r.json()["error"]["message"] == "Weekday admissions cannot use weekend shift types"


def test_visit_numbers_continue_per_patient(client, admit_patient):
    first = admit_patient(mrn="MRN-001")
    other = admit_patient(mrn="MRN-002", name="Lina Saad")

    second = _admit_again(client, first["id"], admission_date="2024-06-11T09:00:00Z")
    third = _admit_again(client, first["id"], admission_date=SATURDAY, shift_type="weekend_night")

    assert second.status_code == 201, second.text
    assert third.status_code == 201, third.text
    assert second.json()["visit_number"] == 2
    assert third.json()["visit_number"] == 3
    assert third.json()["is_weekend"] is True
    assert other["admissions"][0]["visit_number"] == 1

    # Listed by admission date, so the back-dated third visit comes last
    history = client.get("/api/v1/admissions", params={"patient_id": first["id"]}).json()
    assert [a["visit_number"] for a in history] == [2, 1, 3]


def test_admission_for_unknown_patient_is_not_found(client):
    r = _admit_again(client, 999)

    assert r.status_code == 404
    assert r.json()["error"] == {"code": "not_found", "message": "Patient not found"}


def test_update_to_saturday_requires_weekend_shift(client, admit_patient):
    admission_id = admit_patient()["admissions"][0]["id"]

    rejected = client.patch(f"/api/v1/admissions/{admission_id}", json={"admission_date": SATURDAY})
    assert rejected.status_code == 422
    assert rejected.json()["error"]["code"] == "shift_rule_violation"

    unchanged = client.get(f"/api/v1/admissions/{admission_id}").json()
    assert unchanged["shift_type"] == "morning"
    assert unchanged["is_weekend"] is False

    accepted = client.patch(
        f"/api/v1/admissions/{admission_id}",
        json={"admission_date": SATURDAY, "shift_type": "weekend_night", "is_weekend": False},
    )
    assert accepted.status_code == 200, accepted.text
    assert accepted.json()["is_weekend"] is True
    assert accepted.json()["shift_type"] == "weekend_night"


def test_update_can_clear_attending_doctor(client, admit_patient, doctor):
    admission_id = admit_patient(admitting_doctor_id=doctor["id"])["admissions"][0]["id"]

    r = client.patch(f"/api/v1/admissions/{admission_id}", json={"admitting_doctor_id": None})

    assert r.status_code == 200, r.text
    assert r.json()["admitting_doctor_id"] is None
    assert r.json()["doctor_name"] is None


def test_active_admissions_projection(client, admit_patient, doctor):
    admit_patient(mrn="MRN-001", admitting_doctor_id=doctor["id"])
    admit_patient(mrn="MRN-002", name="Lina Saad", admission_date=SATURDAY, shift_type="weekend_morning")

    rows = client.get("/api/v1/admissions/active").json()

    # Most recent admission first: Monday 06-10 before Saturday 06-08
    assert [row["mrn"] for row in rows] == ["MRN-001", "MRN-002"]
    assert rows[0]["doctor_name"] == "Dr. Salma Haddad"
    assert rows[1]["name"] == "Lina Saad"
    assert rows[1]["doctor_name"] is None
    assert rows[1]["is_weekend"] is True
    assert all(row["status"] == "active" for row in rows)


def test_unknown_doctor_is_not_found(client, admit_patient):
    patient = admit_patient()

    r = _admit_again(client, patient["id"], admitting_doctor_id=4242)

    assert r.status_code == 404
    assert r.json()["error"]["message"] == "User not found"


def test_update_rejects_blank_department(client, admit_patient):
    admission_id = admit_patient()["admissions"][0]["id"]

    r = client.patch(f"/api/v1/admissions/{admission_id}", json={"department": "   "})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "validation_error"
    assert client.get(f"/api/v1/admissions/{admission_id}").json()["department"] == "Cardiology"
