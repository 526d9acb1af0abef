from patientdesk.repositories.admissions import AdmissionRepository
from patientdesk.repositories.patients import PatientRepository


def test_active_rows_join_patient_and_clinician(db, admit_patient, doctor):
    admit_patient(mrn="MRN-001", name="Omar Nasser", admitting_doctor_id=doctor["id"])
    admit_patient(mrn="MRN-002", name="Lina Saad")

    rows = AdmissionRepository(db).active_rows()

    by_mrn = {row.mrn: row for row in rows}
    assert set(by_mrn) == {"MRN-001", "MRN-002"}
    assert by_mrn["MRN-001"].doctor_name == "Dr. Salma Haddad"
    assert by_mrn["MRN-002"].doctor_name is None


def test_list_by_mrn_keeps_duplicates(db, admit_patient):
    first = admit_patient(mrn="MRN-001", name="Omar Nasser")
    second = admit_patient(mrn="MRN-001", name="Omar Nasser")

    patients = PatientRepository(db).list_by_mrn("MRN-001")

    assert [p.id for p in patients] == [first["id"], second["id"]]


def test_search_wildcards_match_literally(client, admit_patient):
    admit_patient(mrn="MRN_1", name="Huda Kareem")
    admit_patient(mrn="MRNX1", name="Tariq Aziz")

    underscore = client.get("/api/v1/patients", params={"search": "MRN_1"}).json()
    percent = client.get("/api/v1/patients", params={"search": "%"}).json()

    assert [p["mrn"] for p in underscore] == ["MRN_1"]
    assert percent == []
