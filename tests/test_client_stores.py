import httpx
import pytest

from patientdesk.client.admissions import UNKNOWN_DOCTOR, AdmissionStore
from patientdesk.client.consultations import ConsultationStore
from patientdesk.client.discharge import DischargeStore
from patientdesk.client.errors import BusinessRuleError, RemoteOperationError, StoreError
from patientdesk.client.patients import PatientStore
from patientdesk.schemas.admission import ActivePatient

MONDAY = "2024-06-10T09:00:00Z"
FRIDAY = "2024-06-07T10:00:00Z"


def _intake(mrn="MRN-001", name="Omar Nasser", **admission):
    return {
        "mrn": mrn,
        "name": name,
        "admission": {
            "admission_date": MONDAY,
            "department": "Cardiology",
            "diagnosis": "Chest pain",
            "shift_type": "morning",
            **admission,
        },
    }


def _unreachable() -> httpx.Client:
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://patientdesk.local")


def test_fetch_failure_sets_error_without_raising():
    store = PatientStore(_unreachable())

    store.fetch_patients()

    assert store.loading is False
    assert store.error == "connection refused"
    assert store.error_code == "remote_error"
    assert store.patients == []


def test_subscribers_see_each_state_change(client):
    store = PatientStore(client)
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append((s.loading, len(s.patients))))

    store.add_patient(_intake())

    assert seen[0] == (True, 0)
    assert seen[-1] == (False, 1)

    unsubscribe()
    store.fetch_patients()
    assert len(seen) == 2


def test_add_patient_prepends_and_clears_error(client):
    store = PatientStore(client)
    store.add_patient(_intake(mrn="MRN-001"))
    store.add_patient(_intake(mrn="MRN-002", name="Lina Saad"))

    assert [p.mrn for p in store.patients] == ["MRN-002", "MRN-001"]
    assert store.error is None


def test_rejected_shift_is_a_business_rule_error(client):
    store = PatientStore(client)

    with pytest.raises(BusinessRuleError) as excinfo:
        store.add_patient(_intake(admission_date=FRIDAY))

    assert excinfo.value.code == "shift_rule_violation"
    assert excinfo.value.status_code == 422
    assert store.error == "Weekend admissions must use weekend shift types"
    assert store.patients == []


def test_local_validation_error_is_raised_before_any_request():
    store = PatientStore(_unreachable())

    with pytest.raises(BusinessRuleError) as excinfo:
        store.add_patient({"mrn": "MRN-001", "name": ""})

    assert excinfo.value.code == "validation_error"


def test_update_and_delete_keep_selection_in_step(client):
    store = PatientStore(client)
    patient = store.add_patient(_intake())
    store.select_patient(patient.id)

    store.update_patient(patient.id, {"name": "Omar A. Nasser"})
    assert store.selected_patient.name == "Omar A. Nasser"
    assert store.patients[0].name == "Omar A. Nasser"

    store.delete_patient(patient.id)
    assert store.patients == []
    assert store.selected_patient is None

    with pytest.raises(BusinessRuleError) as excinfo:
        store.delete_patient(patient.id)
    assert excinfo.value.code == "not_found"


def test_admission_store_defaults_doctor_name_and_sorts(client):
    patient = PatientStore(client).add_patient(_intake())
    store = AdmissionStore(client)

    created = store.create_admission(
        {
            "patient_id": patient.id,
            "admission_date": "2024-06-14T20:00:00Z",
            "department": "Cardiology",
            "diagnosis": "Arrhythmia",
            "shift_type": "weekend_night",
        }
    )
    store.fetch_admissions(patient.id)

    assert created.visit_number == 2
    assert created.is_weekend is True
    assert [a.visit_number for a in store.admissions] == [2, 1]
    assert all(a.doctor_name == UNKNOWN_DOCTOR for a in store.admissions)


def test_admission_update_rejection_reraises(client):
    patient = PatientStore(client).add_patient(_intake())
    store = AdmissionStore(client)
    store.fetch_admissions(patient.id)
    admission_id = store.admissions[0].id

    with pytest.raises(BusinessRuleError):
        store.update_admission(admission_id, {"admission_date": FRIDAY})

    assert store.error_code == "shift_rule_violation"
    assert store.admissions[0].shift_type == "morning"


def test_discharge_flow(client, doctor):
    patients = PatientStore(client)
    first = patients.add_patient(_intake(mrn="MRN-001"))
    second = patients.add_patient(_intake(mrn="MRN-002", name="Lina Saad"))
    consultation = ConsultationStore(client).create_consultation(
        {"patient_id": second.id, "consultation_specialty": "Nephrology", "reason": "AKI"}
    )

    store = DischargeStore(client, current_user_id=doctor["id"])
    store.fetch_active_patients()

    # Admissions first, then consultations
    assert [(p.is_consultation, p.patient_id) for p in store.active_patients] == [
        (False, second.id),
        (False, first.id),
        (True, second.id),
    ]
    pending = store.active_patients[-1]
    assert pending.consultation_id == consultation.id
    assert pending.doctor_name == "Pending Assignment"
    assert pending.shift_type == "morning"
    assert pending.is_weekend is False

    store.set_selected_patient(pending)
    result = store.process_discharge(
        {"discharge_date": "2024-06-12T10:00:00Z", "discharge_note": "Renal function recovered."}
    )

    assert result.kind == "consultation"
    assert result.status == "completed"
    assert store.selected_patient is None
    assert len(store.active_patients) == 2
    assert not any(p.is_consultation for p in store.active_patients)


def test_discharge_needs_selection_and_user(client):
    store = DischargeStore(client)

    with pytest.raises(StoreError, match="No patient selected"):
        store.process_discharge({"discharge_date": MONDAY, "discharge_note": "Home."})

    patient = PatientStore(client).add_patient(_intake())
    store.fetch_active_patients()
    store.set_selected_patient(store.active_patients[0])

    with pytest.raises(StoreError, match="No user logged in"):
        store.process_discharge({"discharge_date": MONDAY, "discharge_note": "Home."})

    assert store.error == "No user logged in"
    assert store.active_patients[0].patient_id == patient.id


def test_discharge_transport_failure_keeps_selection():
    selected = ActivePatient(
        id=7,
        patient_id=3,
        mrn="MRN-003",
        name="Nour Aziz",
        admission_date=MONDAY,
        department="Cardiology",
        diagnosis="Chest pain",
        shift_type="morning",
        is_weekend=False,
    )
    store = DischargeStore(_unreachable(), current_user_id=1)
    store.set_selected_patient(selected)

    with pytest.raises(RemoteOperationError):
        store.process_discharge({"discharge_date": MONDAY, "discharge_note": "Home."})

    assert store.selected_patient == selected
    assert store.loading is False
    assert store.error_code == "remote_error"
