# patientdesk/client/patients.py
from patientdesk.client.base import Store
from patientdesk.client.errors import StoreError
from patientdesk.schemas.patient import PatientCreate, PatientResponse, PatientUpdate


class PatientStore(Store):
    """
    Patients with their admission history.

    Records are replaced wholesale with what the server returns after each
    write, so the derived fields (doctor, department, diagnosis and date of
    the latest admission) always describe the committed state.
    """

    def __init__(self, http, **kwargs):
        super().__init__(http, **kwargs)
        self.patients: list[PatientResponse] = []
        self.selected_patient: PatientResponse | None = None

    def set_selected_patient(self, patient: PatientResponse | None) -> None:
        self._set(selected_patient=patient)

    def fetch_patients(self, search: str | None = None) -> None:
        self._start()
        try:
            params = {"search": search} if search else None
            response = self._request("GET", "/patients", params=params)
            patients = [PatientResponse.model_validate(item) for item in response.json()]
        except StoreError as exc:
            self._fail(exc)
            return
        self._set(patients=patients, loading=False)

    def select_patient(self, patient_id: int) -> PatientResponse | None:
        """Load one patient for the detail view and make it the selection."""
        self._start()
        try:
            response = self._request("GET", f"/patients/{patient_id}")
            patient = PatientResponse.model_validate(response.json())
        except StoreError as exc:
            self._fail(exc)
            return None
        self._set(
            patients=[patient if p.id == patient.id else p for p in self.patients],
            selected_patient=patient,
            loading=False,
        )
        return patient

    def add_patient(self, data: PatientCreate | dict) -> PatientResponse:
        self._start()
        try:
            response = self._request("POST", "/patients", json=self._payload(PatientCreate, data))
            patient = PatientResponse.model_validate(response.json())
        except StoreError as exc:
            self._fail(exc)
            raise
        self._set(patients=[patient, *self.patients], loading=False)
        return patient

    def update_patient(self, patient_id: int, updates: PatientUpdate | dict) -> PatientResponse:
        self._start()
        try:
            response = self._request(
                "PATCH",
                f"/patients/{patient_id}",
                json=self._payload(PatientUpdate, updates, partial=True),
            )
            patient = PatientResponse.model_validate(response.json())
        except StoreError as exc:
            self._fail(exc)
            raise
        selected = self.selected_patient
        self._set(
            patients=[patient if p.id == patient_id else p for p in self.patients],
            selected_patient=patient if selected and selected.id == patient_id else selected,
            loading=False,
        )
        return patient

    def delete_patient(self, patient_id: int) -> None:
        self._start()
        try:
            self._request("DELETE", f"/patients/{patient_id}")
        except StoreError as exc:
            self._fail(exc)
            raise
        selected = self.selected_patient
        self._set(
            patients=[p for p in self.patients if p.id != patient_id],
            selected_patient=None if selected and selected.id == patient_id else selected,
            loading=False,
        )
