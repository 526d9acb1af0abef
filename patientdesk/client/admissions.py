# patientdesk/client/admissions.py
from patientdesk.client.base import Store
from patientdesk.client.errors import StoreError
from patientdesk.schemas.admission import AdmissionCreate, AdmissionResponse, AdmissionUpdate
from patientdesk.utils.datetime_utils import as_utc

UNKNOWN_DOCTOR = "Unknown Doctor"


def _with_display_fields(admission: AdmissionResponse) -> AdmissionResponse:
    if admission.doctor_name:
        return admission
    return admission.model_copy(update={"doctor_name": UNKNOWN_DOCTOR})


def _sorted(admissions: list[AdmissionResponse]) -> list[AdmissionResponse]:
    return sorted(admissions, key=lambda a: (as_utc(a.admission_date), a.id), reverse=True)


class AdmissionStore(Store):
    """Admission history of one patient, most recent first."""

    def __init__(self, http, **kwargs):
        super().__init__(http, **kwargs)
        self.admissions: list[AdmissionResponse] = []
        self.patient_id: int | None = None

    def fetch_admissions(self, patient_id: int) -> None:
        self._start()
        try:
            response = self._request("GET", "/admissions", params={"patient_id": patient_id})
            admissions = [
                _with_display_fields(AdmissionResponse.model_validate(item)) for item in response.json()
            ]
        except StoreError as exc:
            self._fail(exc)
            return
        self._set(admissions=_sorted(admissions), patient_id=patient_id, loading=False)

    def create_admission(self, data: AdmissionCreate | dict) -> AdmissionResponse:
        self._start()
        try:
            response = self._request("POST", "/admissions", json=self._payload(AdmissionCreate, data))
            admission = _with_display_fields(AdmissionResponse.model_validate(response.json()))
        except StoreError as exc:
            self._fail(exc)
            raise
        admissions = self.admissions
        if self.patient_id in (None, admission.patient_id):
            admissions = _sorted([admission, *admissions])
        self._set(admissions=admissions, patient_id=admission.patient_id, loading=False)
        return admission

    def update_admission(self, admission_id: int, updates: AdmissionUpdate | dict) -> AdmissionResponse:
        self._start()
        try:
            response = self._request(
                "PATCH",
                f"/admissions/{admission_id}",
                json=self._payload(AdmissionUpdate, updates, partial=True),
            )
            admission = _with_display_fields(AdmissionResponse.model_validate(response.json()))
        except StoreError as exc:
            self._fail(exc)
            raise
        self._set(
            admissions=_sorted([admission if a.id == admission_id else a for a in self.admissions]),
            loading=False,
        )
        return admission
