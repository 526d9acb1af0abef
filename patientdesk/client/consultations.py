# patientdesk/client/consultations.py
from patientdesk.client.base import Store
from patientdesk.client.errors import StoreError
from patientdesk.schemas.consultation import ConsultationCreate, ConsultationResponse


class ConsultationStore(Store):
    def __init__(self, http, **kwargs):
        super().__init__(http, **kwargs)
        self.consultations: list[ConsultationResponse] = []

    def fetch_consultations(self, *, status: str | None = None, specialty: str | None = None) -> None:
        self._start()
        params = {key: value for key, value in (("status", status), ("specialty", specialty)) if value}
        try:
            response = self._request("GET", "/consultations", params=params or None)
            consultations = [ConsultationResponse.model_validate(item) for item in response.json()]
        except StoreError as exc:
            self._fail(exc)
            return
        self._set(consultations=consultations, loading=False)

    def create_consultation(self, data: ConsultationCreate | dict) -> ConsultationResponse:
        self._start()
        try:
            response = self._request(
                "POST", "/consultations", json=self._payload(ConsultationCreate, data)
            )
            consultation = ConsultationResponse.model_validate(response.json())
        except StoreError as exc:
            self._fail(exc)
            raise
        self._set(consultations=[consultation, *self.consultations], loading=False)
        return consultation
