# patientdesk/client/discharge.py
from patientdesk.client.base import Store
from patientdesk.client.errors import StoreError
from patientdesk.domain.worklist import consultation_as_active_patient
from patientdesk.schemas.admission import ActiveAdmission, ActivePatient
from patientdesk.schemas.consultation import ConsultationResponse
from patientdesk.schemas.discharge import DischargeData, DischargeKind, DischargeResponse


class DischargeStore(Store):
    """
    Discharge worklist: active admissions followed by active consultations.

    ``current_user_id`` is the clinician signing discharges; it is recorded
    as the author of the discharge note.
    """

    def __init__(self, http, *, current_user_id: int | None = None, **kwargs):
        super().__init__(http, **kwargs)
        self.current_user_id = current_user_id
        self.active_patients: list[ActivePatient] = []
        self.selected_patient: ActivePatient | None = None

    def set_selected_patient(self, patient: ActivePatient | None) -> None:
        self._set(selected_patient=patient)

    def fetch_active_patients(self) -> None:
        self._start()
        try:
            response = self._request("GET", "/admissions/active")
            admissions = [
                ActivePatient.model_validate(ActiveAdmission.model_validate(item).model_dump())
                for item in response.json()
            ]

            response = self._request("GET", "/consultations", params={"status": "active"})
            consultations = [
                consultation_as_active_patient(ConsultationResponse.model_validate(item))
                for item in response.json()
            ]
        except StoreError as exc:
            self._fail(exc)
            return
        self._set(active_patients=[*admissions, *consultations], loading=False)

    def process_discharge(self, data: DischargeData | dict) -> DischargeResponse:
        """
        Discharge the selected patient.

        The server commits the status change and the note together; only
        then is the worklist re-fetched and the selection cleared.
        """
        self._start()
        try:
            selected = self.selected_patient
            if selected is None:
                raise StoreError("No patient selected")
            if self.current_user_id is None:
                raise StoreError("No user logged in")

            if selected.is_consultation:
                kind = DischargeKind.CONSULTATION
                record_id = selected.consultation_id or selected.id
            else:
                kind = DischargeKind.ADMISSION
                record_id = selected.id

            payload = self._payload(DischargeData, data)
            payload.update(
                kind=kind.value,
                record_id=record_id,
                discharged_by_id=self.current_user_id,
            )
            response = self._request("POST", "/discharges", json=payload)
            result = DischargeResponse.model_validate(response.json())

            self.fetch_active_patients()
        except StoreError as exc:
            self._fail(exc)
            raise

        self._set(selected_patient=None, loading=False)
        return result
