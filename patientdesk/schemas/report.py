# patientdesk/schemas/report.py
import hashlib
from datetime import date
from enum import Enum

from pydantic import BaseModel, model_validator

from patientdesk.schemas.admission import ActivePatient
from patientdesk.schemas.consultation import ConsultationResponse
from patientdesk.schemas.patient import PatientResponse


class ReportType(str, Enum):
    ALL = "all"
    ADMISSIONS = "admissions"
    CONSULTATIONS = "consultations"


class ReportFilters(BaseModel):
    report_type: ReportType = ReportType.ALL
    specialty: str = "all"
    search: str = ""
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_range(self) -> "ReportFilters":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def cache_key(self) -> str:
        """Digest of every filter value as given; specialty matching is case-sensitive."""
        return hashlib.sha256(self.model_dump_json().encode()).hexdigest()


class ReportResponse(BaseModel):
    filters: ReportFilters
    patients: list[PatientResponse] = []
    consultations: list[ConsultationResponse] = []
    patient_count: int = 0
    consultation_count: int = 0


class SpecialtyCensus(BaseModel):
    specialty: str | None = None
    patients: list[PatientResponse] = []
    consultations: list[ActivePatient] = []
