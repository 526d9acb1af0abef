# patientdesk/api/v1/router.py
from fastapi import APIRouter

from patientdesk.api.v1.endpoints import (
    admissions,
    consultations,
    discharges,
    notes,
    patients,
    reports,
    users,
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(admissions.router, prefix="/admissions", tags=["admissions"])
api_router.include_router(consultations.router, prefix="/consultations", tags=["consultations"])
api_router.include_router(discharges.router, prefix="/discharges", tags=["discharges"])
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
