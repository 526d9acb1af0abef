# patientdesk/core/exceptions.py
"""
Domain error taxonomy.

Services raise these; the API layer maps each one to an HTTP status and a
stable error code so clients can tell a rejected business rule apart from a
failed write.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class PatientDeskError(Exception):
    code = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFound(PatientDeskError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, record_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.record_id = record_id


class BusinessRuleViolation(PatientDeskError):
    """Input is well-formed but breaks a clinical record rule."""

    code = "business_rule_violation"
    status_code = 422


class ShiftRuleViolation(BusinessRuleViolation):
    """Shift type does not match the weekend flag derived from the admission date."""

    code = "shift_rule_violation"


class InvalidTransition(PatientDeskError):
    """Lifecycle change not allowed from the record's current status."""

    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT


class PersistenceError(PatientDeskError):
    code = "persistence_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(code: str, message) -> dict:
    return {"ok": False, "error": {"code": code, "message": message}}


async def patientdesk_error_handler(request: Request, exc: PatientDeskError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=_error_body("validation_error", jsonable_encoder(exc.errors())),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PatientDeskError, patientdesk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
