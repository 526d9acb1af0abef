# patientdesk/client/errors.py
"""
Errors raised by the client stores.

A request the server rejected on business grounds (shift mismatch,
discharge of a closed record, unknown patient) is a ``BusinessRuleError``;
anything that failed in transport or on the server side is a
``RemoteOperationError``.
"""

import httpx

# Error codes produced by patientdesk.core.exceptions
BUSINESS_RULE_CODES = frozenset(
    {
        "business_rule_violation",
        "shift_rule_violation",
        "invalid_transition",
        "validation_error",
        "not_found",
    }
)


class StoreError(Exception):
    code = "client_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.status_code = status_code


class BusinessRuleError(StoreError):
    code = "business_rule_violation"


class RemoteOperationError(StoreError):
    code = "remote_error"


def _message_from(detail) -> str:
    # validation_error carries pydantic's error list
    if isinstance(detail, list):
        return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
    return str(detail)


def error_from_response(response: httpx.Response) -> StoreError:
    code = None
    message = response.reason_phrase or f"HTTP {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            code = error.get("code")
            message = _message_from(error.get("message", message))
        elif "detail" in body:
            message = _message_from(body["detail"])

    if response.is_client_error and (code in BUSINESS_RULE_CODES or code is None):
        return BusinessRuleError(message, code=code, status_code=response.status_code)
    return RemoteOperationError(message, code=code, status_code=response.status_code)
