# patientdesk/client/base.py
import logging
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ValidationError

from patientdesk.client.errors import (
    BusinessRuleError,
    RemoteOperationError,
    StoreError,
    error_from_response,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[["Store"], None]


class Store:
    """
    Client-side cache of remote records.

    Every store keeps ``loading`` and ``error`` next to its data. Subscribers
    are called with the store after each state change; ``subscribe`` returns
    the function that removes the subscription.
    """

    def __init__(self, http: httpx.Client, *, api_prefix: str = "/api/v1"):
        self.http = http
        self.api_prefix = api_prefix.rstrip("/")
        self.loading = False
        self.error: str | None = None
        self.error_code: str | None = None
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        for callback in list(self._subscribers):
            callback(self)

    def _start(self) -> None:
        self._set(loading=True, error=None, error_code=None)

    def _fail(self, exc: StoreError) -> None:
        logger.warning("%s failed: %s", type(self).__name__, exc.message)
        self._set(loading=False, error=exc.message, error_code=exc.code)

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.http.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteOperationError(str(exc) or type(exc).__name__) from exc
        if response.is_error:
            raise error_from_response(response)
        return response

    @staticmethod
    def _payload(model: type[BaseModel], data: BaseModel | dict, *, partial: bool = False) -> dict:
        """Validate locally, then serialise for the wire."""
        if not isinstance(data, model):
            try:
                data = model.model_validate(data)
            except ValidationError as exc:
                message = "; ".join(err["msg"] for err in exc.errors())
                raise BusinessRuleError(message, code="validation_error") from exc
        return data.model_dump(mode="json", exclude_unset=partial)
