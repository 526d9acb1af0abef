# patientdesk/repositories/base.py
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from patientdesk.core.exceptions import RecordNotFound
from patientdesk.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """
    Data access for one model.

    Repositories flush but never commit; the calling service owns the
    transaction so multi-step writes stay atomic.
    """

    model: type[ModelT]
    entity: str = "Record"

    def __init__(self, db: Session):
        self.db = db

    def find(self, record_id: int) -> ModelT | None:
        return self.db.get(self.model, record_id)

    def get(self, record_id: int) -> ModelT:
        obj = self.find(record_id)
        if obj is None:
            raise RecordNotFound(self.entity, record_id)
        return obj

    def add(self, obj: ModelT) -> ModelT:
        self.db.add(obj)
        self.db.flush()
        return obj

    def update(self, obj: ModelT, values: dict) -> ModelT:
        for field, value in values.items():
            setattr(obj, field, value)
        self.db.flush()
        return obj

    def delete(self, obj: ModelT) -> None:
        self.db.delete(obj)
        self.db.flush()
