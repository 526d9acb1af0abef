# patientdesk/repositories/users.py
from __future__ import annotations

from patientdesk.models.user import RoleName, User
from patientdesk.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User
    entity = "User"

    def list(self, *, role: RoleName | None = None, department: str | None = None) -> list[User]:
        query = self.db.query(User).filter(User.is_active.is_(True))
        if role is not None:
            query = query.filter(User.role == role)
        if department:
            query = query.filter(User.department == department)
        return query.order_by(User.name.asc()).all()
