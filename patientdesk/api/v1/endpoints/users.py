# patientdesk/api/v1/endpoints/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from patientdesk.core.database import get_db, transaction
from patientdesk.core.exceptions import PersistenceError
from patientdesk.models.user import RoleName, User
from patientdesk.repositories.users import UserRepository
from patientdesk.schemas.user import UserCreate, UserResponse

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserResponse:
    """
    Register a staff member (clinicians are referenced by admissions).
    """
    repo = UserRepository(db)
    user = User(**payload.model_dump())
    try:
        with transaction(db):
            repo.add(user)
    except SQLAlchemyError as exc:
        raise PersistenceError("Failed to create user.") from exc
    return UserResponse.model_validate(repo.get(user.id))


@router.get("", response_model=list[UserResponse])
def list_users(
    role: Optional[RoleName] = Query(None, description="Filter by role"),
    department: Optional[str] = Query(None, description="Filter by department"),
    db: Session = Depends(get_db),
) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in UserRepository(db).list(role=role, department=department)]
