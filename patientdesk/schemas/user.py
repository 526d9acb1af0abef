# patientdesk/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from patientdesk.models.user import RoleName


class UserCreate(BaseModel):
    name: str
    email: EmailStr | None = None
    department: str | None = None
    role: RoleName = RoleName.DOCTOR

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None
    department: str | None
    role: RoleName
    is_active: bool
    created_at: datetime
