"""User schemas used for registration and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from backend.app.models.enums import Role


class UserCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=3, max_length=20)
    password: str = Field(min_length=4)
    email: Optional[EmailStr] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    roles: List[Role] = Field(default_factory=lambda: [Role.PARENTS])


class UserRead(BaseModel):
    id: int
    full_name: str
    phone: str
    email: Optional[EmailStr] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    roles: List[Role]
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ParentInfo(BaseModel):
    id: int
    full_name: str
    phone: str
    email: Optional[EmailStr] = None

    model_config = ConfigDict(from_attributes=True)
