"""Student schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.models.enums import ClassLevel, StudentStatus
from backend.app.schemas.module import ModuleRead
from backend.app.schemas.user import ParentInfo


class StudentBase(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    date_of_birth: date
    gender: str
    class_level: ClassLevel
    academic_year: str

    @field_validator("class_level", mode="before")
    @classmethod
    def parse_class_level(cls, value):
        return ClassLevel.parse(value)


class StudentCreate(StudentBase):
    status: StudentStatus = StudentStatus.ACTIVE
    parent_ids: List[int] = Field(default_factory=list)
    module_ids: List[int] = Field(default_factory=list)


class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    class_level: Optional[ClassLevel] = None
    academic_year: Optional[str] = None
    status: Optional[StudentStatus] = None

    @field_validator("class_level", mode="before")
    @classmethod
    def parse_class_level(cls, value):
        return ClassLevel.parse(value)


class StudentRead(StudentBase):
    id: int
    student_code: str
    status: StudentStatus
    profile_photo: Optional[str] = None
    parents: List[ParentInfo] = []
    modules: List[ModuleRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
