"""Academic period schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import Period, Trimester


class AcademicDataCreate(BaseModel):
    trimester: Trimester
    academic_year: int = Field(ge=1900, le=9999)
    period: Period
    published: bool = False


class AcademicDataUpdate(BaseModel):
    trimester: Optional[Trimester] = None
    academic_year: Optional[int] = Field(default=None, ge=1900, le=9999)
    period: Optional[Period] = None
    published: Optional[bool] = None


class AcademicDataRead(BaseModel):
    id: int
    trimester: Trimester
    academic_year: int
    period: Period
    published: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
