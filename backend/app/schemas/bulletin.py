"""Free-form bulletin render request."""

from typing import List, Optional

from pydantic import BaseModel, Field

from backend.app.models.enums import Trimester


class ModuleGrade(BaseModel):
    module_name: str = Field(min_length=1)
    category: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)


class BulletinRequest(BaseModel):
    student_name: str = Field(min_length=1)
    classe: str
    academic_year: str
    trimester: Trimester = Trimester.FIRST
    grades: List[ModuleGrade] = Field(min_length=1)
    comment: Optional[str] = None
