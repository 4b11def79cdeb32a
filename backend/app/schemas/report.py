"""Report (mark) request and response schemas."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.models.enums import ClassLevel, Period, Trimester


class AddMarkRequest(BaseModel):
    student_id: int
    module_id: int
    academic_data_id: int
    score: int = Field(ge=0, le=100)
    class_level: Optional[ClassLevel] = None
    teacher_comment: Optional[str] = Field(default=None, max_length=500)
    teacher_id: Optional[int] = None

    @field_validator("class_level", mode="before")
    @classmethod
    def parse_class_level(cls, value):
        return ClassLevel.parse(value)


class ModuleMark(BaseModel):
    module_id: int
    score: int


class AddBulkMarksRequest(BaseModel):
    student_id: int
    academic_data_id: int
    class_level: Optional[ClassLevel] = None
    module_marks: List[ModuleMark] = Field(min_length=1)
    teacher_comment: Optional[str] = Field(default=None, max_length=500)
    teacher_id: Optional[int] = None

    @field_validator("class_level", mode="before")
    @classmethod
    def parse_class_level(cls, value):
        return ClassLevel.parse(value)


class UpdateMarkRequest(BaseModel):
    score: Optional[int] = Field(default=None, ge=0, le=100)
    class_level: Optional[ClassLevel] = None
    teacher_comment: Optional[str] = Field(default=None, max_length=500)

    @field_validator("class_level", mode="before")
    @classmethod
    def parse_class_level(cls, value):
        return ClassLevel.parse(value)


class ReportRead(BaseModel):
    id: int
    student_id: int
    module_id: int
    module_name: str
    academic_data_id: int
    trimester: Trimester
    academic_year: int
    period: Period
    class_level: Optional[ClassLevel] = None
    score: int
    grade_color: str
    teacher_comment: Optional[str] = None
    teacher_id: Optional[int] = None
    approved_by_id: Optional[int] = None
    date_recorded: date

    model_config = ConfigDict(from_attributes=True)


class BulkMarksResult(BaseModel):
    reports: List[ReportRead]
    errors: List[str]
    partial_success: bool


class ModuleScore(BaseModel):
    module_id: int
    module_name: str
    score: int
    grade_color: str


class GroupedReportRead(BaseModel):
    student_id: int
    student_name: str
    academic_data_id: int
    trimester: Trimester
    academic_year: int
    period: Period
    class_level: Optional[ClassLevel] = None
    marks: List[ModuleScore]
    teacher_comment: Optional[str] = None
    teacher_name: Optional[str] = None
