"""Mark recording and report reading endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_can_view_student, get_current_user, require
from backend.app.models.user import User
from backend.app.schemas.report import (
    AddBulkMarksRequest,
    AddMarkRequest,
    BulkMarksResult,
    GroupedReportRead,
    ReportRead,
    UpdateMarkRequest,
)
from backend.app.services import mark_service
from backend.app.services.access_policy import Action, is_staff

router = APIRouter(prefix="/reports", tags=["reports"])

record_marks = require(Action.RECORD_MARKS)
view_all = require(Action.VIEW_ALL_REPORTS)


@router.post("/marks", response_model=ReportRead, status_code=status.HTTP_201_CREATED)
def add_mark(mark_in: AddMarkRequest, db: Session = Depends(get_db), current_user: User = Depends(record_marks)):
    return mark_service.add_or_update_mark(
        db,
        student_id=mark_in.student_id,
        module_id=mark_in.module_id,
        academic_data_id=mark_in.academic_data_id,
        score=mark_in.score,
        class_level=mark_in.class_level,
        comment=mark_in.teacher_comment,
        teacher_id=mark_in.teacher_id,
        author_id=current_user.id,
    )


@router.post("/marks/bulk", response_model=BulkMarksResult, status_code=status.HTTP_201_CREATED)
def add_bulk_marks(marks_in: AddBulkMarksRequest, db: Session = Depends(get_db), current_user: User = Depends(record_marks)):
    outcome = mark_service.add_or_update_bulk_marks(
        db,
        student_id=marks_in.student_id,
        academic_data_id=marks_in.academic_data_id,
        class_level=marks_in.class_level,
        module_marks=[(item.module_id, item.score) for item in marks_in.module_marks],
        comment=marks_in.teacher_comment,
        teacher_id=marks_in.teacher_id,
        author_id=current_user.id,
    )
    result = BulkMarksResult(
        reports=[ReportRead.model_validate(report) for report in outcome.reports],
        errors=outcome.errors,
        partial_success=outcome.partial_success,
    )
    if outcome.partial_success:
        return JSONResponse(status_code=status.HTTP_207_MULTI_STATUS, content=result.model_dump(mode="json"))
    return result


@router.put("/{report_id}", response_model=ReportRead)
def update_mark(report_id: int, mark_in: UpdateMarkRequest, db: Session = Depends(get_db), _=Depends(record_marks)):
    return mark_service.update_mark(
        db,
        report_id,
        score=mark_in.score,
        comment=mark_in.teacher_comment,
        class_level=mark_in.class_level,
    )


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mark(report_id: int, db: Session = Depends(get_db), _=Depends(record_marks)):
    mark_service.delete_mark(db, report_id)


@router.get("/student/{student_id}", response_model=List[ReportRead])
def get_student_reports(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_can_view_student(current_user, student_id)
    return mark_service.get_published_reports_by_student(db, student_id)


@router.get("/student/{student_id}/academic-data/{academic_data_id}", response_model=List[ReportRead])
def get_student_reports_for_period(
    student_id: int,
    academic_data_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_can_view_student(current_user, student_id)
    return mark_service.get_published_reports_by_student_and_academic_data(db, student_id, academic_data_id)


@router.get("/student/{student_id}/all", response_model=List[ReportRead])
def get_all_student_reports(student_id: int, db: Session = Depends(get_db), _=Depends(view_all)):
    return mark_service.get_reports_by_student(db, student_id)


@router.get("/student/{student_id}/grouped", response_model=List[GroupedReportRead])
def get_grouped_student_reports(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_can_view_student(current_user, student_id)
    if is_staff(current_user):
        reports = mark_service.get_reports_by_student(db, student_id)
    else:
        reports = mark_service.get_published_reports_by_student(db, student_id)
    return mark_service.group_reports(reports)
