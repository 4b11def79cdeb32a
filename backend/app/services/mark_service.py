"""Recording, updating and reading student marks.

Marks are stored as one Report per (student, module, academic period). Writes
validate existence, enrollment and the score range before touching the
database; bulk writes collect per-item failures instead of aborting.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.app_logger import get_logger
from backend.app.core.exceptions import (
    BulkMarksError,
    EnrollmentError,
    NotFoundError,
    ValidationError,
)
from backend.app.crud.crud_academic_data import academic_data_crud
from backend.app.crud.crud_module import module_crud
from backend.app.crud.crud_report import report_crud
from backend.app.crud.crud_student import student_crud
from backend.app.crud.crud_user import user_crud
from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import ClassLevel
from backend.app.models.module import Module
from backend.app.models.report import Report
from backend.app.models.student import Student
from backend.app.models.user import User
from backend.app.services.grading import classify_score, is_valid_score

logger = get_logger("marks")


@dataclass
class BulkMarksOutcome:
    reports: List[Report] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def partial_success(self) -> bool:
        return bool(self.reports) and bool(self.errors)


def _get_student(db: Session, student_id: int) -> Student:
    student = student_crud.get(db, student_id=student_id)
    if not student:
        raise NotFoundError.for_entity("Student", student_id)
    return student


def _get_module(db: Session, module_id: int) -> Module:
    module = module_crud.get(db, module_id=module_id)
    if not module:
        raise NotFoundError.for_entity("Module", module_id)
    return module


def _get_academic_data(db: Session, academic_data_id: int) -> AcademicData:
    academic_data = academic_data_crud.get(db, academic_data_id=academic_data_id)
    if not academic_data:
        raise NotFoundError.for_entity("Academic data", academic_data_id)
    return academic_data


def _get_teacher(db: Session, teacher_id: Optional[int]) -> Optional[User]:
    if teacher_id is None:
        return None
    teacher = user_crud.get(db, user_id=teacher_id)
    if not teacher:
        raise NotFoundError.for_entity("Teacher", teacher_id)
    return teacher


def _get_report(db: Session, report_id: int) -> Report:
    report = report_crud.get(db, report_id=report_id)
    if not report:
        raise NotFoundError.for_entity("Report", report_id)
    return report


def _check_score(score, module_name: str) -> None:
    if not is_valid_score(score):
        raise ValidationError(f"Invalid score for module {module_name}: {score} (must be 0-100)")


def _apply(report: Report, score: int, class_level, comment, teacher: Optional[User]) -> None:
    report.score = score
    report.grade_color = classify_score(score)
    if class_level is not None:
        report.class_level = class_level
    if comment is not None:
        report.teacher_comment = comment
    if teacher is not None:
        report.teacher_id = teacher.id


def _upsert(
    db: Session,
    student: Student,
    module: Module,
    academic_data: AcademicData,
    score: int,
    class_level: Optional[ClassLevel],
    comment: Optional[str],
    teacher: Optional[User],
    author: Optional[User] = None,
) -> Report:
    """Insert or update the report for the triple, flushing inside a savepoint.

    ``author`` is recorded as the teacher only when a new report is inserted;
    updates keep the stored teacher unless ``teacher`` is given.
    """
    existing = report_crud.get_by_triple(
        db, student_id=student.id, module_id=module.id, academic_data_id=academic_data.id
    )
    if existing:
        _apply(existing, score, class_level, comment, teacher)
        db.flush()
        return existing

    report = Report(
        student_id=student.id,
        module_id=module.id,
        academic_data_id=academic_data.id,
    )
    _apply(report, score, class_level, comment, teacher or author)
    savepoint = db.begin_nested()
    try:
        db.add(report)
        db.flush()
        savepoint.commit()
        return report
    except IntegrityError:
        # A concurrent writer inserted the same triple first
        savepoint.rollback()
        winner = report_crud.get_by_triple(
            db, student_id=student.id, module_id=module.id, academic_data_id=academic_data.id
        )
        if winner is None:
            raise
        _apply(winner, score, class_level, comment, teacher)
        db.flush()
        return winner


def add_or_update_mark(
    db: Session,
    student_id: int,
    module_id: int,
    academic_data_id: int,
    score: int,
    class_level: Optional[ClassLevel] = None,
    comment: Optional[str] = None,
    teacher_id: Optional[int] = None,
    author_id: Optional[int] = None,
) -> Report:
    student = _get_student(db, student_id)
    module = _get_module(db, module_id)
    academic_data = _get_academic_data(db, academic_data_id)
    if not student.is_enrolled_in(module.id):
        raise EnrollmentError(module.name)
    _check_score(score, module.name)
    teacher = _get_teacher(db, teacher_id)
    author = _get_teacher(db, author_id)

    report = _upsert(db, student, module, academic_data, score, class_level, comment, teacher, author)
    db.commit()
    db.refresh(report)
    logger.info(
        "Saved mark %s for student %s module %s period %s (%s)",
        score, student.id, module.id, academic_data.id, report.grade_color,
    )
    return report


def add_or_update_bulk_marks(
    db: Session,
    student_id: int,
    academic_data_id: int,
    class_level: Optional[ClassLevel],
    module_marks: Iterable[Tuple[int, int]],
    comment: Optional[str] = None,
    teacher_id: Optional[int] = None,
    author_id: Optional[int] = None,
) -> BulkMarksOutcome:
    """Record several module scores for one student and period.

    Failing items are reported in ``errors`` and skipped. When nothing could be
    saved a BulkMarksError is raised and no report is persisted.
    """
    student = _get_student(db, student_id)
    academic_data = _get_academic_data(db, academic_data_id)
    teacher = _get_teacher(db, teacher_id)
    author = _get_teacher(db, author_id)

    outcome = BulkMarksOutcome()
    for module_id, score in module_marks:
        module = module_crud.get(db, module_id=module_id)
        if module is None:
            outcome.errors.append(
                f"Error processing module {module_id}: Module not found with id: {module_id}"
            )
            continue
        if not student.is_enrolled_in(module.id):
            outcome.errors.append(f"Student is not enrolled in module: {module.name}")
            continue
        if not is_valid_score(score):
            outcome.errors.append(f"Invalid score for module {module.name}: {score} (must be 0-100)")
            continue
        outcome.reports.append(
            _upsert(db, student, module, academic_data, score, class_level, comment, teacher, author)
        )

    if not outcome.reports:
        db.rollback()
        raise BulkMarksError(outcome.errors)

    db.commit()
    for report in outcome.reports:
        db.refresh(report)
    if outcome.errors:
        logger.warning(
            "Bulk marks for student %s period %s partially saved: %d saved, %d failed: %s",
            student.id, academic_data.id, len(outcome.reports), len(outcome.errors), "; ".join(outcome.errors),
        )
    else:
        logger.info("Saved %d marks for student %s period %s", len(outcome.reports), student.id, academic_data.id)
    return outcome


def update_mark(
    db: Session,
    report_id: int,
    score: Optional[int] = None,
    comment: Optional[str] = None,
    class_level: Optional[ClassLevel] = None,
) -> Report:
    report = _get_report(db, report_id)
    if score is not None:
        _check_score(score, report.module.name)
        report.score = score
        report.grade_color = classify_score(score)
    if comment is not None:
        report.teacher_comment = comment
    if class_level is not None:
        report.class_level = class_level
    db.commit()
    db.refresh(report)
    logger.info("Updated report %s", report.id)
    return report


def delete_mark(db: Session, report_id: int) -> None:
    report = _get_report(db, report_id)
    report_crud.delete(db, db_obj=report)
    logger.info("Deleted report %s", report_id)


def get_published_reports_by_student(db: Session, student_id: int) -> List[Report]:
    return report_crud.get_published_by_student(db, student_id=student_id)


def get_published_reports_by_student_and_academic_data(
    db: Session, student_id: int, academic_data_id: int
) -> List[Report]:
    return report_crud.get_published_by_student_and_academic_data(
        db, student_id=student_id, academic_data_id=academic_data_id
    )


def get_reports_by_student(db: Session, student_id: int) -> List[Report]:
    """All reports of a student, published or not."""
    _get_student(db, student_id)
    return report_crud.get_by_student(db, student_id=student_id)


def group_reports(reports: Iterable[Report]) -> List[dict]:
    """Group report rows by (student, academic period) with one entry per module."""
    groups: dict = {}
    for report in reports:
        key = (report.student_id, report.academic_data_id)
        group = groups.get(key)
        if group is None:
            academic_data = report.academic_data
            group = {
                "student_id": report.student_id,
                "student_name": report.student.full_name,
                "academic_data_id": report.academic_data_id,
                "trimester": academic_data.trimester,
                "academic_year": academic_data.academic_year,
                "period": academic_data.period,
                "class_level": report.class_level,
                "marks": [],
                "teacher_comment": None,
                "teacher_name": None,
            }
            groups[key] = group
        group["marks"].append(
            {
                "module_id": report.module_id,
                "module_name": report.module.name,
                "score": report.score,
                "grade_color": report.grade_color,
            }
        )
        if not group["teacher_comment"] and report.teacher_comment:
            group["teacher_comment"] = report.teacher_comment
        if group["teacher_name"] is None and report.teacher is not None:
            group["teacher_name"] = report.teacher.full_name
        if group["class_level"] is None and report.class_level is not None:
            group["class_level"] = report.class_level
    return list(groups.values())
