from datetime import date

import pytest

from backend.app.core.exceptions import BulkMarksError, EnrollmentError, NotFoundError, ValidationError
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import ClassLevel, Period, Role, Trimester
from backend.app.models.module import Module
from backend.app.models.report import Report
from backend.app.models.student import Student
from backend.app.crud.crud_report import report_crud
from backend.app.models.user import User, UserRole
from backend.app.services import mark_service


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def school(db):
    teacher = User(full_name="Teacher One", phone="0788000001", hashed_password="x")
    teacher.role_links = [UserRole(role=Role.TEACHER)]
    math = Module(name="Math", category="Numeracy", index_order=1)
    reading = Module(name="Reading", category="Langage", index_order=2)
    drawing = Module(name="Drawing", index_order=3)
    student = Student(
        student_code="STD20240001",
        first_name="Ada",
        last_name="Uwase",
        date_of_birth=date(2019, 5, 1),
        gender="F",
        class_level=ClassLevel.NURSERY_2,
        academic_year="2024-2025",
    )
    student.modules = [math, reading]
    period = AcademicData(trimester=Trimester.FIRST, academic_year=2024, period=Period.PERIOD_1)
    db.add_all([teacher, drawing, student, period])
    db.commit()
    return {"teacher": teacher, "math": math, "reading": reading, "drawing": drawing, "student": student, "period": period}


def test_add_mark_creates_report_with_color(db, school):
    report = mark_service.add_or_update_mark(
        db, school["student"].id, school["math"].id, school["period"].id, 85,
        class_level=ClassLevel.NURSERY_2, comment="Great", teacher_id=school["teacher"].id,
    )
    assert report.id is not None
    assert report.grade_color == "green"
    assert report.teacher_id == school["teacher"].id
    assert report.teacher_comment == "Great"
    assert report.date_recorded is not None


def test_upsert_same_triple_keeps_one_row(db, school):
    first = mark_service.add_or_update_mark(
        db, school["student"].id, school["math"].id, school["period"].id, 85, teacher_id=school["teacher"].id
    )
    second = mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, 60)
    assert second.id == first.id
    assert db.query(Report).count() == 1
    assert second.score == 60
    assert second.grade_color == "yellow"
    # teacher is kept when not resupplied
    assert second.teacher_id == school["teacher"].id


def test_mark_for_module_not_enrolled_is_rejected(db, school):
    with pytest.raises(EnrollmentError) as exc:
        mark_service.add_or_update_mark(db, school["student"].id, school["drawing"].id, school["period"].id, 90)
    assert exc.value.message == "Student is not enrolled in module: Drawing"
    assert db.query(Report).count() == 0


@pytest.mark.parametrize("score", [-1, 101])
def test_mark_out_of_range_is_rejected(db, school, score):
    with pytest.raises(ValidationError):
        mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, score)
    assert db.query(Report).count() == 0


def test_mark_with_unknown_entities_raises_not_found(db, school):
    with pytest.raises(NotFoundError):
        mark_service.add_or_update_mark(db, 999, school["math"].id, school["period"].id, 50)
    with pytest.raises(NotFoundError):
        mark_service.add_or_update_mark(db, school["student"].id, 999, school["period"].id, 50)
    with pytest.raises(NotFoundError):
        mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, 999, 50)
    with pytest.raises(NotFoundError):
        mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, 50, teacher_id=999)


def test_bulk_marks_partial_success(db, school):
    outcome = mark_service.add_or_update_bulk_marks(
        db,
        school["student"].id,
        school["period"].id,
        ClassLevel.NURSERY_2,
        [(school["math"].id, 90), (9999, 70), (school["reading"].id, 45)],
        comment="Term comment",
        teacher_id=school["teacher"].id,
    )
    assert len(outcome.reports) == 2
    assert outcome.errors == ["Error processing module 9999: Module not found with id: 9999"]
    assert outcome.partial_success
    assert {r.grade_color for r in outcome.reports} == {"green", "red"}
    assert all(r.teacher_comment == "Term comment" for r in outcome.reports)
    assert db.query(Report).count() == 2


def test_bulk_marks_collects_enrollment_and_range_errors(db, school):
    outcome = mark_service.add_or_update_bulk_marks(
        db,
        school["student"].id,
        school["period"].id,
        None,
        [(school["drawing"].id, 70), (school["reading"].id, 120), (school["math"].id, 75)],
    )
    assert [r.module_id for r in outcome.reports] == [school["math"].id]
    assert outcome.errors == [
        "Student is not enrolled in module: Drawing",
        "Invalid score for module Reading: 120 (must be 0-100)",
    ]


def test_bulk_marks_all_failed_persists_nothing(db, school):
    with pytest.raises(BulkMarksError) as exc:
        mark_service.add_or_update_bulk_marks(
            db, school["student"].id, school["period"].id, None, [(9998, 50), (school["drawing"].id, 60)]
        )
    assert exc.value.message.startswith("Failed to add any marks. Errors: ")
    assert len(exc.value.errors) == 2
    assert db.query(Report).count() == 0


def test_bulk_marks_missing_period_aborts(db, school):
    with pytest.raises(NotFoundError):
        mark_service.add_or_update_bulk_marks(db, school["student"].id, 999, None, [(school["math"].id, 50)])


def test_bulk_marks_overwrites_class_level(db, school):
    mark_service.add_or_update_mark(
        db, school["student"].id, school["math"].id, school["period"].id, 50, class_level=ClassLevel.NURSERY_1
    )
    outcome = mark_service.add_or_update_bulk_marks(
        db, school["student"].id, school["period"].id, ClassLevel.NURSERY_3, [(school["math"].id, 72)]
    )
    assert outcome.reports[0].class_level is ClassLevel.NURSERY_3
    assert outcome.reports[0].grade_color == "blue"
    assert db.query(Report).count() == 1


def test_update_mark_recomputes_color(db, school):
    report = mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, 40)
    updated = mark_service.update_mark(db, report.id, score=81, comment="Improved")
    assert updated.grade_color == "green"
    assert updated.teacher_comment == "Improved"
    with pytest.raises(ValidationError):
        mark_service.update_mark(db, report.id, score=150)
    with pytest.raises(NotFoundError):
        mark_service.update_mark(db, 999, score=10)


def test_delete_mark(db, school):
    report = mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, 40)
    mark_service.delete_mark(db, report.id)
    assert db.query(Report).count() == 0
    with pytest.raises(NotFoundError):
        mark_service.delete_mark(db, report.id)


def test_published_reads_hide_unpublished_periods(db, school):
    draft = AcademicData(trimester=Trimester.FIRST, academic_year=2024, period=Period.PERIOD_2)
    db.add(draft)
    school["period"].published = True
    db.commit()
    mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, school["period"].id, 90)
    mark_service.add_or_update_mark(db, school["student"].id, school["math"].id, draft.id, 30)

    published = mark_service.get_published_reports_by_student(db, school["student"].id)
    assert [r.academic_data_id for r in published] == [school["period"].id]
    assert mark_service.get_published_reports_by_student_and_academic_data(db, school["student"].id, draft.id) == []
    assert len(mark_service.get_reports_by_student(db, school["student"].id)) == 2


def test_group_reports_merges_modules_per_period(db, school):
    mark_service.add_or_update_bulk_marks(
        db, school["student"].id, school["period"].id, ClassLevel.NURSERY_2,
        [(school["math"].id, 90), (school["reading"].id, 65)],
        comment="Good term", teacher_id=school["teacher"].id,
    )
    groups = mark_service.group_reports(mark_service.get_reports_by_student(db, school["student"].id))
    assert len(groups) == 1
    group = groups[0]
    assert group["student_name"] == "Ada Uwase"
    assert [m["module_name"] for m in group["marks"]] == ["Math", "Reading"]
    assert group["teacher_comment"] == "Good term"
    assert group["teacher_name"] == "Teacher One"


def test_author_recorded_only_on_insert(db, school):
    head = User(full_name="Head", phone="0788000009", hashed_password="x")
    head.role_links = [UserRole(role=Role.HEAD)]
    db.add(head)
    db.commit()
    ids = (school["student"].id, school["math"].id, school["period"].id)

    created = mark_service.add_or_update_mark(db, *ids, 60, author_id=school["teacher"].id)
    assert created.teacher_id == school["teacher"].id

    updated = mark_service.add_or_update_mark(db, *ids, 90, author_id=head.id)
    assert updated.teacher_id == school["teacher"].id

    reassigned = mark_service.add_or_update_mark(db, *ids, 95, teacher_id=head.id, author_id=head.id)
    assert reassigned.teacher_id == head.id


def test_concurrent_insert_falls_back_to_update(db, school, monkeypatch):
    ids = (school["student"].id, school["math"].id, school["period"].id)
    mark_service.add_or_update_mark(db, *ids, 40, teacher_id=school["teacher"].id)

    original = report_crud.get_by_triple
    calls = []

    def stale_lookup(*args, **kwargs):
        calls.append(kwargs)
        if len(calls) == 1:
            return None
        return original(*args, **kwargs)

    monkeypatch.setattr(report_crud, "get_by_triple", stale_lookup)
    report = mark_service.add_or_update_mark(db, *ids, 88)

    assert len(calls) == 2
    assert db.query(Report).count() == 1
    assert report.score == 88
    assert report.grade_color == "green"
    assert report.teacher_id == school["teacher"].id
