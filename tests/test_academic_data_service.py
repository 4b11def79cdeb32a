from datetime import date

import pytest

from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import ClassLevel, Period, Trimester
from backend.app.models.module import Module
from backend.app.models.report import Report
from backend.app.models.student import Student
from backend.app.schemas.academic_data import AcademicDataCreate, AcademicDataUpdate
from backend.app.services import academic_data_service as service


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


def test_get_or_create_is_idempotent(db):
    first = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_1)
    second = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_1)
    assert first.id == second.id
    assert first.published is False
    assert db.query(AcademicData).count() == 1


def test_create_twice_conflicts(db):
    data = AcademicDataCreate(trimester=Trimester.SECOND, academic_year=2024, period=Period.PERIOD_2)
    service.create_academic_data(db, data)
    with pytest.raises(ConflictError):
        service.create_academic_data(db, data)


def test_update_to_existing_triple_conflicts(db):
    first = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_1)
    second = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_2)
    with pytest.raises(ConflictError):
        service.update_academic_data(db, second.id, AcademicDataUpdate(period=Period.PERIOD_1))

    updated = service.update_academic_data(db, first.id, AcademicDataUpdate(academic_year=2025))
    assert updated.academic_year == 2025
    assert updated.published is False


def test_update_only_touches_published_when_given(db):
    record = service.create_academic_data(
        db, AcademicDataCreate(trimester=Trimester.THIRD, academic_year=2024, period=Period.FINAL_SEMESTER, published=True)
    )
    updated = service.update_academic_data(db, record.id, AcademicDataUpdate(period=Period.PERIOD_3))
    assert updated.published is True
    updated = service.update_academic_data(db, record.id, AcademicDataUpdate(published=False))
    assert updated.published is False


def test_publish_and_unpublish_round_trip(db):
    record = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_1)
    service.publish_academic_data(db, record.id)
    service.publish_academic_data(db, record.id)
    assert [ad.id for ad in service.list_published(db)] == [record.id]

    service.unpublish_academic_data(db, record.id)
    assert service.list_published(db) == []
    assert service.get_academic_data(db, record.id).published is False


def test_list_published_ordering(db):
    older = service.get_or_create_academic_data(db, Trimester.THIRD, 2023, Period.PERIOD_1)
    late = service.get_or_create_academic_data(db, Trimester.SECOND, 2024, Period.FINAL_SEMESTER)
    early = service.get_or_create_academic_data(db, Trimester.SECOND, 2024, Period.PERIOD_1)
    first = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_3)
    for record in (older, late, early, first):
        service.publish_academic_data(db, record.id)
    assert [ad.id for ad in service.list_published(db)] == [first.id, early.id, late.id, older.id]


def test_missing_academic_data_raises_not_found(db):
    with pytest.raises(NotFoundError):
        service.publish_academic_data(db, 999)
    with pytest.raises(NotFoundError):
        service.delete_academic_data(db, 999)


def test_delete_cascades_reports(db):
    record = service.get_or_create_academic_data(db, Trimester.FIRST, 2024, Period.PERIOD_1)
    module = Module(name="Math")
    student = Student(
        student_code="STD20240001",
        first_name="A",
        last_name="B",
        date_of_birth=date(2019, 1, 1),
        gender="M",
        class_level=ClassLevel.NURSERY_1,
        academic_year="2024-2025",
    )
    db.add_all([module, student])
    db.commit()
    db.add(Report(student_id=student.id, module_id=module.id, academic_data_id=record.id, score=50, grade_color="yellow"))
    db.commit()

    service.delete_academic_data(db, record.id)
    assert db.query(AcademicData).count() == 0
    assert db.query(Report).count() == 0
