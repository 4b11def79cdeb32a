from datetime import date

import pytest

from backend.app.core.exceptions import NotFoundError, RenderingError
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import ClassLevel, Period, Trimester
from backend.app.models.module import Module
from backend.app.models.student import Student
from backend.app.schemas.bulletin import BulletinRequest, ModuleGrade
from backend.app.services import bulletin_renderer, bulletin_service, mark_service
from backend.app.services.bulletin_service import build_subject_rows


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
    reading = Module(name="Pre-lecture", category="Langage", index_order=2)
    writing = Module(name="Pre-ecriture", category="Langage", index_order=3)
    math = Module(name="Calcul", index_order=1)
    retired = Module(name="Old", active=False, index_order=0)
    student = Student(
        student_code="STD20240001",
        first_name="Ada",
        last_name="Uwase",
        date_of_birth=date(2019, 5, 1),
        gender="F",
        class_level=ClassLevel.NURSERY_2,
        academic_year="2024-2025",
    )
    student.modules = [reading, writing, math, retired]
    p1 = AcademicData(trimester=Trimester.FIRST, academic_year=2024, period=Period.PERIOD_1, published=True)
    p2 = AcademicData(trimester=Trimester.FIRST, academic_year=2024, period=Period.PERIOD_2, published=True)
    second = AcademicData(trimester=Trimester.SECOND, academic_year=2024, period=Period.PERIOD_1, published=True)
    draft = AcademicData(trimester=Trimester.THIRD, academic_year=2024, period=Period.PERIOD_1, published=False)
    db.add_all([student, p1, p2, second, draft])
    db.commit()
    return {
        "student": student, "reading": reading, "writing": writing, "math": math,
        "p1": p1, "p2": p2, "second": second, "draft": draft,
    }


def mark(db, school, module, period, score, comment=None):
    return mark_service.add_or_update_mark(
        db, school["student"].id, school[module].id, school[period].id, score,
        class_level=ClassLevel.NURSERY_2, comment=comment,
    )


def test_subject_rows_span_consecutive_categories():
    rows = build_subject_rows([("Langage", "Lecture", 90), ("Langage", "Ecriture", None), (None, "Calcul", 40)])
    assert [(r.domain, r.subject, r.domain_span) for r in rows] == [
        ("Langage", "Lecture", 2),
        ("Langage", "Ecriture", 0),
        ("Calcul", "", 1),
    ]
    assert rows[0].cell.color == "green"
    assert rows[1].cell.text == "" and rows[1].cell.color is None
    assert rows[2].cell.color == "red"


def test_bulletin_from_reports_without_published_marks_is_not_found(db, school):
    mark(db, school, "math", "draft", 80)
    with pytest.raises(NotFoundError):
        bulletin_service.build_bulletin_from_reports(db, school["student"].id, Trimester.THIRD, 2024)


def test_bulletin_from_reports_layout(db, school):
    mark(db, school, "reading", "p1", 55, comment="Keep reading")
    mark(db, school, "math", "p1", 90)
    mark(db, school, "reading", "p2", 82)

    document = bulletin_service.build_bulletin_from_reports(db, school["student"].id, Trimester.FIRST, 2024)
    assert document.title == "BULLETIN DU    TRIMESTRE I"
    assert document.student_name == "Ada Uwase"
    assert document.classe == "Nursery-2"
    assert document.academic_year == "2024"
    # one row per module, ordered by index_order, latest period wins
    assert [(r.domain, r.subject, r.cell.text) for r in document.subject_rows] == [
        ("Calcul", "", "90"),
        ("Langage", "Pre-lecture", "82"),
    ]
    assert document.comment == "Keep reading"
    assert not document.is_grid


def test_bulletin_from_academic_data(db, school):
    mark(db, school, "math", "second", 72)
    document = bulletin_service.build_bulletin_from_academic_data(db, school["student"].id, school["second"].id)
    assert document.trimester_label == "TRIMESTRE II"
    assert document.subject_rows[0].cell.color == "blue"
    with pytest.raises(NotFoundError):
        bulletin_service.build_bulletin_from_academic_data(db, school["student"].id, school["p1"].id)
    with pytest.raises(NotFoundError):
        bulletin_service.build_bulletin_from_academic_data(db, school["student"].id, 999)


def test_template_lists_active_modules_with_empty_cells(db, school):
    document = bulletin_service.build_bulletin_template(db, school["student"].id, Trimester.SECOND, 2025, "Nursery-2")
    assert [r.subject or r.domain for r in document.subject_rows] == ["Calcul", "Pre-lecture", "Pre-ecriture"]
    assert all(r.cell.text == "" and r.cell.color is None for r in document.subject_rows)
    assert document.comment == ""
    assert document.classe == "Nursery-2"


def test_template_requires_student_and_active_modules(db, school):
    with pytest.raises(NotFoundError):
        bulletin_service.build_bulletin_template(db, 999, Trimester.FIRST, 2024)
    for module in db.query(Module).all():
        module.active = False
    db.commit()
    with pytest.raises(NotFoundError):
        bulletin_service.build_bulletin_template(db, school["student"].id, Trimester.FIRST, 2024)


def test_grid_bulletin_colors_published_trimesters(db, school):
    mark(db, school, "math", "p1", 45)
    mark(db, school, "math", "p2", 85)
    mark(db, school, "math", "second", 65)
    mark(db, school, "math", "draft", 99)

    document = bulletin_service.build_grid_bulletin(db, school["student"].id, 2024, None)
    assert document.is_grid
    assert document.grid_headers == ["TRIMESTRE I", "TRIMESTRE II", "TRIMESTRE III"]
    assert document.classe == "N/A"
    math_row = document.grid[0]
    assert math_row.module_name == "Calcul"
    assert [c.color for c in math_row.cells] == ["green", "yellow", None]
    assert [c.text for c in document.grid[1].cells] == ["", "", ""]
    assert not document.show_comment


def test_render_produces_pdf_bytes(db, school):
    mark(db, school, "reading", "p1", 75)
    mark(db, school, "writing", "p1", 30)
    document = bulletin_service.build_bulletin_from_reports(db, school["student"].id, Trimester.FIRST, 2024)
    pdf = bulletin_renderer.render_bulletin_pdf(document)
    assert pdf.startswith(b"%PDF")

    grid = bulletin_service.build_grid_bulletin(db, school["student"].id, 2024, "Nursery-2")
    assert bulletin_renderer.render_bulletin_pdf(grid).startswith(b"%PDF")


def test_render_from_request_escapes_markup():
    request = BulletinRequest(
        student_name="Tom & <Jerry>",
        classe="Pre-Primary",
        academic_year="2024",
        trimester=Trimester.THIRD,
        grades=[ModuleGrade(module_name="Dessin", category="Art et Culture", score=88)],
    )
    document = bulletin_service.build_bulletin_from_request(request)
    assert document.title == "BULLETIN DU    TRIMESTRE III"
    assert bulletin_renderer.render_bulletin_pdf(document).startswith(b"%PDF")


def test_renderer_wraps_failures(monkeypatch):
    document = bulletin_service.build_bulletin_from_request(
        BulletinRequest(student_name="A", classe="X", academic_year="2024", grades=[ModuleGrade(module_name="M")])
    )

    def broken_story(_document):
        raise RuntimeError("boom")

    monkeypatch.setattr(bulletin_renderer, "_story", broken_story)
    with pytest.raises(RenderingError) as exc:
        bulletin_renderer.render_bulletin_pdf(document)
    assert isinstance(exc.value.cause, RuntimeError)
