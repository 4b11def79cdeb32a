"""Assemble report-card (bulletin) layouts from stored marks.

The functions here only decide *what* goes on the page. A BulletinDocument is
then painted by ``bulletin_renderer.render_bulletin_pdf``.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.core.settings import get_settings
from backend.app.crud.crud_academic_data import academic_data_crud
from backend.app.crud.crud_module import module_crud
from backend.app.crud.crud_report import report_crud
from backend.app.crud.crud_student import student_crud
from backend.app.models.enums import Trimester
from backend.app.models.report import Report
from backend.app.models.student import Student
from backend.app.schemas.bulletin import BulletinRequest
from backend.app.services.grading import GRADE_BANDS, GradeBand, classify_score

PARENT_SIGNATURE = "Signature des parents: ................................."
TEACHER_SIGNATURE = "Signature de Titulaire: ................................."
HEAD_SIGNATURE = "NOM DE LA DIRECTRICE: .................................\nSIGNATURE ET CACHET DE L'ECOLE"


@dataclass
class ScoreCell:
    text: str = ""
    color: Optional[str] = None

    @classmethod
    def for_score(cls, score: Optional[int]) -> "ScoreCell":
        if score is None:
            return cls()
        return cls(text=str(score), color=classify_score(score))


@dataclass
class SubjectRow:
    domain: str
    subject: str
    cell: ScoreCell
    # rows covered by this domain cell; 0 when an earlier row's cell spans it
    domain_span: int = 1


@dataclass
class GridRow:
    module_name: str
    cells: List[ScoreCell]


@dataclass
class BulletinDocument:
    student_name: str
    classe: str
    academic_year: str
    institution_name: str
    institution_contact: str
    location_left: Tuple[str, ...]
    location_right: Tuple[str, ...]
    title: Optional[str] = None
    trimester_label: Optional[str] = None
    subject_rows: List[SubjectRow] = field(default_factory=list)
    grid_headers: List[str] = field(default_factory=list)
    grid: List[GridRow] = field(default_factory=list)
    legend: Sequence[GradeBand] = GRADE_BANDS
    show_comment: bool = True
    comment: Optional[str] = None
    signatures: Tuple[str, str, str] = (PARENT_SIGNATURE, TEACHER_SIGNATURE, HEAD_SIGNATURE)

    @property
    def is_grid(self) -> bool:
        return bool(self.grid_headers)


def trimester_label(trimester: Trimester) -> str:
    return f"TRIMESTRE {trimester.roman}"


def _document(student_name: str, classe: Optional[str], academic_year, **kwargs) -> BulletinDocument:
    settings = get_settings()
    return BulletinDocument(
        student_name=student_name,
        classe=classe or "N/A",
        academic_year=str(academic_year),
        institution_name=settings.institution_name,
        institution_contact=settings.institution_contact,
        location_left=tuple(settings.location_left),
        location_right=tuple(settings.location_right),
        **kwargs,
    )


def _titled(trimester: Trimester) -> dict:
    label = trimester_label(trimester)
    return {"title": f"BULLETIN DU    {label}", "trimester_label": label}


def build_subject_rows(entries: Iterable[Tuple[Optional[str], str, Optional[int]]]) -> List[SubjectRow]:
    """Turn (category, module name, score) entries into table rows.

    Consecutive modules sharing a category get one spanning domain cell. A
    module without a category is its own domain with an empty subject cell.
    """
    rows: List[SubjectRow] = []
    head: Optional[SubjectRow] = None
    for category, name, score in entries:
        cell = ScoreCell.for_score(score)
        if not category:
            rows.append(SubjectRow(domain=name, subject="", cell=cell))
            head = None
            continue
        if head is not None and head.domain == category:
            head.domain_span += 1
            rows.append(SubjectRow(domain=category, subject=name, cell=cell, domain_span=0))
            continue
        head = SubjectRow(domain=category, subject=name, cell=cell)
        rows.append(head)
    return rows


def _latest_per_module(reports: Iterable[Report]) -> List[Report]:
    """Keep one report per module, the one of the latest period, in input order."""
    chosen: dict = {}
    for report in reports:
        current = chosen.get(report.module_id)
        if current is None or report.academic_data.period.rank > current.academic_data.period.rank:
            chosen[report.module_id] = report
    return list(chosen.values())


def _first_comment(reports: Iterable[Report]) -> Optional[str]:
    return next((r.teacher_comment for r in reports if r.teacher_comment), None)


def _from_reports(all_reports: List[Report]) -> BulletinDocument:
    reports = _latest_per_module(all_reports)
    first = reports[0]
    academic_data = first.academic_data
    classe = first.class_level.display_name if first.class_level else None
    rows = build_subject_rows((r.module.category, r.module.name, r.score) for r in reports)
    return _document(
        first.student.full_name,
        classe,
        academic_data.academic_year,
        subject_rows=rows,
        comment=_first_comment(all_reports),
        **_titled(academic_data.trimester),
    )


def build_bulletin_from_reports(db: Session, student_id: int, trimester: Trimester, academic_year: int) -> BulletinDocument:
    reports = report_crud.get_published_for_bulletin(
        db, student_id=student_id, trimester=trimester, academic_year=academic_year
    )
    if not reports:
        raise NotFoundError("No reports found for the given student, trimester, and academic year")
    return _from_reports(reports)


def build_bulletin_from_academic_data(db: Session, student_id: int, academic_data_id: int) -> BulletinDocument:
    if not academic_data_crud.exists(db, academic_data_id=academic_data_id):
        raise NotFoundError.for_entity("Academic data", academic_data_id)
    reports = report_crud.get_published_by_student_and_academic_data(
        db, student_id=student_id, academic_data_id=academic_data_id
    )
    if not reports:
        raise NotFoundError("No reports found for the given student and academic data")
    return _from_reports(reports)


def _student_and_modules(db: Session, student_id: int):
    student: Optional[Student] = student_crud.get(db, student_id=student_id)
    if not student:
        raise NotFoundError.for_entity("Student", student_id)
    modules = module_crud.get_active_ordered(db)
    if not modules:
        raise NotFoundError("No active modules found. Please add modules first.")
    return student, modules


def build_bulletin_template(
    db: Session, student_id: int, trimester: Trimester, academic_year: int, classe: Optional[str] = None
) -> BulletinDocument:
    """Blank bulletin listing every active module, for teachers to fill in by hand."""
    student, modules = _student_and_modules(db, student_id)
    rows = build_subject_rows((m.category, m.name, None) for m in modules)
    return _document(student.full_name, classe, academic_year, subject_rows=rows, comment="", **_titled(trimester))


def build_grid_bulletin(db: Session, student_id: int, academic_year: int, classe: Optional[str] = None) -> BulletinDocument:
    """Whole-year bulletin: one row per active module, one colored cell per trimester."""
    student, modules = _student_and_modules(db, student_id)
    reports = report_crud.get_published_by_student_and_year(db, student_id=student_id, academic_year=academic_year)

    latest: dict = {}
    for report in reports:
        key = (report.module_id, report.academic_data.trimester)
        current = latest.get(key)
        if current is None or report.academic_data.period.rank > current.academic_data.period.rank:
            latest[key] = report

    grid = []
    for module in modules:
        cells = []
        for trimester in Trimester:
            report = latest.get((module.id, trimester))
            cells.append(ScoreCell.for_score(report.score if report else None))
        grid.append(GridRow(module_name=module.name, cells=cells))

    return _document(
        student.full_name,
        classe,
        academic_year,
        grid_headers=[trimester_label(t) for t in Trimester],
        grid=grid,
        show_comment=False,
    )


def build_bulletin_from_request(request: BulletinRequest) -> BulletinDocument:
    rows = build_subject_rows((g.category, g.module_name, g.score) for g in request.grades)
    return _document(
        request.student_name,
        request.classe,
        request.academic_year,
        subject_rows=rows,
        comment=request.comment,
        **_titled(request.trimester),
    )
