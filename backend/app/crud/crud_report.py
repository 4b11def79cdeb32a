"""Persistence queries for reports (marks)."""

from typing import List, Optional

from sqlalchemy.orm import Query, Session, joinedload

from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import Trimester
from backend.app.models.module import Module
from backend.app.models.report import Report


class CRUDReport:
    def _base(self, db: Session) -> Query:
        return (
            db.query(Report)
            .join(AcademicData, Report.academic_data_id == AcademicData.id)
            .join(Module, Report.module_id == Module.id)
            .options(joinedload(Report.module), joinedload(Report.academic_data))
        )

    def _published(self, db: Session, student_id: int) -> Query:
        return self._base(db).filter(Report.student_id == student_id, AcademicData.published.is_(True))

    def get(self, db: Session, *, report_id: int) -> Optional[Report]:
        return db.get(Report, report_id)

    def exists(self, db: Session, *, report_id: int) -> bool:
        return self.get(db, report_id=report_id) is not None

    def get_by_triple(self, db: Session, *, student_id: int, module_id: int, academic_data_id: int) -> Optional[Report]:
        return (
            db.query(Report)
            .filter(
                Report.student_id == student_id,
                Report.module_id == module_id,
                Report.academic_data_id == academic_data_id,
            )
            .first()
        )

    def get_by_student(self, db: Session, *, student_id: int) -> List[Report]:
        return (
            self._base(db)
            .filter(Report.student_id == student_id)
            .order_by(AcademicData.academic_year, Report.academic_data_id, Module.index_order, Module.id)
            .all()
        )

    def get_published_by_student(self, db: Session, *, student_id: int) -> List[Report]:
        return (
            self._published(db, student_id)
            .order_by(AcademicData.academic_year, Report.academic_data_id, Module.index_order, Module.id)
            .all()
        )

    def get_published_by_student_and_academic_data(self, db: Session, *, student_id: int, academic_data_id: int) -> List[Report]:
        return (
            self._published(db, student_id)
            .filter(Report.academic_data_id == academic_data_id)
            .order_by(Module.index_order, Module.id)
            .all()
        )

    def get_published_for_bulletin(self, db: Session, *, student_id: int, trimester: Trimester, academic_year: int) -> List[Report]:
        return (
            self._published(db, student_id)
            .filter(AcademicData.trimester == trimester, AcademicData.academic_year == academic_year)
            .order_by(Module.index_order, Module.id)
            .all()
        )

    def get_published_by_student_and_year(self, db: Session, *, student_id: int, academic_year: int) -> List[Report]:
        return (
            self._published(db, student_id)
            .filter(AcademicData.academic_year == academic_year)
            .order_by(Module.index_order, Module.id)
            .all()
        )

    def delete(self, db: Session, *, db_obj: Report) -> None:
        db.delete(db_obj)
        db.commit()


report_crud = CRUDReport()
