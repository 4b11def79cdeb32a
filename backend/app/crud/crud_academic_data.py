"""CRUD operations for academic periods."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import Period, Trimester


class CRUDAcademicData:
    def get(self, db: Session, *, academic_data_id: int) -> Optional[AcademicData]:
        return db.get(AcademicData, academic_data_id)

    def exists(self, db: Session, *, academic_data_id: int) -> bool:
        return self.get(db, academic_data_id=academic_data_id) is not None

    def get_by_triple(self, db: Session, *, trimester: Trimester, academic_year: int, period: Period) -> Optional[AcademicData]:
        return (
            db.query(AcademicData)
            .filter(
                AcademicData.trimester == trimester,
                AcademicData.academic_year == academic_year,
                AcademicData.period == period,
            )
            .first()
        )

    def get_multi(self, db: Session) -> List[AcademicData]:
        return db.query(AcademicData).order_by(AcademicData.created_at.desc(), AcademicData.id.desc()).all()

    def get_published(self, db: Session) -> List[AcademicData]:
        rows = db.query(AcademicData).filter(AcademicData.published.is_(True)).all()
        # Enum columns are stored by name, so order in Python to keep trimester/period order
        return sorted(rows, key=lambda ad: (-ad.academic_year, ad.trimester.number, ad.period.rank))

    def save(self, db: Session, *, db_obj: AcademicData) -> AcademicData:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: AcademicData) -> None:
        db.delete(db_obj)
        db.commit()


academic_data_crud = CRUDAcademicData()
