"""Lifecycle of academic periods (draft and published)."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.app_logger import get_logger
from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.crud.crud_academic_data import academic_data_crud
from backend.app.models.academic_data import AcademicData
from backend.app.models.enums import Period, Trimester
from backend.app.schemas.academic_data import AcademicDataCreate, AcademicDataUpdate

logger = get_logger("academic_data")


def _conflict(trimester: Trimester, academic_year: int, period: Period) -> ConflictError:
    return ConflictError(
        f"Academic data already exists for trimester {trimester.value}, year {academic_year}, period {period.value}"
    )


def get_academic_data(db: Session, academic_data_id: int) -> AcademicData:
    academic_data = academic_data_crud.get(db, academic_data_id=academic_data_id)
    if not academic_data:
        raise NotFoundError.for_entity("Academic data", academic_data_id)
    return academic_data


def find_by_triple(db: Session, trimester: Trimester, academic_year: int, period: Period) -> Optional[AcademicData]:
    return academic_data_crud.get_by_triple(db, trimester=trimester, academic_year=academic_year, period=period)


def list_published(db: Session) -> List[AcademicData]:
    return academic_data_crud.get_published(db)


def list_all(db: Session) -> List[AcademicData]:
    return academic_data_crud.get_multi(db)


def get_or_create_academic_data(db: Session, trimester: Trimester, academic_year: int, period: Period) -> AcademicData:
    existing = find_by_triple(db, trimester, academic_year, period)
    if existing:
        return existing
    academic_data = academic_data_crud.save(
        db,
        db_obj=AcademicData(trimester=trimester, academic_year=academic_year, period=period, published=False),
    )
    logger.info("Created academic data %s (%s %s %s)", academic_data.id, trimester.value, academic_year, period.value)
    return academic_data


def create_academic_data(db: Session, data: AcademicDataCreate) -> AcademicData:
    if find_by_triple(db, data.trimester, data.academic_year, data.period):
        raise _conflict(data.trimester, data.academic_year, data.period)
    academic_data = academic_data_crud.save(db, db_obj=AcademicData(**data.model_dump()))
    logger.info("Created academic data %s", academic_data.id)
    return academic_data


def update_academic_data(db: Session, academic_data_id: int, data: AcademicDataUpdate) -> AcademicData:
    academic_data = get_academic_data(db, academic_data_id)
    trimester = data.trimester or academic_data.trimester
    academic_year = data.academic_year if data.academic_year is not None else academic_data.academic_year
    period = data.period or academic_data.period

    other = find_by_triple(db, trimester, academic_year, period)
    if other is not None and other.id != academic_data.id:
        raise _conflict(trimester, academic_year, period)

    academic_data.trimester = trimester
    academic_data.academic_year = academic_year
    academic_data.period = period
    if data.published is not None:
        academic_data.published = data.published
    academic_data = academic_data_crud.save(db, db_obj=academic_data)
    logger.info("Updated academic data %s", academic_data.id)
    return academic_data


def delete_academic_data(db: Session, academic_data_id: int) -> None:
    academic_data = get_academic_data(db, academic_data_id)
    academic_data_crud.delete(db, db_obj=academic_data)
    logger.info("Deleted academic data %s and its reports", academic_data_id)


def _set_published(db: Session, academic_data_id: int, published: bool) -> AcademicData:
    academic_data = get_academic_data(db, academic_data_id)
    academic_data.published = published
    academic_data = academic_data_crud.save(db, db_obj=academic_data)
    logger.info("%s academic data %s", "Published" if published else "Unpublished", academic_data.id)
    return academic_data


def publish_academic_data(db: Session, academic_data_id: int) -> AcademicData:
    return _set_published(db, academic_data_id, True)


def unpublish_academic_data(db: Session, academic_data_id: int) -> AcademicData:
    return _set_published(db, academic_data_id, False)
