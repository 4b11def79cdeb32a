"""Academic period endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, require
from backend.app.models.enums import Period, Trimester
from backend.app.schemas.academic_data import AcademicDataCreate, AcademicDataRead, AcademicDataUpdate
from backend.app.services import academic_data_service
from backend.app.services.access_policy import Action

router = APIRouter(prefix="/academic-data", tags=["academic-data"])

manage = require(Action.MANAGE_ACADEMIC_DATA)


@router.post("/", response_model=AcademicDataRead, status_code=status.HTTP_201_CREATED)
def create_academic_data(data: AcademicDataCreate, db: Session = Depends(get_db), _=Depends(manage)):
    return academic_data_service.create_academic_data(db, data)


@router.post("/get-or-create", response_model=AcademicDataRead)
def get_or_create_academic_data(
    trimester: Trimester,
    academic_year: int,
    period: Period,
    db: Session = Depends(get_db),
    _=Depends(manage),
):
    return academic_data_service.get_or_create_academic_data(db, trimester, academic_year, period)


@router.get("/", response_model=List[AcademicDataRead])
def list_academic_data(db: Session = Depends(get_db), _=Depends(manage)):
    return academic_data_service.list_all(db)


@router.get("/published", response_model=List[AcademicDataRead])
def list_published_academic_data(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return academic_data_service.list_published(db)


@router.get("/{academic_data_id}", response_model=AcademicDataRead)
def get_academic_data(academic_data_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return academic_data_service.get_academic_data(db, academic_data_id)


@router.put("/{academic_data_id}", response_model=AcademicDataRead)
def update_academic_data(
    academic_data_id: int, data: AcademicDataUpdate, db: Session = Depends(get_db), _=Depends(manage)
):
    return academic_data_service.update_academic_data(db, academic_data_id, data)


@router.delete("/{academic_data_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_academic_data(academic_data_id: int, db: Session = Depends(get_db), _=Depends(manage)):
    academic_data_service.delete_academic_data(db, academic_data_id)


@router.post("/{academic_data_id}/publish", response_model=AcademicDataRead)
def publish_academic_data(academic_data_id: int, db: Session = Depends(get_db), _=Depends(manage)):
    return academic_data_service.publish_academic_data(db, academic_data_id)


@router.post("/{academic_data_id}/unpublish", response_model=AcademicDataRead)
def unpublish_academic_data(academic_data_id: int, db: Session = Depends(get_db), _=Depends(manage)):
    return academic_data_service.unpublish_academic_data(db, academic_data_id)
