"""Parent portal endpoints for linked students."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_parent_user
from backend.app.schemas.student import StudentRead
from backend.app.services import student_service

router = APIRouter(prefix="/parent", tags=["parent-portal"])


@router.get("/me/students", response_model=List[StudentRead])
def list_my_students(db: Session = Depends(get_db), current_parent=Depends(get_current_parent_user)):
    return student_service.get_students_by_parent(db, current_parent.id)
