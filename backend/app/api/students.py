"""Student endpoints."""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import PermissionDeniedError
from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_can_view_student, get_current_user, require
from backend.app.models.enums import ClassLevel
from backend.app.models.user import User
from backend.app.schemas.student import StudentCreate, StudentRead, StudentUpdate
from backend.app.schemas.user import ParentInfo
from backend.app.services import student_service
from backend.app.services.access_policy import Action, is_allowed
from backend.app.services.photo_store import PhotoStore, get_photo_store

router = APIRouter(prefix="/students", tags=["students"])

manage_students = require(Action.MANAGE_STUDENTS)
view_all = require(Action.VIEW_ALL_REPORTS)


@router.post("/", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(student_in: StudentCreate, db: Session = Depends(get_db), _=Depends(manage_students)):
    return student_service.create_student(db, student_in)


@router.get("/", response_model=List[StudentRead])
def list_students(db: Session = Depends(get_db), _=Depends(view_all)):
    return student_service.list_students(db)


@router.get("/class/{class_level}", response_model=List[StudentRead])
def list_students_by_class(class_level: str, db: Session = Depends(get_db), _=Depends(view_all)):
    try:
        level = ClassLevel.parse(class_level)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return student_service.get_students_by_class_level(db, level)


@router.get("/parent/{parent_id}", response_model=List[StudentRead])
def list_students_by_parent(parent_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.id != parent_id and not is_allowed(current_user.roles, Action.VIEW_ALL_REPORTS):
        raise PermissionDeniedError("Not allowed to view these students")
    return student_service.get_students_by_parent(db, parent_id)


@router.get("/{student_id}", response_model=StudentRead)
def get_student(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_can_view_student(current_user, student_id)
    return student_service.get_student(db, student_id)


@router.put("/{student_id}", response_model=StudentRead)
def update_student(student_id: int, student_in: StudentUpdate, db: Session = Depends(get_db), _=Depends(manage_students)):
    return student_service.update_student(db, student_id, student_in)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, db: Session = Depends(get_db), _=Depends(manage_students)):
    student_service.delete_student(db, student_id)


@router.get("/{student_id}/parents", response_model=List[ParentInfo])
def get_student_parents(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_can_view_student(current_user, student_id)
    return student_service.get_student_parents(db, student_id)


@router.post("/{student_id}/parents/{parent_id}", response_model=StudentRead)
def assign_parent(student_id: int, parent_id: int, db: Session = Depends(get_db), _=Depends(manage_students)):
    return student_service.assign_parent(db, student_id, parent_id)


@router.post("/{student_id}/modules/{module_id}", response_model=StudentRead)
def enroll_module(student_id: int, module_id: int, db: Session = Depends(get_db), _=Depends(manage_students)):
    return student_service.enroll_module(db, student_id, module_id)


@router.post("/{student_id}/profile-photo", response_model=StudentRead)
async def upload_profile_photo(
    student_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    store: PhotoStore = Depends(get_photo_store),
    _=Depends(manage_students),
):
    max_bytes = get_settings().max_photo_bytes
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds {max_bytes // (1024 * 1024)}MB limit",
        )
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image")
    return student_service.upload_profile_photo(db, student_id, data, store)


@router.delete("/{student_id}/profile-photo", response_model=StudentRead)
def delete_profile_photo(
    student_id: int,
    db: Session = Depends(get_db),
    store: PhotoStore = Depends(get_photo_store),
    _=Depends(manage_students),
):
    return student_service.delete_profile_photo(db, student_id, store)
