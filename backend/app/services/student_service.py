"""Student records, parent links, module enrollment and profile photos."""

from typing import List

from sqlalchemy.orm import Session

from backend.app.core.app_logger import get_logger
from backend.app.core.exceptions import NotFoundError, ValidationError
from backend.app.core.time import current_year
from backend.app.crud.crud_module import module_crud
from backend.app.crud.crud_student import student_crud
from backend.app.crud.crud_user import user_crud
from backend.app.models.enums import ClassLevel, Role
from backend.app.models.module import Module
from backend.app.models.parent_link import ParentStudentLink
from backend.app.models.student import Student
from backend.app.models.user import User
from backend.app.schemas.student import StudentCreate, StudentUpdate
from backend.app.services.photo_store import PhotoStore

logger = get_logger("students")


def generate_student_code(db: Session) -> str:
    """Next free code of the form STD{year}{NNNN}."""
    year = current_year()
    count = student_crud.count(db) + 1
    code = f"STD{year}{count:04d}"
    while student_crud.exists_by_code(db, student_code=code):
        count += 1
        code = f"STD{year}{count:04d}"
    return code


def get_student(db: Session, student_id: int) -> Student:
    student = student_crud.get(db, student_id=student_id)
    if not student:
        raise NotFoundError.for_entity("Student", student_id)
    return student


def list_students(db: Session) -> List[Student]:
    return student_crud.get_multi(db)


def get_students_by_class_level(db: Session, class_level: ClassLevel) -> List[Student]:
    return student_crud.get_by_class_level(db, class_level=class_level)


def _get_parent(db: Session, parent_id: int) -> User:
    parent = user_crud.get(db, user_id=parent_id)
    if not parent:
        raise NotFoundError.for_entity("User", parent_id)
    if Role.PARENTS not in parent.roles:
        raise ValidationError(f"User {parent_id} is not a parent")
    return parent


def _get_active_module(db: Session, module_id: int) -> Module:
    module = module_crud.get(db, module_id=module_id)
    if not module:
        raise NotFoundError.for_entity("Module", module_id)
    if not module.active:
        raise ValidationError(f"Module {module.name} is not active")
    return module


def create_student(db: Session, data: StudentCreate) -> Student:
    parents = [_get_parent(db, parent_id) for parent_id in dict.fromkeys(data.parent_ids)]
    modules = [_get_active_module(db, module_id) for module_id in dict.fromkeys(data.module_ids)]

    student = Student(
        student_code=generate_student_code(db),
        first_name=data.first_name,
        last_name=data.last_name,
        date_of_birth=data.date_of_birth,
        gender=data.gender,
        class_level=data.class_level,
        academic_year=data.academic_year,
        status=data.status,
    )
    student.modules = modules
    student.parent_links = [ParentStudentLink(parent_user_id=parent.id) for parent in parents]
    student = student_crud.save(db, db_obj=student)
    logger.info("Created student %s (%s)", student.id, student.student_code)
    return student


def update_student(db: Session, student_id: int, data: StudentUpdate) -> Student:
    student = get_student(db, student_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(student, field, value)
    student = student_crud.save(db, db_obj=student)
    logger.info("Updated student %s", student.id)
    return student


def delete_student(db: Session, student_id: int) -> None:
    student = get_student(db, student_id)
    db.delete(student)
    db.commit()
    logger.info("Deleted student %s", student_id)


def assign_parent(db: Session, student_id: int, parent_id: int) -> Student:
    student = get_student(db, student_id)
    parent = _get_parent(db, parent_id)
    if any(link.parent_user_id == parent.id for link in student.parent_links):
        return student
    student.parent_links.append(ParentStudentLink(parent_user_id=parent.id))
    student = student_crud.save(db, db_obj=student)
    logger.info("Linked parent %s to student %s", parent.id, student.id)
    return student


def enroll_module(db: Session, student_id: int, module_id: int) -> Student:
    student = get_student(db, student_id)
    module = _get_active_module(db, module_id)
    if student.is_enrolled_in(module.id):
        return student
    student.modules.append(module)
    student = student_crud.save(db, db_obj=student)
    logger.info("Enrolled student %s in module %s", student.id, module.id)
    return student


def get_student_parents(db: Session, student_id: int) -> List[User]:
    return get_student(db, student_id).parents


def get_students_by_parent(db: Session, parent_id: int) -> List[Student]:
    parent = _get_parent(db, parent_id)
    return student_crud.get_by_parent(db, parent_id=parent.id)


def upload_profile_photo(db: Session, student_id: int, data: bytes, store: PhotoStore) -> Student:
    student = get_student(db, student_id)
    old_photo = student.profile_photo
    new_photo = store.upload(data, student.id)
    if old_photo and old_photo != new_photo:
        try:
            store.delete(old_photo)
        except (OSError, ValueError):
            logger.warning("Could not delete old photo %s of student %s", old_photo, student.id, exc_info=True)
    student.profile_photo = new_photo
    student = student_crud.save(db, db_obj=student)
    logger.info("Stored profile photo for student %s", student.id)
    return student


def delete_profile_photo(db: Session, student_id: int, store: PhotoStore) -> Student:
    student = get_student(db, student_id)
    if not student.profile_photo:
        raise ValidationError("Student has no profile photo")
    store.delete(student.profile_photo)
    student.profile_photo = None
    student = student_crud.save(db, db_obj=student)
    logger.info("Removed profile photo of student %s", student.id)
    return student
