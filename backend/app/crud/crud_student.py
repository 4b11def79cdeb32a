"""CRUD operations for students."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.enums import ClassLevel
from backend.app.models.parent_link import ParentStudentLink
from backend.app.models.student import Student


class CRUDStudent:
    def get(self, db: Session, *, student_id: int) -> Optional[Student]:
        return db.get(Student, student_id)

    def get_by_code(self, db: Session, *, student_code: str) -> Optional[Student]:
        return db.query(Student).filter(Student.student_code == student_code).first()

    def exists_by_code(self, db: Session, *, student_code: str) -> bool:
        return self.get_by_code(db, student_code=student_code) is not None

    def count(self, db: Session) -> int:
        return db.query(Student).count()

    def get_multi(self, db: Session) -> List[Student]:
        return db.query(Student).order_by(Student.last_name, Student.first_name, Student.id).all()

    def get_by_class_level(self, db: Session, *, class_level: ClassLevel) -> List[Student]:
        return (
            db.query(Student)
            .filter(Student.class_level == class_level)
            .order_by(Student.last_name, Student.first_name)
            .all()
        )

    def get_by_parent(self, db: Session, *, parent_id: int) -> List[Student]:
        return (
            db.query(Student)
            .join(ParentStudentLink, ParentStudentLink.student_id == Student.id)
            .filter(ParentStudentLink.parent_user_id == parent_id)
            .order_by(Student.last_name, Student.first_name)
            .all()
        )

    def save(self, db: Session, *, db_obj: Student) -> Student:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


student_crud = CRUDStudent()
