"""Student model and module enrollment table."""

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now
from backend.app.models.enums import ClassLevel, StudentStatus

student_modules = Table(
    "student_modules",
    Base.metadata,
    Column("student_id", ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("module_id", ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True),
)


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    student_code = Column(String(20), nullable=False, unique=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=False)
    class_level = Column(Enum(ClassLevel, native_enum=False, length=20), nullable=False, index=True)
    academic_year = Column(String(20), nullable=False)
    status = Column(Enum(StudentStatus, native_enum=False, length=20), nullable=False, default=StudentStatus.ACTIVE)
    profile_photo = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    modules = relationship("Module", secondary=student_modules, lazy="selectin")
    parent_links = relationship("ParentStudentLink", back_populates="student", cascade="all, delete-orphan", foreign_keys="ParentStudentLink.student_id")
    reports = relationship("Report", back_populates="student", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def parents(self):
        return [link.parent_user for link in self.parent_links]

    def is_enrolled_in(self, module_id: int) -> bool:
        return any(module.id == module_id for module in self.modules)
