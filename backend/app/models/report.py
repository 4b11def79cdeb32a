"""Report: one student's score in one module for one academic period."""

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now, utc_today
from backend.app.models.enums import ClassLevel


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    academic_data_id = Column(Integer, ForeignKey("academic_data.id", ondelete="CASCADE"), nullable=False, index=True)
    class_level = Column(Enum(ClassLevel, native_enum=False, length=20), nullable=True)
    score = Column(Integer, nullable=False)
    grade_color = Column(String(10), nullable=False)
    teacher_comment = Column(String(500), nullable=True)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date_recorded = Column(Date, nullable=False, default=utc_today)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("student_id", "module_id", "academic_data_id", name="uq_report_student_module_period"),
    )

    student = relationship("Student", back_populates="reports")
    module = relationship("Module")
    academic_data = relationship("AcademicData", back_populates="reports")
    teacher = relationship("User", foreign_keys=[teacher_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])

    @property
    def module_name(self) -> str:
        return self.module.name

    @property
    def trimester(self):
        return self.academic_data.trimester

    @property
    def academic_year(self) -> int:
        return self.academic_data.academic_year

    @property
    def period(self):
        return self.academic_data.period
