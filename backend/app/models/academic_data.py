"""AcademicData: the (trimester, year, period) unit whose published flag gates report visibility."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now
from backend.app.models.enums import Period, Trimester


class AcademicData(Base):
    __tablename__ = "academic_data"

    id = Column(Integer, primary_key=True, index=True)
    trimester = Column(Enum(Trimester, native_enum=False, length=20), nullable=False)
    academic_year = Column(Integer, nullable=False, index=True)
    period = Column(Enum(Period, native_enum=False, length=20), nullable=False)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("trimester", "academic_year", "period", name="uk_trimester_year_period"),
    )

    reports = relationship("Report", back_populates="academic_data", cascade="all, delete-orphan", passive_deletes=True)
