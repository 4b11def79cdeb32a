from sqlalchemy import Boolean, Column, Integer, String

from backend.app.db.base_class import Base


class Module(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    index_order = Column(Integer, nullable=False, default=0)
