from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    gender = Column(String(20), nullable=True)
    email = Column(String, unique=True, index=True, nullable=True)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    address = Column(String(255), nullable=True)
    hashed_password = Column(String, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    role_links = relationship("UserRole", back_populates="user", cascade="all, delete-orphan", lazy="selectin")
    parent_links = relationship("ParentStudentLink", back_populates="parent_user", cascade="all, delete-orphan", foreign_keys="ParentStudentLink.parent_user_id")

    @property
    def roles(self) -> set[Role]:
        return {link.role for link in self.role_links}


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

    user = relationship("User", back_populates="role_links")
