"""CRUD operations for users and their roles."""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from backend.app.models.enums import Role
from backend.app.models.user import User, UserRole


class CRUDUser:
    def create(self, db: Session, *, full_name: str, phone: str, hashed_password: str, roles: Iterable[Role], **fields) -> User:
        user = User(full_name=full_name, phone=phone, hashed_password=hashed_password, **fields)
        user.role_links = [UserRole(role=role) for role in set(roles)]
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def get(self, db: Session, *, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    def get_by_phone(self, db: Session, *, phone: str) -> Optional[User]:
        return db.query(User).filter(User.phone == phone).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_multi(self, db: Session) -> List[User]:
        return db.query(User).order_by(User.id).all()


user_crud = CRUDUser()
