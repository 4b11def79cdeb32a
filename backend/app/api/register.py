"""Handles account registration."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api import auth  # ensures router package export
from backend.app.core.app_logger import get_logger
from backend.app.core.exceptions import ConflictError
from backend.app.core.security import get_password_hash
from backend.app.crud.crud_user import user_crud
from backend.app.db.base import Base
from backend.app.db.session import engine, get_db
from backend.app.schemas.user import UserCreate, UserRead

Base.metadata.create_all(bind=engine)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger("auth")


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    if user_crud.get_by_phone(db, phone=user_in.phone):
        raise ConflictError("Phone number already registered")
    if user_in.email and user_crud.get_by_email(db, email=user_in.email):
        raise ConflictError("Email already registered")
    user = user_crud.create(
        db,
        full_name=user_in.full_name,
        phone=user_in.phone,
        hashed_password=get_password_hash(user_in.password),  # Hash password before storing
        roles=user_in.roles,
        email=user_in.email,
        gender=user_in.gender,
        address=user_in.address,
    )
    logger.info("Registered user %s with roles %s", user.id, sorted(r.value for r in user.roles))
    return user
