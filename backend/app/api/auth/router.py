from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.crud.crud_user import user_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import require
from backend.app.schemas.user import UserRead
from backend.app.services.access_policy import Action

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/ping")
async def auth_ping():
    return {"status": "ok"}


@router.get("/users", response_model=List[UserRead])
def list_users(db: Session = Depends(get_db), _=Depends(require(Action.MANAGE_USERS))):
    return user_crud.get_multi(db)
