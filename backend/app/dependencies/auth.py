"""Authentication dependencies for retrieving the current user."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import PermissionDeniedError
from backend.app.core.security import decode_access_token
from backend.app.crud.crud_user import user_crud
from backend.app.db.session import get_db
from backend.app.models.enums import Role
from backend.app.models.user import User
from backend.app.services.access_policy import Action, can_view_student, is_allowed


def get_current_user(db: Session = Depends(get_db), authorization: str | None = Header(default=None)) -> User:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = payload.get("sub")
    try:
        user_id_int = int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = user_crud.get(db, user_id=user_id_int)
    if not user or not user.is_active or not user.enabled:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require(action: Action):
    """Dependency factory allowing only users whose roles permit ``action``."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.roles, action):
            raise PermissionDeniedError(f"Not allowed to {action.value.lower().replace('_', ' ')}")
        return current_user

    return checker


def get_current_parent_user(current_user: User = Depends(get_current_user)) -> User:
    if Role.PARENTS not in current_user.roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a parent user")
    return current_user


def ensure_can_view_student(user: User, student_id: int) -> None:
    if not can_view_student(user, student_id):
        raise PermissionDeniedError("Not allowed to view this student")
