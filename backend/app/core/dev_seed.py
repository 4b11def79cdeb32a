import os

from sqlalchemy.orm import Session

from backend.app.core.app_logger import get_logger
from backend.app.core.security import get_password_hash
from backend.app.crud.crud_user import user_crud
from backend.app.models.enums import Role

DEFAULT_DEV_PASSWORD = "Secret123!"
DEFAULT_DEV_HEAD = {"full_name": "School Head", "phone": "0780000000"}

logger = get_logger("seed")


def ensure_default_head(db: Session) -> None:
    """
    Create a default HEAD account for local development if it does not exist.
    Skips execution when running under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return
    if user_crud.get_by_phone(db, phone=DEFAULT_DEV_HEAD["phone"]):
        return

    user_crud.create(
        db,
        full_name=DEFAULT_DEV_HEAD["full_name"],
        phone=DEFAULT_DEV_HEAD["phone"],
        hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD),
        roles=[Role.HEAD],
    )
    logger.info("Seeded default head account %s", DEFAULT_DEV_HEAD["phone"])
