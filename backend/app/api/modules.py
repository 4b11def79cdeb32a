"""Module (subject) management endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.crud.crud_module import module_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, require
from backend.app.schemas.module import ModuleCreate, ModuleRead, ModuleUpdate
from backend.app.services.access_policy import Action

router = APIRouter(prefix="/modules", tags=["modules"])

manage_modules = require(Action.MANAGE_MODULES)


def _get_module_or_404(db: Session, module_id: int):
    module = module_crud.get(db, module_id=module_id)
    if not module:
        raise NotFoundError.for_entity("Module", module_id)
    return module


@router.post("/", response_model=ModuleRead, status_code=status.HTTP_201_CREATED)
def create_module(module_in: ModuleCreate, db: Session = Depends(get_db), _=Depends(manage_modules)):
    return module_crud.create(db, obj_in=module_in)


@router.post("/bulk", response_model=List[ModuleRead], status_code=status.HTTP_201_CREATED)
def create_modules(modules_in: List[ModuleCreate], db: Session = Depends(get_db), _=Depends(manage_modules)):
    return module_crud.create_many(db, objs_in=modules_in)


@router.get("/", response_model=List[ModuleRead])
def list_active_modules(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return module_crud.get_active_ordered(db)


@router.get("/all", response_model=List[ModuleRead])
def list_all_modules(db: Session = Depends(get_db), _=Depends(manage_modules)):
    return module_crud.get_multi(db)


@router.get("/by-name/{name}", response_model=List[ModuleRead])
def find_modules_by_name(name: str, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return module_crud.get_active_by_name(db, name=name)


@router.get("/{module_id}", response_model=ModuleRead)
def get_module(module_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return _get_module_or_404(db, module_id)


@router.put("/{module_id}", response_model=ModuleRead)
def update_module(module_id: int, module_in: ModuleUpdate, db: Session = Depends(get_db), _=Depends(manage_modules)):
    module = _get_module_or_404(db, module_id)
    return module_crud.update(db, db_obj=module, obj_in=module_in)


@router.delete("/{module_id}", response_model=ModuleRead)
def deactivate_module(module_id: int, db: Session = Depends(get_db), _=Depends(manage_modules)):
    module = _get_module_or_404(db, module_id)
    return module_crud.deactivate(db, db_obj=module)
