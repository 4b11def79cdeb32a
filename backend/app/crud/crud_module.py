"""CRUD operations for modules (subjects / ateliers)."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.module import Module
from backend.app.schemas.module import ModuleCreate, ModuleUpdate


class CRUDModule:
    def create(self, db: Session, *, obj_in: ModuleCreate) -> Module:
        obj = Module(**obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def create_many(self, db: Session, *, objs_in: List[ModuleCreate]) -> List[Module]:
        objs = [Module(**obj_in.model_dump()) for obj_in in objs_in]
        db.add_all(objs)
        db.commit()
        for obj in objs:
            db.refresh(obj)
        return objs

    def get(self, db: Session, *, module_id: int) -> Optional[Module]:
        return db.get(Module, module_id)

    def get_multi(self, db: Session) -> List[Module]:
        return db.query(Module).order_by(Module.index_order, Module.id).all()

    def get_active_ordered(self, db: Session) -> List[Module]:
        return (
            db.query(Module)
            .filter(Module.active.is_(True))
            .order_by(Module.index_order, Module.id)
            .all()
        )

    def get_active_by_name(self, db: Session, *, name: str) -> List[Module]:
        return db.query(Module).filter(Module.name == name, Module.active.is_(True)).all()

    def update(self, db: Session, *, db_obj: Module, obj_in: ModuleUpdate) -> Module:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def deactivate(self, db: Session, *, db_obj: Module) -> Module:
        db_obj.active = False
        db.commit()
        db.refresh(db_obj)
        return db_obj


module_crud = CRUDModule()
