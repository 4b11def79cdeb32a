"""Module (subject) schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ModuleCreate(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    active: bool = True
    index_order: int = 0


class ModuleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    active: Optional[bool] = None
    index_order: Optional[int] = None


class ModuleRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    active: bool
    index_order: int

    model_config = ConfigDict(from_attributes=True)
