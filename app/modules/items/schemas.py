from pydantic import BaseModel, StrictBool
from typing import Optional
from datetime import datetime


class ItemCreate(BaseModel):
    content: str


class ItemUpdate(BaseModel):
    bought: Optional[StrictBool] = None
    content: Optional[str] = None


class ItemResponse(BaseModel):
    id: str
    list_id: str
    content: str
    bought: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
