from pydantic import AliasChoices, BaseModel, Field, StrictInt
from typing import Optional, List
from datetime import datetime


class ListCreate(BaseModel):
    name: str = Field(validation_alias=AliasChoices("name", "title"))
    theme: Optional[str] = None


class ListUpdate(BaseModel):
    title: Optional[str] = Field(None, validation_alias=AliasChoices("title", "name"))
    theme: Optional[str] = None


class ListResponse(BaseModel):
    id: str
    group_id: str
    title: str
    position: Optional[int] = None
    theme: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ListWithCounts(ListResponse):
    total_items: int = 0
    bought_items: int = 0


class ListPosition(BaseModel):
    id: str
    position: StrictInt


class ListReorderRequest(BaseModel):
    lists: List[ListPosition]
