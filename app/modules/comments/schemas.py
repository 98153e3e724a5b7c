from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime


class CommentCreate(BaseModel):
    content: Optional[str] = None


class CommentUpdate(BaseModel):
    comment_id: Optional[str] = Field(None, validation_alias=AliasChoices("commentId", "comment_id"))
    content: Optional[str] = None


class CommentResponse(BaseModel):
    id: str
    item_id: str
    content: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
