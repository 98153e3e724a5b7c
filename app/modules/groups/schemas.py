from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime


class GroupCreate(BaseModel):
    name: str
    # Older clients post the secret as "password_hash"; it is hashed server-side either way.
    password: Optional[str] = Field(None, validation_alias=AliasChoices("password", "password_hash"))


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None
    has_password: bool = False

    class Config:
        from_attributes = True


class GroupAuthRequest(BaseModel):
    password: str


class GroupAuthResponse(BaseModel):
    success: bool = True
    group_token: str
    expires_in: int


class GroupMemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
