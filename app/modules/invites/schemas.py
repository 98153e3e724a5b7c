from pydantic import BaseModel, EmailStr
from typing import Optional, Literal
from datetime import datetime


class InviteCreate(BaseModel):
    email: EmailStr


class InviteResponse(BaseModel):
    id: str
    group_id: str
    email: str
    accepted: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InviteCreateResponse(InviteResponse):
    invite_link: str
    email_sent: bool


InviteStatus = Literal["valid", "invalid", "accepted", "unauthenticated", "mismatch"]


class InviteStatusResponse(BaseModel):
    status: InviteStatus
    message: str
    invite_id: Optional[str] = None
    group_id: Optional[str] = None
    group_name: Optional[str] = None
