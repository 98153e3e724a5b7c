from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}


class MembershipSummary(BaseModel):
    group_id: str
    role: str


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    is_admin: bool
    groups: List[MembershipSummary]
