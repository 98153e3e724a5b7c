"""
Core dependencies: per-request AuthContext and group access checks
"""

from dataclasses import dataclass, field
from fastapi import Depends, Header, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.exceptions import Forbidden, StoreError, Unauthorized
from app.core.security import decode_group_token
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import SessionUser
from app.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Set
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

OWNER = "owner"
MEMBER = "member"
GUEST = "guest"


@dataclass
class AuthContext:
    """Who is calling, built once per request."""
    user: Optional[SessionUser] = None
    is_admin: bool = False
    group_password_verified: Set[str] = field(default_factory=set)
    session_rejected: bool = False  # a bearer token was sent but did not resolve

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None


@dataclass
class GroupAccess:
    group_id: str
    role: str  # owner | member | guest
    via: str  # session | password | admin

    @property
    def is_owner(self) -> bool:
        return self.role == OWNER


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def is_super_user(user: Optional[SessionUser]) -> bool:
    """Check if user is a super user from app_metadata"""
    if user is None:
        return False
    # app_metadata is set server-side and cannot be modified by users
    return user.app_metadata.get("type") == "super_user"


def _verified_groups(raw_tokens: Optional[List[str]]) -> Set[str]:
    group_ids = set()
    for raw in raw_tokens or []:
        for token in raw.split(","):
            token = token.strip()
            if not token:
                continue
            group_id = decode_group_token(token)
            if group_id:
                group_ids.add(group_id)
    return group_ids


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    x_group_token: Optional[List[str]] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthContext:
    user = None
    session_rejected = False
    if credentials:
        try:
            user = auth_service.get_current_user(credentials.credentials)
        except Unauthorized:
            session_rejected = True
    return AuthContext(
        user=user,
        session_rejected=session_rejected,
        is_admin=is_super_user(user),
        group_password_verified=_verified_groups(x_group_token),
    )


def require_session_user(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if ctx.user is None:
        if ctx.session_rejected:
            raise Unauthorized("Invalid or expired token")
        raise Unauthorized("Sign in required")
    return ctx


def get_membership_role(user_id: str, group_id: str, supabase: Client) -> Optional[str]:
    """Role from user_groups for (user_id, group_id), or None if not a member."""
    try:
        result = supabase.table("user_groups")\
            .select("role")\
            .eq("user_id", user_id)\
            .eq("group_id", group_id)\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Error checking membership of {user_id} in {group_id}: {e}")
        raise StoreError("Failed to check group membership") from e
    if not result.data:
        return None
    return result.data[0]["role"]


def authorize_group_access(ctx: AuthContext, group_id: str, supabase: Client) -> GroupAccess:
    """Session membership first, then a verified group password. The two paths are never combined."""
    if ctx.is_admin:
        return GroupAccess(group_id=group_id, role=OWNER, via="admin")
    if ctx.user is not None:
        role = get_membership_role(ctx.user.id, group_id, supabase)
        if role:
            return GroupAccess(group_id=group_id, role=role, via="session")
    if group_id in ctx.group_password_verified:
        return GroupAccess(group_id=group_id, role=GUEST, via="password")
    if ctx.user is None:
        if ctx.session_rejected:
            raise Unauthorized("Invalid or expired token")
        raise Unauthorized("Sign in or enter the group password to continue")
    raise Forbidden("You must be a member of this group")


def require_group_owner(ctx: AuthContext, group_id: str, supabase: Client) -> GroupAccess:
    access = authorize_group_access(ctx, group_id, supabase)
    if not access.is_owner:
        raise Forbidden("Only the group owner can perform this action")
    return access


def check_group_member(
    group_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    supabase: Client = Depends(get_supabase),
) -> GroupAccess:
    """Route dependency: any session membership or verified group password."""
    return authorize_group_access(ctx, group_id, supabase)


def check_group_owner(
    group_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    supabase: Client = Depends(get_supabase),
) -> GroupAccess:
    """Route dependency: owner role (or super user)."""
    return require_group_owner(ctx, group_id, supabase)
