from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import (
    AuthContext, GroupAccess, check_group_owner, get_auth_context, require_session_user
)
from app.modules.groups.schemas import GroupMemberResponse
from app.modules.invites.schemas import (
    InviteCreate, InviteResponse, InviteCreateResponse, InviteStatusResponse
)
from app.modules.invites.service import InviteService
from supabase import Client
from typing import List

router = APIRouter(tags=["invites"])


def get_invite_service(supabase: Client = Depends(get_supabase)) -> InviteService:
    return InviteService(supabase)


@router.post("/groups/{group_id}/invites", response_model=InviteCreateResponse, status_code=201)
async def create_invite(
    group_id: str,
    invite_data: InviteCreate,
    access: GroupAccess = Depends(check_group_owner),
    service: InviteService = Depends(get_invite_service)
):
    """Invite an email address to the group (owner only)"""
    return service.create_invite(group_id, invite_data.email)


@router.get("/groups/{group_id}/invites", response_model=List[InviteResponse])
async def list_invites(
    group_id: str,
    access: GroupAccess = Depends(check_group_owner),
    service: InviteService = Depends(get_invite_service)
):
    return service.list_invites(group_id)


@router.get("/invites/{token}", response_model=InviteStatusResponse)
async def inspect_invite(
    token: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: InviteService = Depends(get_invite_service)
):
    """Status of an invite link for the caller: valid, invalid, accepted, unauthenticated or mismatch"""
    return service.inspect_invite(token, ctx.user)


@router.post("/invites/{token}/accept", response_model=GroupMemberResponse, status_code=201)
async def accept_invite(
    token: str,
    ctx: AuthContext = Depends(require_session_user),
    service: InviteService = Depends(get_invite_service)
):
    """Join the invite's group as a member"""
    invite = service.get_invite_by_token(token)
    return service.accept_invite(invite["id"], ctx.user)
