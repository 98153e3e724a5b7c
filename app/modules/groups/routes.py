from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupAuthRequest, GroupAuthResponse,
    GroupMemberResponse
)
from app.modules.groups.service import GroupService
from app.core.dependencies import (
    AuthContext, GroupAccess, check_group_member, check_group_owner, require_session_user
)
from app.core.schemas import SuccessResponse
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    ctx: AuthContext = Depends(require_session_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the caller becomes its owner"""
    return service.create_group(group_data, ctx.user)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    ctx: AuthContext = Depends(require_session_user),
    service: GroupService = Depends(get_group_service)
):
    """List groups the user is a member of (or all if super_user)"""
    member_of_user_id = None if ctx.is_admin else ctx.user_id
    return service.list_groups(member_of_user_id=member_of_user_id)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """Get group name and whether it has a password (shown before password entry)"""
    return service.get_group_by_id(group_id)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    access: GroupAccess = Depends(check_group_owner),
    service: GroupService = Depends(get_group_service)
):
    """Rename the group or change its password (owner only)"""
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}", response_model=SuccessResponse)
async def delete_group(
    group_id: str,
    access: GroupAccess = Depends(check_group_owner),
    service: GroupService = Depends(get_group_service)
):
    """Delete group with all of its lists (owner or super_user)"""
    service.delete_group(group_id)
    return SuccessResponse()


@router.post("/{group_id}/auth", response_model=GroupAuthResponse)
async def authenticate_group(
    group_id: str,
    auth_data: GroupAuthRequest,
    service: GroupService = Depends(get_group_service)
):
    """Check the group password; the returned token goes in the X-Group-Token header"""
    return service.authenticate(group_id, auth_data.password)


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: GroupService = Depends(get_group_service)
):
    return service.list_members(group_id)


@router.delete("/{group_id}/members/{user_id}", response_model=SuccessResponse)
async def remove_member(
    group_id: str,
    user_id: str,
    access: GroupAccess = Depends(check_group_owner),
    ctx: AuthContext = Depends(require_session_user),
    service: GroupService = Depends(get_group_service)
):
    """Remove a member from the group (owner only)"""
    service.remove_member(group_id, user_id, ctx.user_id)
    return SuccessResponse()
