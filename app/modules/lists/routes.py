from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import GroupAccess, check_group_member
from app.core.schemas import SuccessResponse
from app.modules.lists.schemas import (
    ListCreate, ListUpdate, ListResponse, ListWithCounts, ListReorderRequest
)
from app.modules.lists.service import ListService
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups/{group_id}/lists", tags=["lists"])


def get_list_service(supabase: Client = Depends(get_supabase)) -> ListService:
    return ListService(supabase)


@router.get("", response_model=List[ListWithCounts])
async def list_lists(
    group_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    """Lists of the group in display order, with total and bought item counts"""
    return service.list_lists(group_id)


@router.post("", response_model=ListResponse, status_code=201)
async def create_list(
    group_id: str,
    list_data: ListCreate,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    """Create a list at the top of the group"""
    return service.insert_at_top(group_id, list_data)


@router.patch("", response_model=SuccessResponse)
async def reorder_lists(
    group_id: str,
    reorder: ListReorderRequest,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    """Batch update list positions; rejected entirely if any list is outside the group"""
    service.reorder(group_id, reorder.lists)
    return SuccessResponse()


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(
    group_id: str,
    list_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    return service.get_list(group_id, list_id)


@router.patch("/{list_id}", response_model=ListResponse)
async def update_list(
    group_id: str,
    list_id: str,
    list_data: ListUpdate,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    """Rename a list or change its theme"""
    return service.update_list(group_id, list_id, list_data)


@router.delete("/{list_id}", response_model=SuccessResponse)
async def delete_list(
    group_id: str,
    list_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ListService = Depends(get_list_service)
):
    """Delete a list together with its items and comments"""
    service.delete_list(group_id, list_id)
    return SuccessResponse()
