from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import GroupAccess, check_group_member
from app.core.schemas import SuccessResponse
from app.modules.items.schemas import ItemCreate, ItemUpdate, ItemResponse
from app.modules.items.service import ItemService
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups/{group_id}/lists/{list_id}/items", tags=["items"])


def get_item_service(supabase: Client = Depends(get_supabase)) -> ItemService:
    return ItemService(supabase)


@router.get("", response_model=List[ItemResponse])
async def list_items(
    group_id: str,
    list_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ItemService = Depends(get_item_service)
):
    return service.list_items(group_id, list_id)


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(
    group_id: str,
    list_id: str,
    item_data: ItemCreate,
    access: GroupAccess = Depends(check_group_member),
    service: ItemService = Depends(get_item_service)
):
    return service.create_item(group_id, list_id, item_data)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    group_id: str,
    list_id: str,
    item_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ItemService = Depends(get_item_service)
):
    return service.get_item(group_id, list_id, item_id)


@router.patch("/{item_id}", response_model=ItemResponse)
async def update_item(
    group_id: str,
    list_id: str,
    item_id: str,
    item_data: ItemUpdate,
    access: GroupAccess = Depends(check_group_member),
    service: ItemService = Depends(get_item_service)
):
    """Toggle bought status and/or edit content"""
    return service.update_item(group_id, list_id, item_id, item_data)


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_item(
    group_id: str,
    list_id: str,
    item_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: ItemService = Depends(get_item_service)
):
    service.delete_item(group_id, list_id, item_id)
    return SuccessResponse()
