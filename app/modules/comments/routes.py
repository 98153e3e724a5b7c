from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.core.dependencies import GroupAccess, check_group_member
from app.core.schemas import SuccessResponse
from app.modules.comments.schemas import CommentCreate, CommentUpdate, CommentResponse
from app.modules.comments.service import CommentService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/groups/{group_id}/lists/{list_id}/items/{item_id}/comments", tags=["comments"])


def get_comment_service(supabase: Client = Depends(get_supabase)) -> CommentService:
    return CommentService(supabase)


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    group_id: str,
    list_id: str,
    item_id: str,
    access: GroupAccess = Depends(check_group_member),
    service: CommentService = Depends(get_comment_service)
):
    return service.list_comments(group_id, list_id, item_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(
    group_id: str,
    list_id: str,
    item_id: str,
    comment_data: CommentCreate,
    access: GroupAccess = Depends(check_group_member),
    service: CommentService = Depends(get_comment_service)
):
    return service.create_comment(group_id, list_id, item_id, comment_data.content)


@router.patch("", response_model=CommentResponse)
async def update_comment(
    group_id: str,
    list_id: str,
    item_id: str,
    comment_data: CommentUpdate,
    access: GroupAccess = Depends(check_group_member),
    service: CommentService = Depends(get_comment_service)
):
    """Edit a comment; body carries commentId and content"""
    return service.update_comment(group_id, list_id, item_id, comment_data.comment_id, comment_data.content)


@router.delete("", response_model=SuccessResponse)
async def delete_comment(
    group_id: str,
    list_id: str,
    item_id: str,
    comment_id: Optional[str] = Query(None, alias="commentId"),
    access: GroupAccess = Depends(check_group_member),
    service: CommentService = Depends(get_comment_service)
):
    """Delete a comment given as ?commentId="""
    service.delete_comment(group_id, list_id, item_id, comment_id)
    return SuccessResponse()
