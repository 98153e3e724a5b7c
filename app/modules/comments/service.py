from supabase import Client
from app.core.exceptions import NotFound, StoreError, ValidationError
from app.modules.comments.schemas import CommentResponse
from app.modules.items.service import ItemService
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

COMMENT_COLUMNS = "id, item_id, content, created_at"


def _clean_content(content: Optional[str]) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Comment content is required")
    return content.strip()


def _require_comment_id(comment_id: Optional[str]) -> str:
    if not comment_id:
        raise ValidationError("Comment ID is required")
    return comment_id


class CommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.items = ItemService(supabase)

    def list_comments(self, group_id: str, list_id: str, item_id: str) -> List[CommentResponse]:
        """Comments on an item, newest first"""
        self.items.get_item(group_id, list_id, item_id)
        try:
            result = self.supabase.table("comments")\
                .select(COMMENT_COLUMNS)\
                .eq("item_id", item_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching comments of item {item_id}: {e}")
            raise StoreError("Failed to fetch comments") from e
        return [CommentResponse(**row) for row in result.data or []]

    def create_comment(self, group_id: str, list_id: str, item_id: str, content: Optional[str]) -> CommentResponse:
        content = _clean_content(content)
        self.items.get_item(group_id, list_id, item_id)
        try:
            result = self.supabase.table("comments").insert({
                "content": content,
                "item_id": item_id,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating comment on item {item_id}: {e}")
            raise StoreError("Failed to create comment") from e
        if not result.data:
            raise StoreError("Failed to create comment")
        return CommentResponse(**result.data[0])

    def update_comment(
        self, group_id: str, list_id: str, item_id: str, comment_id: Optional[str], content: Optional[str]
    ) -> CommentResponse:
        comment_id = _require_comment_id(comment_id)
        content = _clean_content(content)
        self.items.get_item(group_id, list_id, item_id)
        try:
            result = self.supabase.table("comments")\
                .update({"content": content})\
                .eq("id", comment_id)\
                .eq("item_id", item_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating comment {comment_id}: {e}")
            raise StoreError("Failed to update comment") from e
        if not result.data:
            raise NotFound("Comment not found")
        return CommentResponse(**result.data[0])

    def delete_comment(self, group_id: str, list_id: str, item_id: str, comment_id: Optional[str]) -> bool:
        comment_id = _require_comment_id(comment_id)
        self.items.get_item(group_id, list_id, item_id)
        try:
            result = self.supabase.table("comments")\
                .delete()\
                .eq("id", comment_id)\
                .eq("item_id", item_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise StoreError("Failed to delete comment") from e
        if not result.data:
            raise NotFound("Comment not found")
        return True
