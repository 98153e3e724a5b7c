from supabase import Client
from app.core.exceptions import NotFound, StoreError, ValidationError
from app.modules.items.schemas import ItemCreate, ItemUpdate, ItemResponse
from app.modules.lists.service import ListService
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

ITEM_COLUMNS = "id, list_id, content, bought, created_at"


def _clean_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Item content cannot be empty")
    return content


class ItemService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.lists = ListService(supabase)

    def get_item(self, group_id: str, list_id: str, item_id: str) -> ItemResponse:
        """Get an item after checking the list belongs to the group"""
        self.lists.get_list(group_id, list_id)
        try:
            result = self.supabase.table("items")\
                .select(ITEM_COLUMNS)\
                .eq("id", item_id)\
                .eq("list_id", list_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching item {item_id}: {e}")
            raise StoreError("Failed to fetch item") from e
        if not result.data:
            raise NotFound("Item not found")
        return ItemResponse(**result.data[0])

    def list_items(self, group_id: str, list_id: str) -> List[ItemResponse]:
        """Items of a list, newest first"""
        self.lists.get_list(group_id, list_id)
        try:
            result = self.supabase.table("items")\
                .select(ITEM_COLUMNS)\
                .eq("list_id", list_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching items of list {list_id}: {e}")
            raise StoreError("Failed to fetch items") from e
        return [ItemResponse(**row) for row in result.data or []]

    def create_item(self, group_id: str, list_id: str, item_data: ItemCreate) -> ItemResponse:
        content = _clean_content(item_data.content)
        self.lists.get_list(group_id, list_id)
        try:
            result = self.supabase.table("items").insert({
                "content": content,
                "bought": False,
                "list_id": list_id,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating item in list {list_id}: {e}")
            raise StoreError("Failed to create item") from e
        if not result.data:
            raise StoreError("Failed to create item")
        return ItemResponse(**result.data[0])

    def update_item(self, group_id: str, list_id: str, item_id: str, item_data: ItemUpdate) -> ItemResponse:
        """Set bought and/or content. No version check: the last write wins."""
        update_data: Dict[str, Any] = {}
        if item_data.bought is not None:
            update_data["bought"] = item_data.bought
        if item_data.content is not None:
            update_data["content"] = _clean_content(item_data.content)
        if not update_data:
            raise ValidationError("Nothing to update")

        self.lists.get_list(group_id, list_id)
        try:
            result = self.supabase.table("items")\
                .update(update_data)\
                .eq("id", item_id)\
                .eq("list_id", list_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating item {item_id}: {e}")
            raise StoreError("Failed to update item") from e
        if not result.data:
            raise NotFound("Item not found")
        return ItemResponse(**result.data[0])

    def delete_item(self, group_id: str, list_id: str, item_id: str) -> bool:
        """Delete an item and its comments"""
        self.get_item(group_id, list_id, item_id)
        try:
            self.supabase.table("comments")\
                .delete()\
                .eq("item_id", item_id)\
                .execute()
            result = self.supabase.table("items")\
                .delete()\
                .eq("id", item_id)\
                .eq("list_id", list_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting item {item_id}: {e}")
            raise StoreError("Failed to delete item") from e
        return len(result.data or []) > 0
