from concurrent.futures import ThreadPoolExecutor, as_completed
from supabase import Client
from app.config import settings
from app.core.exceptions import Forbidden, NotFound, PartialBatchFailure, StoreError, ValidationError
from app.modules.lists.schemas import (
    ListCreate, ListUpdate, ListResponse, ListWithCounts, ListPosition
)
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

LIST_COLUMNS = "id, group_id, title, position, theme, created_at"


def display_order(lists: List[ListResponse]) -> List[ListResponse]:
    """Positioned lists ascending by position, then unpositioned lists newest first."""
    positioned = sorted((l for l in lists if l.position is not None), key=lambda l: l.position)
    unpositioned = sorted(
        (l for l in lists if l.position is None),
        key=lambda l: (l.created_at is not None, l.created_at),
        reverse=True,
    )
    return positioned + unpositioned


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("List name is required")
    return title


class ListService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_list(self, group_id: str, list_id: str) -> ListResponse:
        """Get a list, scoped to its group. A list from another group is not found."""
        try:
            result = self.supabase.table("lists")\
                .select(LIST_COLUMNS)\
                .eq("id", list_id)\
                .eq("group_id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching list {list_id}: {e}")
            raise StoreError("Failed to fetch list") from e
        if not result.data:
            raise NotFound("List not found")
        return ListResponse(**result.data[0])

    def _count_items(self, list_id: str, bought_only: bool = False) -> int:
        query = self.supabase.table("items")\
            .select("id", count="exact")\
            .eq("list_id", list_id)
        if bought_only:
            query = query.eq("bought", True)
        result = query.execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def _with_counts(self, item_list: ListResponse) -> ListWithCounts:
        counts = {}
        for key, bought_only in (("total_items", False), ("bought_items", True)):
            try:
                counts[key] = self._count_items(item_list.id, bought_only)
            except Exception as e:
                logger.warning(f"Could not count items for list {item_list.id}: {e}")
                counts[key] = 0
        return ListWithCounts(**item_list.model_dump(), **counts)

    def list_lists(self, group_id: str) -> List[ListWithCounts]:
        """All lists of a group in display order, each with item counts"""
        try:
            result = self.supabase.table("lists")\
                .select(LIST_COLUMNS)\
                .eq("group_id", group_id)\
                .order("position")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching lists for group {group_id}: {e}")
            raise StoreError("Failed to fetch lists") from e
        lists = display_order([ListResponse(**row) for row in result.data or []])
        return [self._with_counts(item_list) for item_list in lists]

    def _top_position(self, group_id: str) -> Optional[int]:
        result = self.supabase.table("lists")\
            .select("position")\
            .eq("group_id", group_id)\
            .order("position")\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return result.data[0].get("position")

    def insert_at_top(self, group_id: str, list_data: ListCreate) -> ListResponse:
        """Create a list that sorts before every existing list of the group"""
        title = _clean_title(list_data.name)
        try:
            current_min = self._top_position(group_id)
            position = current_min - 1 if current_min is not None else 0
            result = self.supabase.table("lists").insert({
                "title": title,
                "group_id": group_id,
                "position": position,
                "theme": list_data.theme,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating list in group {group_id}: {e}")
            raise StoreError("Failed to create list") from e
        if not result.data:
            raise StoreError("Failed to create list")
        return ListResponse(**result.data[0])

    def update_list(self, group_id: str, list_id: str, list_data: ListUpdate) -> ListResponse:
        """Rename a list or change its theme"""
        update_data: Dict[str, Any] = {}
        if list_data.title is not None:
            update_data["title"] = _clean_title(list_data.title)
        if list_data.theme is not None:
            update_data["theme"] = list_data.theme or None

        if not update_data:
            return self.get_list(group_id, list_id)

        try:
            result = self.supabase.table("lists")\
                .update(update_data)\
                .eq("id", list_id)\
                .eq("group_id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating list {list_id}: {e}")
            raise StoreError("Failed to update list") from e
        if not result.data:
            raise NotFound("List not found")
        return ListResponse(**result.data[0])

    def _delete_contents(self, list_ids: List[str]):
        """Delete comments and items belonging to the given lists."""
        if not list_ids:
            return
        items_result = self.supabase.table("items")\
            .select("id")\
            .in_("list_id", list_ids)\
            .execute()
        item_ids = [row["id"] for row in items_result.data or []]
        if item_ids:
            self.supabase.table("comments")\
                .delete()\
                .in_("item_id", item_ids)\
                .execute()
        self.supabase.table("items")\
            .delete()\
            .in_("list_id", list_ids)\
            .execute()

    def delete_list(self, group_id: str, list_id: str) -> bool:
        """Delete a list with its items and their comments"""
        self.get_list(group_id, list_id)
        try:
            self._delete_contents([list_id])
            result = self.supabase.table("lists")\
                .delete()\
                .eq("id", list_id)\
                .eq("group_id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting list {list_id}: {e}")
            raise StoreError("Failed to delete list") from e
        return len(result.data or []) > 0

    def delete_lists_for_group(self, group_id: str):
        try:
            result = self.supabase.table("lists")\
                .select("id")\
                .eq("group_id", group_id)\
                .execute()
            list_ids = [row["id"] for row in result.data or []]
            self._delete_contents(list_ids)
            self.supabase.table("lists")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting lists of group {group_id}: {e}")
            raise StoreError("Failed to delete lists") from e

    def _set_position(self, group_id: str, list_id: str, position: Optional[int]):
        result = self.supabase.table("lists")\
            .update({"position": position})\
            .eq("id", list_id)\
            .eq("group_id", group_id)\
            .execute()
        if not result.data:
            raise NotFound(f"List {list_id} disappeared during reorder")

    def _restore_positions(self, group_id: str, previous: Dict[str, Optional[int]]) -> bool:
        restored = True
        for list_id, position in previous.items():
            try:
                self._set_position(group_id, list_id, position)
            except Exception as e:
                logger.error(f"Could not restore position of list {list_id}: {e}")
                restored = False
        return restored

    def reorder(self, group_id: str, positions: List[ListPosition]) -> bool:
        """Apply new positions to a batch of lists.

        Every id must belong to the group or nothing is written. Updates run
        concurrently; if any of them fails, the ones that succeeded are put
        back to their previous positions and PartialBatchFailure is raised.
        """
        if not positions:
            raise ValidationError("No lists to reorder")
        ids = [p.id for p in positions]
        if len(set(ids)) != len(ids):
            raise ValidationError("Each list may appear only once in a reorder request")

        try:
            result = self.supabase.table("lists")\
                .select("id, position", count="exact")\
                .eq("group_id", group_id)\
                .in_("id", ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error verifying lists for reorder in {group_id}: {e}")
            raise StoreError("Failed to verify lists") from e
        matched = result.count if result.count is not None else len(result.data or [])
        if matched != len(ids):
            raise Forbidden("One or more lists do not belong to this group")
        previous = {row["id"]: row.get("position") for row in result.data or []}

        applied: List[str] = []
        failed: List[str] = []
        workers = max(1, min(settings.reorder_max_workers, len(positions)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self._set_position, group_id, p.id, p.position): p.id
                for p in positions
            }
            for future in as_completed(futures):
                list_id = futures[future]
                try:
                    future.result()
                    applied.append(list_id)
                except Exception as e:
                    logger.error(f"Failed to update position of list {list_id}: {e}")
                    failed.append(list_id)

        if failed:
            rolled_back = self._restore_positions(group_id, {i: previous[i] for i in applied})
            raise PartialBatchFailure(
                "Failed to update list positions",
                failed_ids=sorted(failed),
                rolled_back=rolled_back,
            )
        logger.info("Reordered %d lists in group %s", len(positions), group_id)
        return True
