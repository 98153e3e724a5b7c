from supabase import Client
from app.config import settings
from app.core.exceptions import Forbidden, NotFound, StoreError, Unauthorized, ValidationError
from app.core.security import create_group_token, hash_password, is_password_hash, verify_password
from app.modules.auth.schemas import SessionUser
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupAuthResponse, GroupMemberResponse
)
from app.modules.lists.service import ListService
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

GROUP_COLUMNS = "id, name, password_hash, created_at"


def _to_response(row: Dict[str, Any]) -> GroupResponse:
    return GroupResponse(
        id=row["id"],
        name=row["name"],
        created_at=row.get("created_at"),
        has_password=bool(row.get("password_hash")),
    )


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required")
    return name


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_group(self, group_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("groups")\
                .select(GROUP_COLUMNS)\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching group {group_id}: {e}")
            raise StoreError("Failed to fetch group") from e
        if not result.data:
            raise NotFound("Group not found")
        return result.data[0]

    def create_group(self, group_data: GroupCreate, owner: Optional[SessionUser]) -> GroupResponse:
        """Create a group; a session creator becomes its owner."""
        name = _clean_name(group_data.name)
        row: Dict[str, Any] = {"name": name}
        if group_data.password:
            row["password_hash"] = hash_password(group_data.password)
        try:
            result = self.supabase.table("groups").insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating group: {e}")
            raise StoreError("Failed to create group") from e
        if not result.data:
            raise StoreError("Failed to create group")
        group = result.data[0]

        if owner is not None:
            try:
                self.supabase.table("user_groups").insert({
                    "user_id": owner.id,
                    "group_id": group["id"],
                    "role": "owner"
                }).execute()
            except Exception as e:
                logger.error(f"Error adding owner to group {group['id']}, removing group: {e}")
                self.supabase.table("groups").delete().eq("id", group["id"]).execute()
                raise StoreError("Failed to create group") from e

        logger.info("Created group %s", group["id"])
        return _to_response(group)

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        return _to_response(self._fetch_group(group_id))

    def list_groups(self, member_of_user_id: Optional[str] = None) -> List[GroupResponse]:
        """Groups the user belongs to, newest first. Without a user, all groups."""
        try:
            query = self.supabase.table("groups").select(GROUP_COLUMNS)
            if member_of_user_id is not None:
                members_result = self.supabase.table("user_groups")\
                    .select("group_id")\
                    .eq("user_id", member_of_user_id)\
                    .execute()
                group_ids = [m["group_id"] for m in members_result.data or []]
                if not group_ids:
                    return []
                query = query.in_("id", group_ids)
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Error listing groups: {e}")
            raise StoreError("Failed to fetch groups") from e
        return [_to_response(group) for group in result.data or []]

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Rename the group and/or replace its password"""
        update_data: Dict[str, Any] = {}
        if group_data.name is not None:
            update_data["name"] = _clean_name(group_data.name)
        if group_data.password is not None:
            update_data["password_hash"] = hash_password(group_data.password) if group_data.password else None

        if not update_data:
            return self.get_group_by_id(group_id)

        try:
            result = self.supabase.table("groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating group {group_id}: {e}")
            raise StoreError("Failed to update group") from e
        if not result.data:
            raise NotFound("Group not found")
        return _to_response(result.data[0])

    def delete_group(self, group_id: str) -> bool:
        """Delete group with its lists, invites and memberships"""
        self._fetch_group(group_id)
        ListService(self.supabase).delete_lists_for_group(group_id)
        try:
            self.supabase.table("group_invites")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            self.supabase.table("user_groups")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            result = self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise StoreError("Failed to delete group") from e
        logger.info("Deleted group %s", group_id)
        return len(result.data or []) > 0

    def authenticate(self, group_id: str, password: str) -> GroupAuthResponse:
        """Check the shared group password and issue a group access token."""
        group = self._fetch_group(group_id)
        stored = group.get("password_hash")
        if not stored:
            raise Unauthorized("This group has no password")
        if not is_password_hash(stored):
            # Legacy rows kept the password in clear text; they must be reset by the owner.
            logger.warning("Group %s has an unhashed password; rejecting password login", group_id)
            raise Unauthorized("Incorrect password")
        if not verify_password(password, stored):
            raise Unauthorized("Incorrect password")
        return GroupAuthResponse(
            group_token=create_group_token(group_id),
            expires_in=settings.group_token_ttl_minutes * 60,
        )

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        """List all members of a group"""
        try:
            result = self.supabase.table("user_groups")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error listing members of {group_id}: {e}")
            raise StoreError("Failed to fetch members") from e
        return [GroupMemberResponse(**member) for member in result.data or []]

    def remove_member(self, group_id: str, user_id: str, acting_user_id: Optional[str]) -> bool:
        """Remove a member from the group. Owners cannot remove themselves."""
        if acting_user_id is not None and acting_user_id == user_id:
            raise Forbidden("Owners cannot remove themselves from a group")
        try:
            result = self.supabase.table("user_groups")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing {user_id} from {group_id}: {e}")
            raise StoreError("Failed to remove member") from e
        if not result.data:
            raise NotFound("Member not found")
        return True
