import secrets
from supabase import Client
from app.config import settings
from app.core.dependencies import MEMBER, get_membership_role
from app.core.exceptions import AlreadyAccepted, Forbidden, NotFound, StoreError
from app.modules.auth.schemas import SessionUser
from app.modules.groups.schemas import GroupMemberResponse
from app.modules.groups.service import GroupService
from app.modules.invites.schemas import (
    InviteResponse, InviteCreateResponse, InviteStatusResponse
)
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

INVITE_COLUMNS = "id, group_id, email, token, accepted, created_at"


def _emails_match(invite_email: str, user: SessionUser) -> bool:
    return bool(user.email) and invite_email.lower() == user.email.lower()


class InviteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find_invite(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("group_invites")\
                .select(INVITE_COLUMNS)\
                .eq(column, value)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching invite by {column}: {e}")
            raise StoreError("Failed to fetch invite") from e
        return result.data[0] if result.data else None

    def get_invite_by_token(self, token: str) -> Dict[str, Any]:
        invite = self._find_invite("token", token)
        if invite is None:
            raise NotFound("This invite link is invalid or has expired.")
        return invite

    def _send_invite_email(self, email: str, group_name: str, invite_link: str) -> bool:
        """Invoke the email edge function. Failure leaves the invite in place."""
        try:
            self.supabase.functions.invoke(
                settings.invite_email_function,
                invoke_options={"body": {
                    "email": email,
                    "groupName": group_name,
                    "inviteLink": invite_link,
                }},
            )
        except Exception as e:
            logger.warning(f"Invite email to {email} was not delivered: {e}")
            return False
        return True

    def create_invite(self, group_id: str, email: str) -> InviteCreateResponse:
        """Store an invite for email and send the invite link"""
        group = GroupService(self.supabase).get_group_by_id(group_id)
        normalized_email = email.strip().lower()
        token = secrets.token_urlsafe(32)
        try:
            result = self.supabase.table("group_invites").insert({
                "group_id": group_id,
                "email": normalized_email,
                "token": token,
                "accepted": False,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating invite for group {group_id}: {e}")
            raise StoreError("Failed to create invite") from e
        if not result.data:
            raise StoreError("Failed to create invite")

        invite_link = settings.invite_link(token)
        email_sent = self._send_invite_email(normalized_email, group.name, invite_link)
        logger.info("Created invite %s for group %s (email sent: %s)", result.data[0]["id"], group_id, email_sent)
        return InviteCreateResponse(
            **result.data[0],
            invite_link=invite_link,
            email_sent=email_sent,
        )

    def list_invites(self, group_id: str) -> List[InviteResponse]:
        try:
            result = self.supabase.table("group_invites")\
                .select(INVITE_COLUMNS)\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing invites of group {group_id}: {e}")
            raise StoreError("Failed to fetch invites") from e
        return [InviteResponse(**row) for row in result.data or []]

    def inspect_invite(self, token: str, user: Optional[SessionUser]) -> InviteStatusResponse:
        """Describe what accepting this invite would do for the caller"""
        invite = self._find_invite("token", token)
        if invite is None:
            return InviteStatusResponse(status="invalid", message="This invite link is invalid or has expired.")
        if invite["accepted"]:
            return InviteStatusResponse(
                status="accepted",
                message="This invite has already been accepted.",
                group_id=invite["group_id"],
            )
        if user is None:
            return InviteStatusResponse(status="unauthenticated", message="Please sign in to accept this invite.")
        if not _emails_match(invite["email"], user):
            return InviteStatusResponse(status="mismatch", message="This invite was sent to a different email address.")
        group = GroupService(self.supabase).get_group_by_id(invite["group_id"])
        return InviteStatusResponse(
            status="valid",
            message="You've been invited to join this group.",
            invite_id=invite["id"],
            group_id=group.id,
            group_name=group.name,
        )

    def _membership_row(self, user_id: str, group_id: str) -> Dict[str, Any]:
        result = self.supabase.table("user_groups")\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("group_id", group_id)\
            .limit(1)\
            .execute()
        return result.data[0]

    def _release_invite(self, invite_id: str) -> bool:
        try:
            self.supabase.table("group_invites")\
                .update({"accepted": False})\
                .eq("id", invite_id)\
                .execute()
        except Exception as e:
            logger.error(f"Could not release invite {invite_id}, it stays accepted: {e}")
            return False
        return True

    def accept_invite(self, invite_id: str, user: SessionUser) -> GroupMemberResponse:
        """Consume an invite and make the caller a member of its group.

        The accepted flag is claimed first with a conditional update, so of
        two concurrent acceptances only one proceeds. If the membership
        write then fails, the claim is released again.
        """
        invite = self._find_invite("id", invite_id)
        if invite is None:
            raise NotFound("Invite not found")
        if invite["accepted"]:
            raise AlreadyAccepted(invite["group_id"])
        if not _emails_match(invite["email"], user):
            raise Forbidden("This invite was sent to a different email address.")

        try:
            claim = self.supabase.table("group_invites")\
                .update({"accepted": True})\
                .eq("id", invite_id)\
                .eq("accepted", False)\
                .execute()
        except Exception as e:
            logger.error(f"Error claiming invite {invite_id}: {e}")
            raise StoreError("Failed to accept invite") from e
        if not claim.data:
            raise AlreadyAccepted(invite["group_id"])

        group_id = invite["group_id"]
        try:
            if get_membership_role(user.id, group_id, self.supabase):
                membership = self._membership_row(user.id, group_id)
            else:
                result = self.supabase.table("user_groups").insert({
                    "user_id": user.id,
                    "group_id": group_id,
                    "role": MEMBER,
                }).execute()
                if not result.data:
                    raise StoreError("Failed to add member")
                membership = result.data[0]
        except Exception as e:
            logger.error(f"Error adding {user.id} to group {group_id}, releasing invite {invite_id}: {e}")
            self._release_invite(invite_id)
            raise StoreError("Failed to accept invite") from e

        logger.info("User %s joined group %s via invite %s", user.id, group_id, invite_id)
        return GroupMemberResponse(**membership)
