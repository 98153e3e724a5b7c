from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import MeResponse, MembershipSummary
from app.core.dependencies import AuthContext, require_session_user
from app.core.exceptions import StoreError
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=MeResponse)
async def get_current_user(
    ctx: AuthContext = Depends(require_session_user),
    supabase: Client = Depends(get_supabase),
):
    """Get current authenticated user and their group memberships (for frontend UI)."""
    try:
        result = supabase.table("user_groups")\
            .select("group_id, role")\
            .eq("user_id", ctx.user.id)\
            .execute()
    except Exception as e:
        logger.error(f"Error loading memberships for {ctx.user.id}: {e}")
        raise StoreError("Failed to load memberships") from e
    return MeResponse(
        id=ctx.user.id,
        email=ctx.user.email,
        is_admin=ctx.is_admin,
        groups=[MembershipSummary(**row) for row in result.data or []],
    )
