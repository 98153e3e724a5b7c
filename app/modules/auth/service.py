import hashlib
import logging
import time
from supabase import Client
from app.core.exceptions import Unauthorized
from app.modules.auth.schemas import SessionUser
from typing import Dict

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_current_user(self, token: str) -> SessionUser:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            user, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return user
            del _AUTH_USER_CACHE[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info("Rejected session token: %s", e)
            raise Unauthorized("Invalid or expired token")
        if not user_response or not user_response.user:
            raise Unauthorized("Invalid or expired token")
        raw = user_response.user
        user = SessionUser(
            id=raw.id,
            email=raw.email,
            user_metadata=raw.user_metadata or {},
            app_metadata=raw.app_metadata or {},
        )
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (user, now + _AUTH_CACHE_TTL_SEC)
        return user
