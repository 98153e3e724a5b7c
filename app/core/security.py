"""Security utilities: group password hashing and group access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from app.config import settings
from app.core.exceptions import ValidationError

GROUP_TOKEN_TYPE = "group_access"
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


# --- Password Hashing ---

def hash_password(password: str) -> str:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Group password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode()


def is_password_hash(value: Optional[str]) -> bool:
    """True for bcrypt hashes ($2a$, $2b$, $2y$). Legacy rows hold plaintext."""
    return bool(value) and value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


# --- Group Access Tokens ---

def create_group_token(group_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.group_token_ttl_minutes)
    payload = {
        "grp": group_id,
        "exp": expire,
        "type": GROUP_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.group_token_secret, algorithm=settings.group_token_algorithm)


def decode_group_token(token: str) -> Optional[str]:
    """Return the group id a token grants, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(
            token, settings.group_token_secret, algorithms=[settings.group_token_algorithm]
        )
    except jwt.PyJWTError:
        return None
    if payload.get("type") != GROUP_TOKEN_TYPE:
        return None
    return payload.get("grp")
