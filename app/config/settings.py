from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
import secrets


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used for cascades and invite claims

    # Invites
    site_url: str = "http://localhost:3000"
    invite_email_function: str = "send-invite-email"

    # Group password tokens (returned by POST /groups/{id}/auth, sent back as X-Group-Token)
    group_token_secret: str = ""
    group_token_algorithm: str = "HS256"
    group_token_ttl_minutes: int = 720

    # Batch reorder
    reorder_max_workers: int = 8

    # App
    app_name: str = "listshare-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def invite_link(self, token: str) -> str:
        return f"{self.site_url.rstrip('/')}/accept-invite?token={token}"

    def ensure_secrets(self) -> None:
        """Generate a group token secret for local runs. Production must set GROUP_TOKEN_SECRET."""
        if self.group_token_secret:
            return
        if self.is_production:
            raise RuntimeError("GROUP_TOKEN_SECRET must be set in production")
        # Process-local: group tokens stop verifying after a restart
        self.group_token_secret = secrets.token_urlsafe(32)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
settings.ensure_secrets()
