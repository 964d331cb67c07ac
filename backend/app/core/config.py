import os
from typing import List, Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # AWS Cognito settings (dashboard users sign in through the hosted UI)
    cognito_region: str = os.getenv("COGNITO_REGION", "us-east-1")
    cognito_user_pool_id: Optional[str] = os.getenv("COGNITO_USER_POOL_ID")
    cognito_app_client_id: Optional[str] = os.getenv("COGNITO_APP_CLIENT_ID")

    @property
    def cognito_issuer(self) -> str:
        """Get the Cognito issuer URL."""
        return f"https://cognito-idp.{self.cognito_region}.amazonaws.com/{self.cognito_user_pool_id}"

    @property
    def cognito_jwks_url(self) -> str:
        """Get the Cognito JWKS URL for token verification."""
        return f"{self.cognito_issuer}/.well-known/jwks.json"

    # Supabase
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # Redis (import run lock)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # CORS
    cors_origins: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # External checking system
    # Upstream feed pushing blocked/unblocked events; bridge is disabled when unset
    checker_websocket_url: Optional[str] = os.getenv("CHECKER_WEBSOCKET_URL")
    checker_reconnect_seconds: float = float(os.getenv("CHECKER_RECONNECT_SECONDS", "5"))
    # Synchronous "bulk check" command endpoint and its server-held credential
    checker_bulk_check_url: Optional[str] = os.getenv("CHECKER_BULK_CHECK_URL")
    checker_api_key: Optional[str] = os.getenv("CHECKER_API_KEY")
    checker_timeout_seconds: float = float(os.getenv("CHECKER_TIMEOUT_SECONDS", "30"))
    # Shared secret the checker must send as X-Checker-Key (open when unset)
    checker_ingest_key: Optional[str] = os.getenv("CHECKER_INGEST_KEY")
    max_manual_check_urls: int = int(os.getenv("MAX_MANUAL_CHECK_URLS", "5"))

    # Real-time broadcast coalescing
    broadcast_flush_seconds: float = float(os.getenv("BROADCAST_FLUSH_SECONDS", "2"))
    broadcast_max_batch: int = int(os.getenv("BROADCAST_MAX_BATCH", "50"))

    # Bulk import
    import_chunk_size: int = int(os.getenv("IMPORT_CHUNK_SIZE", "50"))
    max_bulk_import_size: int = int(os.getenv("MAX_BULK_IMPORT_SIZE", "10000"))
    import_lock_enabled: bool = _env_bool("IMPORT_LOCK_ENABLED")
    import_lock_ttl_seconds: int = int(os.getenv("IMPORT_LOCK_TTL_SECONDS", "600"))

    # Status updates from the checker
    status_update_chunk_size: int = int(os.getenv("STATUS_UPDATE_CHUNK_SIZE", "10"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
