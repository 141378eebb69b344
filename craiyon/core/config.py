"""
Library configuration.
Settings are loaded from CRAIYON_* environment variables (or a .env file).
Every field has a default, so importing the library never requires an environment.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from craiyon.errors import RATE_LIMIT_BACKOFF_SECONDS


class Settings(BaseSettings):
    """Defaults for clients built through ClientFactory.create_from_settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRAIYON_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # ===========================================
    # PROTOCOL SELECTION
    # ===========================================
    protocol: str = "v3"  # v1, v3

    # ===========================================
    # ENDPOINTS
    # ===========================================
    v1_base_url: str = "https://backend.craiyon.com"
    v3_base_url: str = "https://api.craiyon.com"
    image_host: str = "https://img.craiyon.com"

    # ===========================================
    # PROTOCOL V3
    # ===========================================
    model_version: str = "35s5hfwn9n78gb06"
    api_token: str | None = None

    # ===========================================
    # RETRY / TIMEOUT
    # ===========================================
    max_retries: int = 3
    request_timeout: float = 120.0
    rate_limit_backoff_seconds: float = RATE_LIMIT_BACKOFF_SECONDS

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must be >= 0")
        return v

    @field_validator("protocol")
    @classmethod
    def normalize_protocol(cls, v: str) -> str:
        return v.strip().lower()


settings = Settings()
