"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings

from gateway.services.tokens import parse_duration


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Built once per process and never mutated; components receive it through
    their constructors instead of reading the environment themselves.
    """

    # App
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"

    # Auth
    admin_secret_key: str
    auth_token_secret: str = ""  # falls back to admin_secret_key
    token_expiry: str = "30m"

    # CORS (comma-separated; empty allows every origin)
    allowed_origins: str = ""

    # Content store
    content_store_uri: str
    content_container: str = "blog-posts"
    managed_identity_client_id: str = ""

    # Presentation
    default_author: str = "Editorial Team"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}

    @model_validator(mode="after")
    def _check_secrets_and_expiry(self) -> "Settings":
        if not self.admin_secret_key.strip():
            raise ValueError("ADMIN_SECRET_KEY must not be empty")
        if not self.content_store_uri.strip():
            raise ValueError("CONTENT_STORE_URI must not be empty")
        # Raises ValueError on an unparseable duration
        parse_duration(self.token_expiry)
        return self

    @property
    def signing_secret(self) -> str:
        """Secret used to sign and verify bearer tokens."""
        return self.auth_token_secret or self.admin_secret_key

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
