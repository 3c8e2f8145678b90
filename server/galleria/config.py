"""Application configuration."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env files.

    Every variable is prefixed with GALLERIA_, e.g. GALLERIA_JWT_SECRET.
    """

    model_config = SettingsConfigDict(
        env_prefix="GALLERIA_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    document_path: str = "data/galleria.json"  # Whole-store JSON document

    # Credentials
    pbkdf2_iterations: int = Field(default=120_000, ge=100_000)
    salt_bytes: int = Field(default=16, ge=16)

    # First-run admin provisioning (password empty = elevate only, never create)
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str = ""

    # Auth
    jwt_secret: str = ""  # Must be set before serving the API
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    dev_mode: bool = True  # Human-readable logs and live reload
    log_json: bool = False


settings = Settings()
