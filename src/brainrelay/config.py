"""Configuration management for Brain Relay.

Loads the OpenAI credential, assistant identifiers and server settings from
environment variables using Pydantic. Secrets belong in .env (never hardcoded).

Usage:
    from brainrelay.config import get_settings

    settings = get_settings()
    print(settings.assistant_master_file)
    print(settings.port)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """HTTP server settings. Every field has a default.

    Loaded on its own when the application is built, before the full
    Settings (which need secrets) are read at startup.

    Attributes:
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
        cors_origins: Comma-separated allowed browser origins ("*" = any)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5000, ge=1, le=65535, description="Listening port")
    log_level: str = Field(default="INFO", description="Logging level")
    cors_origins: str = Field(default="*", description="Allowed CORS origins, comma-separated")

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper


class Settings(ServerSettings):
    """Brain Relay configuration from environment variables.

    Loads from .env file automatically. Validates on instantiation.
    The API key and the five mandatory assistant ids are required.
    Server fields (host, port, log_level, cors_origins) come from ServerSettings.

    Attributes:
        openai_api_key: OpenAI API key used as bearer credential
        openai_base_url: Assistants API base URL
        openai_beta: Value of the OpenAI-Beta protocol header
        assistant_*: Assistant id for each pipeline stage
        default_user_id: User id assigned to every request
        poll_interval: Seconds between run status checks
        poll_max_attempts: Status checks before a run is abandoned
        request_timeout: Per-request HTTP timeout in seconds
        http_max_retries: Retries for idempotent GET requests
        firestore_project_id: GCP project (None = ambient credentials)
        firestore_database: Firestore database name
    """

    # OpenAI (REQUIRED)
    openai_api_key: str = Field(..., min_length=10, description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Assistants API base URL",
    )
    openai_beta: str = Field(default="assistants=v2", description="OpenAI-Beta header")

    # Assistant ids, one per stage
    assistant_master_file: str = Field(..., min_length=1)
    assistant_core_messaging: str = Field(..., min_length=1)
    assistant_identity_profile: str = Field(..., min_length=1)
    assistant_social_content: str = Field(..., min_length=1)
    assistant_content_feedback: str = Field(..., min_length=1)
    assistant_brand_analysis: str | None = Field(
        default=None,
        description="Brand analysis assistant (optional stage)",
    )

    # Identity
    default_user_id: str = Field(default="default_user", min_length=1)

    # Run polling
    poll_interval: float = Field(default=2.0, ge=0.0, description="Seconds between polls")
    poll_max_attempts: int = Field(
        default=150,
        ge=1,
        description="Status checks before a run is abandoned",
    )
    request_timeout: float = Field(default=60.0, gt=0.0, description="HTTP timeout (s)")
    http_max_retries: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Retries for idempotent GET requests",
    )

    # Firestore
    firestore_project_id: str | None = Field(default=None, description="GCP project id")
    firestore_database: str = Field(default="(default)", description="Firestore database")

    @field_validator("assistant_brand_analysis")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat an empty brand analysis id as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    def assistant_ids(self) -> dict[str, str | None]:
        """Map pipeline stage names to their configured assistant ids."""
        return {
            "master_file": self.assistant_master_file,
            "core_messaging": self.assistant_core_messaging,
            "identity_profile": self.assistant_identity_profile,
            "social_content": self.assistant_social_content,
            "content_feedback": self.assistant_content_feedback,
            "brand_analysis": self.assistant_brand_analysis,
        }


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance, loaded on first use."""
    return Settings()
