import os
from pydantic import BaseModel, Field


_DEFAULT_JWT_SECRET = "dev-only-auth-jwt-secret-change-me"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = Field(default="postgresql+asyncpg://polls:polls@db:5432/polls")

    # Server
    app_port: int = Field(default=8000)
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = "/api"

    # Hosted auth provider (GoTrue-compatible)
    auth_url: str = Field(default="http://localhost:9999")
    auth_api_key: str | None = None
    auth_jwt_secret: str = Field(default=_DEFAULT_JWT_SECRET)
    auth_jwt_audience: str = Field(default="authenticated")
    auth_timeout_seconds: float = Field(default=10.0)

    # Rate limiting
    rate_limit_storage_url: str | None = None  # redis://redis:6379/0 for multiple workers

    # Polls
    max_vote_options: int = Field(default=100, ge=1)

    # Observability
    log_level: str = Field(default="INFO")
    log_file: str | None = None
    metrics_enabled: bool = Field(default=True)

    environment: str = Field(default="development")


def get_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.model_fields["database_url"].default),
        app_port=int(os.getenv("APP_PORT", Settings.model_fields["app_port"].default)),
        allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        api_prefix=os.getenv("API_PREFIX", Settings.model_fields["api_prefix"].default),
        auth_url=os.getenv("AUTH_URL", Settings.model_fields["auth_url"].default),
        auth_api_key=os.getenv("AUTH_API_KEY"),
        auth_jwt_secret=os.getenv("AUTH_JWT_SECRET", _DEFAULT_JWT_SECRET),
        auth_jwt_audience=os.getenv("AUTH_JWT_AUDIENCE", "authenticated"),
        auth_timeout_seconds=float(os.getenv("AUTH_TIMEOUT_SECONDS", "10")),
        rate_limit_storage_url=os.getenv("RATE_LIMIT_STORAGE_URL") or None,
        max_vote_options=int(os.getenv("MAX_VOTE_OPTIONS", "100")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
        metrics_enabled=os.getenv("METRICS_ENABLED", "true").lower() == "true",
        environment=os.getenv("ENVIRONMENT", "development"),
    )
