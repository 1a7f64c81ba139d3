"""
Application settings configuration for the event-management service.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        EWM_STATS_SERVER_URL: Base URL of the statistics service (default: http://localhost:9090)
        EWM_STATS_APP_NAME: Application name sent with every recorded hit (default: ewm-service)
        EWM_STATS_TIMEOUT: Timeout in seconds for calls to the statistics service (default: 5.0)
        EWM_ENFORCE_REQUEST_OWNERSHIP: Only the requester may cancel a participation
            request (default: True)
    """

    # Statistics service
    stats_server_url: str = Field(
        default="http://localhost:9090",
        validation_alias="EWM_STATS_SERVER_URL",
        description="Base URL of the statistics service"
    )

    stats_app_name: str = Field(
        default="ewm-service",
        validation_alias="EWM_STATS_APP_NAME",
        description="Application name recorded with each hit"
    )

    stats_timeout: float = Field(
        default=5.0,
        validation_alias="EWM_STATS_TIMEOUT",
        gt=0,
        le=60,
    )

    # Participation requests
    # When disabled, any existing user may cancel any request (legacy behaviour)
    enforce_request_ownership: bool = Field(
        default=True,
        validation_alias="EWM_ENFORCE_REQUEST_OWNERSHIP",
        description="Reject cancellation of requests that belong to another user"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("stats_server_url")
    @classmethod
    def validate_stats_server_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("EWM_STATS_SERVER_URL must start with http:// or https://")
        return v.rstrip("/")


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
