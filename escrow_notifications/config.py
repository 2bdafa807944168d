"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DUPLICATE_POLICIES = ("allow", "replace", "ignore")


class Settings(BaseSettings):
    """Notification layer configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to stamp notifications with their time of receipt",
    )
    notification_duplicate_policy: str = Field(
        default="allow",
        description=(
            "How the store treats a notification whose id is already present: "
            "allow, replace or ignore"
        ),
    )
    payment_currency: str = Field(
        default="KES",
        description="Currency label interpolated into payment notification messages",
        min_length=1,
    )
    subscribe_extended_events: bool = Field(
        default=False,
        description="Also route dispute and delivery updates from the upstream connection",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to reach the HTTP surface",
    )

    @field_validator("notification_duplicate_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value: object) -> str:
        policy = str(value or "allow").strip().lower()
        if policy not in DUPLICATE_POLICIES:
            raise ValueError(
                "NOTIFICATION_DUPLICATE_POLICY must be one of: "
                + ", ".join(DUPLICATE_POLICIES)
            )
        return policy


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["DUPLICATE_POLICIES", "Settings", "get_settings", "reset_settings_cache"]
