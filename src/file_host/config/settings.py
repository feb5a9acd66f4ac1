# src/file_host/config/settings.py
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class DiscordConfig:
    """
    Discord credentials handed to the coordinators.

    A backend counts as enabled purely from the presence of its fields:
    the bot needs a token (and a channel to upload into), the webhook needs its URL.
    """
    bot_token: Optional[str] = None
    channel_id: Optional[str] = None
    webhook_url: Optional[str] = None

    @property
    def bot_upload_enabled(self) -> bool:
        return bool(self.bot_token and self.channel_id)

    @property
    def webhook_enabled(self) -> bool:
        return bool(self.webhook_url)


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from file_host.config.settings import get_settings
        settings = get_settings()
        config = settings.discord_config
    """

    # Application Settings
    app_name: str = Field(
        default="file-host",
        description="Application name"
    )

    # Discord Configuration
    discord_bot_token: Optional[str] = Field(
        default=None,
        description="Bot token for the privileged Discord API"
    )

    discord_channel_id: Optional[str] = Field(
        default=None,
        description="Channel the bot uploads attachments into"
    )

    discord_webhook_url: Optional[str] = Field(
        default=None,
        description="Webhook URL, may carry a thread_id query parameter"
    )

    discord_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout applied to every Discord HTTP call"
    )

    # R2 / S3-compatible bucket
    r2_bucket_name: Optional[str] = Field(
        default=None,
        description="Bucket for r2:-prefixed files; unset disables the bucket"
    )

    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="S3-compatible endpoint, e.g. https://<account>.r2.cloudflarestorage.com"
    )

    r2_access_key_id: Optional[str] = Field(default=None)

    r2_secret_access_key: Optional[str] = Field(default=None)

    r2_region: str = Field(
        default="auto",
        description="Region name passed to boto3"
    )

    # Metadata index
    metadata_db_path: str = Field(
        default="file_host.db",
        description="SQLite file holding the metadata records"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator(
        "discord_bot_token",
        "discord_channel_id",
        "discord_webhook_url",
        "r2_bucket_name",
        "r2_endpoint_url",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty env vars as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def discord_config(self) -> DiscordConfig:
        return DiscordConfig(
            bot_token=self.discord_bot_token,
            channel_id=self.discord_channel_id,
            webhook_url=self.discord_webhook_url,
        )

    @property
    def bucket_enabled(self) -> bool:
        return bool(self.r2_bucket_name)

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
