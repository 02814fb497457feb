"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# Upstream serves a zip archive under a .txt name.
DICTIONARY_URL = "https://whisper.wisdom-guild.net/apps/autodic/d/JT/MS/JE/DICALL_JT_MS_JE_2.txt"

ATTACHMENT_LIMIT_BYTES = 25 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Discord
    discord_public_key: str = ""
    discord_application_id: str = ""
    discord_bot_token: str = ""
    discord_api_base: str = "https://discord.com/api/v10"

    # Queue
    job_queue_url: str = ""
    aws_region: str = ""

    # Worker
    download_timeout_seconds: float = 60.0
    attachment_limit_bytes: int = ATTACHMENT_LIMIT_BYTES
    dedup_capacity: int = 1024
    transcode_batch_lines: int = 5000
    progress_interval_lines: int = 50000
    deliver_original_text: bool = False
    scratch_root: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
