from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.environ.get("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Telegram
    telegram_bot_token: str | None = None
    telegram_api_base: str = "https://api.telegram.org"

    # Neynar / Warpcast
    warpcast_signer_uuid: str | None = None
    neynar_api_key: str | None = None
    neynar_cast_url: str = "https://api.neynar.com/v2/farcaster/cast"

    # Cast limits; the byte budget must leave room for "..."
    max_cast_bytes: int = Field(default=1020, ge=3)
    max_embeds: int = Field(default=2, ge=1, le=2)

    # HTTP server
    webhook_path: str = "/api/telegram"
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"


settings = Settings()
