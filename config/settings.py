"""
Centralized configuration for Beercan Bot.

This module uses Pydantic Settings to load and validate environment variables.
All bot configuration is centralized here to avoid scattered config files.

Usage:
    from config import settings
    print(settings.delete_monitor_window_size)

Components are switched off by leaving their ids unset:
    - Vaccine reminder needs REMINDER_USER_ID and REMINDER_GROUP_ID
    - Delete monitor needs DELETE_MONITOR_USER_ID, DELETE_MONITOR_GROUP_ID
      and DELETE_MONITOR_FORWARD_GROUP_ID
    - Daily greeting needs GREETING_GROUP_ID
"""

from datetime import time
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    # =========================================================================
    # Telegram
    # =========================================================================
    # Get your token from @BotFather. Required, checked at startup.
    telegram_bot_token: str = ""
    log_level: str = "INFO"

    # =========================================================================
    # Vaccine Reminder
    # =========================================================================
    reminder_user_id: Optional[int] = None
    reminder_group_id: Optional[int] = None

    # =========================================================================
    # Delete Monitor
    # =========================================================================
    delete_monitor_user_id: Optional[int] = None
    delete_monitor_group_id: Optional[int] = None
    # Private group the bot forwards probes into
    delete_monitor_forward_group_id: Optional[int] = None
    delete_monitor_window_size: int = Field(default=32, gt=0)
    delete_monitor_check_interval: float = Field(default=60, gt=0)  # seconds
    # Re-queue messages that survived a probe instead of retiring them
    delete_monitor_carry_over: bool = False
    # Restart the monitor task (with backoff) if it dies unexpectedly
    delete_monitor_respawn: bool = True

    # =========================================================================
    # Daily Greeting
    # =========================================================================
    greeting_time: time = time(17, 0, 0)
    greeting_username: Optional[str] = None
    greeting_group_id: Optional[int] = None

    @property
    def reminder_enabled(self) -> bool:
        return self.reminder_user_id is not None and self.reminder_group_id is not None

    @property
    def delete_monitor_enabled(self) -> bool:
        return None not in (
            self.delete_monitor_user_id,
            self.delete_monitor_group_id,
            self.delete_monitor_forward_group_id,
        )

    @property
    def greeting_enabled(self) -> bool:
        return self.greeting_group_id is not None


# Singleton instance for global settings
settings = Settings()
