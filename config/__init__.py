"""
Configuration package for Beercan Bot.

Modules:
    settings: Centralized configuration using Pydantic Settings
"""

from config.settings import settings, Settings

__all__ = ["settings", "Settings"]
