"""
Pytest fixtures and configuration.

This module provides shared fixtures for all tests:
- Mock settings for testing without real credentials
- Mock messaging API standing in for Telegram
- Factories for captured messages and real PTB Message/Update objects
- Time control fixtures

Usage:
    def test_something(mock_api, make_captured):
        # fixtures are automatically injected
        pass
"""

from datetime import datetime
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
from freezegun import freeze_time
from telegram import Chat, Document, Message, PhotoSize, Update, User, Video
from telegram.constants import ChatType

from beercan.models import CapturedMessage, ContentKind


SOURCE_GROUP_ID = -222927743
FORWARD_GROUP_ID = -100500
MONITORED_USER_ID = 337229462
OTHER_USER_ID = 621478068


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "real: mark test as a real functionality test (not mock-based)"
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (>1s execution time)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """
    Provide mock settings for testing.

    Returns a MagicMock with all settings attributes and every component
    enabled.
    """
    settings = MagicMock()

    settings.telegram_bot_token = "test-token"
    settings.log_level = "INFO"

    settings.reminder_user_id = MONITORED_USER_ID
    settings.reminder_group_id = SOURCE_GROUP_ID
    settings.reminder_enabled = True

    settings.delete_monitor_user_id = MONITORED_USER_ID
    settings.delete_monitor_group_id = SOURCE_GROUP_ID
    settings.delete_monitor_forward_group_id = FORWARD_GROUP_ID
    settings.delete_monitor_window_size = 32
    settings.delete_monitor_check_interval = 60
    settings.delete_monitor_carry_over = False
    settings.delete_monitor_respawn = True
    settings.delete_monitor_enabled = True

    settings.greeting_time = datetime(2024, 1, 1, 17, 0, 0).time()
    settings.greeting_username = "dasha"
    settings.greeting_group_id = SOURCE_GROUP_ID
    settings.greeting_enabled = True

    return settings


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def mock_api():
    """Provide mock messaging API; forward() returns a fresh copy each call."""
    api = AsyncMock()
    copy_ids = count(1000)

    async def forward(message, destination, silent=True):
        copy = MagicMock()
        copy.chat_id = destination
        copy.message_id = next(copy_ids)
        copy.original_id = message.message_id
        return copy

    api.forward = AsyncMock(side_effect=forward)
    api.delete = AsyncMock()
    api.send_text = AsyncMock()
    api.reply_text = AsyncMock()
    return api


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def make_captured():
    """Factory for CapturedMessage with sensible defaults."""
    def _make(
        message_id: int,
        content: str | None = "hello",
        kind: ContentKind = ContentKind.TEXT,
        username: str | None = "parviz",
        first_name: str = "Parviz",
    ) -> CapturedMessage:
        return CapturedMessage(
            message_id=message_id,
            chat_id=SOURCE_GROUP_ID,
            author_id=MONITORED_USER_ID,
            author_first_name=first_name,
            author_username=username,
            kind=kind,
            content=content,
        )
    return _make


@pytest.fixture
def make_message():
    """
    Factory for real telegram.Message objects.

    Keyword arguments beyond the routing ones are passed to Message, so
    photo=..., caption=..., document=... etc. work as in the Bot API.
    """
    def _make(
        message_id: int = 1,
        user_id: int = MONITORED_USER_ID,
        chat_id: int = SOURCE_GROUP_ID,
        chat_type: str = ChatType.GROUP,
        username: str | None = "parviz",
        first_name: str = "Parviz",
        **content,
    ) -> Message:
        return Message(
            message_id=message_id,
            date=datetime(2024, 1, 15, 12, 0, 0),
            chat=Chat(id=chat_id, type=chat_type),
            from_user=User(id=user_id, first_name=first_name, is_bot=False, username=username),
            **content,
        )
    return _make


@pytest.fixture
def make_update():
    """Wrap a message in an Update."""
    update_ids = count(1)

    def _make(message: Message | None = None, **kwargs) -> Update:
        return Update(update_id=next(update_ids), message=message, **kwargs)
    return _make


@pytest.fixture
def photo():
    return [PhotoSize(file_id="photo-file", file_unique_id="photo-uid", width=90, height=90)]


@pytest.fixture
def document():
    return Document(file_id="doc-file", file_unique_id="doc-uid")


@pytest.fixture
def video():
    return Video(file_id="video-file", file_unique_id="video-uid", width=640, height=480, duration=3)


# =============================================================================
# Time Fixtures
# =============================================================================

@pytest.fixture
def frozen_time():
    """Freeze time at a specific datetime for testing."""
    with freeze_time("2025-11-26 14:30:00"):
        yield datetime(2025, 11, 26, 14, 30, 0)
