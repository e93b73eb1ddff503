"""
Daily Greeting - say hello to someone at the same time every day.

A single long-lived task: compute the next occurrence of the configured
time of day, sleep until then, send the greeting, repeat. Times are local
wall-clock times.

Configuration (via .env):
    GREETING_TIME: Time of day, HH:MM:SS (default 17:00:00)
    GREETING_USERNAME: Telegram username to mention (without @)
    GREETING_GROUP_ID: Chat to greet in
"""

import asyncio
import logging
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING, Optional

from telegram.error import TelegramError

if TYPE_CHECKING:
    from beercan.telegram_api import MessagingApi

logger = logging.getLogger(__name__)

GREETING_TEXT = "доброе утро!"


def next_fire_delay(now: datetime, at: time) -> timedelta:
    """
    Time until the next occurrence of a time of day, strictly after now.

    If now is exactly at (or past) today's occurrence, tomorrow's is used.

    Args:
        now: Current local datetime.
        at: Target time of day.

    Returns:
        Positive delay, at most 24 hours.

    Example:
        >>> next_fire_delay(datetime(2024, 1, 15, 16, 59, 59), time(17))
        datetime.timedelta(seconds=1)
    """
    target = datetime.combine(now.date(), at)
    if target <= now:
        target += timedelta(days=1)
    return target - now


def build_greeting(username: Optional[str]) -> str:
    if username:
        return f"@{username.lstrip('@')}, {GREETING_TEXT}"
    return GREETING_TEXT.capitalize()


async def run_greeting(
    api: "MessagingApi",
    chat_id: int,
    username: Optional[str],
    at: time,
) -> None:
    """
    Greet forever at the configured time of day.

    Stops for good on the first send failure; there is no retry.

    Args:
        api: Messaging API.
        chat_id: Chat to greet in.
        username: Username to mention, or None for a plain greeting.
        at: Time of day to fire at.
    """
    logger.info(f"Daily greeting scheduled at {at.isoformat()} for chat {chat_id}")

    while True:
        delay = next_fire_delay(datetime.now(), at)
        logger.debug(f"Next greeting in {delay}")
        await asyncio.sleep(delay.total_seconds())

        try:
            await api.send_text(chat_id, build_greeting(username))
        except TelegramError as e:
            logger.error(f"Failed to send daily greeting, stopping greeting task: {e}")
            return

        logger.info(f"Sent daily greeting to chat {chat_id}")
