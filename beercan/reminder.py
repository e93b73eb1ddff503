"""
Vaccine Reminder - answer a member's questions with a question of our own.

Whenever the configured member asks anything in the configured group, the
bot replies asking whether they finally got vaccinated.
"""

import logging
import random
from typing import TYPE_CHECKING, Optional

from beercan.classifier import build_phrase, is_question

if TYPE_CHECKING:
    from telegram import Message

    from beercan.telegram_api import MessagingApi

logger = logging.getLogger(__name__)


class VaccineReminder:
    """
    Stateless reminder handler.

    Args:
        api: Messaging API used to reply.
        rng: Random generator for phrase building (tests pass a seeded one).
    """

    def __init__(self, api: "MessagingApi", rng: Optional[random.Random] = None) -> None:
        self.api = api
        self.rng = rng

    def matches(self, message: "Message") -> bool:
        """Text messages that read as a question."""
        return message.text is not None and is_question(message.text)

    async def process(self, message: "Message") -> bool:
        """
        Reply to the message if it is a question.

        Returns:
            True if a reply was sent.

        Raises:
            telegram.error.TelegramError: Sending the reply failed.
        """
        if not self.matches(message):
            return False

        phrase = build_phrase(self.rng)
        await self.api.reply_text(message, phrase)
        logger.info(f"Sent vaccine reminder in reply to message {message.message_id}")
        return True
