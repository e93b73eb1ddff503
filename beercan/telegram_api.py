"""
Messaging API - thin async facade over python-telegram-bot's Bot.

Every component that talks to Telegram goes through MessagingApi, which
keeps the handlers testable with a single AsyncMock and keeps the
Bot API's quirks in one place.

Errors:
    All methods let telegram.error.TelegramError propagate; callers decide
    what is fatal. is_message_gone() is the one place that interprets an
    error's text.
"""

from typing import TYPE_CHECKING, Optional

from telegram import Message, ReplyParameters
from telegram.error import BadRequest

if TYPE_CHECKING:
    from telegram import Bot

    from beercan.models import CapturedMessage

# Bot API description returned by forwardMessage when the source message
# has been deleted. There is no dedicated error code, only HTTP 400.
MESSAGE_GONE_DESCRIPTION = "message to forward not found"


def is_message_gone(error: Exception) -> bool:
    """
    Check whether a forward failed because the source message was deleted.

    Args:
        error: Exception raised by MessagingApi.forward().

    Returns:
        True only for a BadRequest whose description says the message to
        forward was not found.
    """
    if not isinstance(error, BadRequest):
        return False
    return MESSAGE_GONE_DESCRIPTION in str(error.message).lower()


class MessagingApi:
    """
    The subset of the Bot API the handlers use.

    Args:
        bot: Initialized telegram.Bot (usually Application.bot).
    """

    def __init__(self, bot: "Bot") -> None:
        self.bot = bot

    async def forward(
        self,
        message: "CapturedMessage",
        destination: int,
        silent: bool = True,
    ) -> Message:
        """
        Forward a captured message.

        Args:
            message: Message to forward, identified by chat and message id.
            destination: Target chat id.
            silent: Suppress the notification in the destination chat.

        Returns:
            The forwarded copy.
        """
        return await self.bot.forward_message(
            chat_id=destination,
            from_chat_id=message.chat_id,
            message_id=message.message_id,
            disable_notification=silent,
        )

    async def delete(self, sent: Message) -> None:
        """Delete a message the bot sent or forwarded."""
        await self.bot.delete_message(chat_id=sent.chat_id, message_id=sent.message_id)

    async def send_text(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> Message:
        """
        Send a text message.

        Args:
            chat_id: Target chat id.
            text: Message text.
            parse_mode: telegram.constants.ParseMode value, or None for plain.

        Returns:
            The sent message.
        """
        return await self.bot.send_message(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
        )

    async def reply_text(self, message: Message, text: str) -> Message:
        """Reply to a message in its own chat, quoting it."""
        return await self.bot.send_message(
            chat_id=message.chat_id,
            text=text,
            reply_parameters=ReplyParameters(message_id=message.message_id),
        )

