"""
Update Dispatcher - route incoming updates to the handlers.

Each update is matched on sender id, chat id and message shape and handed
to zero or more handlers. Nothing here is fatal: handler failures are
logged and the next update is processed as usual.

Routing:
    ┌──────────────────────────────────────────────────────────────┐
    │  not a new message            → debug log, drop              │
    │  reminder user @ reminder grp → VaccineReminder (questions)  │
    │  monitored user @ monitor grp → DeleteMonitor.offer()        │
    │  anything else                → debug log, drop              │
    └──────────────────────────────────────────────────────────────┘
"""

import logging
from typing import TYPE_CHECKING, Optional

from telegram.constants import ChatType
from telegram.error import TelegramError

from beercan.delete_monitor import IntakeError
from beercan.models import CapturedMessage

if TYPE_CHECKING:
    from telegram import Message, Update

    from beercan.delete_monitor import DeleteMonitor
    from beercan.reminder import VaccineReminder

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = (ChatType.GROUP, ChatType.SUPERGROUP)


def is_group_message_from(message: "Message", user_id: int, group_id: int) -> bool:
    """Check that a message was sent by user_id in the group chat group_id."""
    return (
        message.from_user is not None
        and message.from_user.id == user_id
        and message.chat.id == group_id
        and message.chat.type in GROUP_CHAT_TYPES
    )


class UpdateDispatcher:
    """
    Stateless router; owns nothing but the configured ids.

    A handler left as None is disabled.

    Args:
        reminder: Vaccine reminder handler.
        reminder_user_id: Member whose questions get a reminder.
        reminder_group_id: Group the reminder works in.
        monitor: Delete monitor for monitor_group_id.
        monitor_user_id: Member whose messages are watched.
        monitor_group_id: Group being watched.
    """

    def __init__(
        self,
        reminder: Optional["VaccineReminder"] = None,
        reminder_user_id: Optional[int] = None,
        reminder_group_id: Optional[int] = None,
        monitor: Optional["DeleteMonitor"] = None,
        monitor_user_id: Optional[int] = None,
        monitor_group_id: Optional[int] = None,
    ) -> None:
        self.reminder = reminder
        self.reminder_user_id = reminder_user_id
        self.reminder_group_id = reminder_group_id
        self.monitor = monitor
        self.monitor_user_id = monitor_user_id
        self.monitor_group_id = monitor_group_id

    async def dispatch(self, update: "Update") -> None:
        """Route one update. Never raises for handler failures."""
        message = update.message
        if message is None:
            logger.debug(f"Other update kind: {update.update_id}")
            return

        routed = False

        if self.reminder is not None and is_group_message_from(
            message, self.reminder_user_id, self.reminder_group_id
        ):
            routed = True
            try:
                await self.reminder.process(message)
            except TelegramError as e:
                logger.error(f"Failed to send vaccine reminder: {e}")

        if self.monitor is not None and is_group_message_from(
            message, self.monitor_user_id, self.monitor_group_id
        ):
            routed = True
            try:
                await self.monitor.offer(CapturedMessage.from_message(message))
            except IntakeError as e:
                logger.error(f"Delete monitor rejected message {message.message_id}: {e}")

        if not routed:
            logger.debug(
                f"Other message: chat={message.chat.id} "
                f"from={message.from_user.id if message.from_user else None}"
            )
