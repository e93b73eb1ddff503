"""
Delete Monitor - catch a group member deleting their own messages.

Telegram does not tell bots when a message is deleted. The monitor keeps a
window of the member's recent messages and periodically probes each one by
forwarding it to a private group. A forward that fails with "message to
forward not found" means the original is gone, so the bot calls the author
out in the source group. Successful probes are cleaned up right away.

Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │  dispatcher ──offer()──► intake (rendezvous, 1 item)        │
    │                               │                             │
    │  background task: wait for whichever comes first            │
    │    new message  → append to window (evict oldest)           │
    │    close marker → exit                                      │
    │    timer fired  → drain pass, then re-arm timer             │
    │                                                             │
    │  drain pass, oldest → newest:                               │
    │    forward ok        → delete the copy, keep or retire      │
    │    "not found"       → public call-out in source group      │
    │    any other error   → log, stop the pass                   │
    └─────────────────────────────────────────────────────────────┘

Timing:
    The timer is re-armed only after a pass completes, so the interval is
    measured from the end of the previous pass and passes never overlap.
    While a pass runs the task does not read the intake; offer() callers
    wait, which throttles the dispatcher.

Configuration (via .env):
    DELETE_MONITOR_WINDOW_SIZE: Messages kept in the window
    DELETE_MONITOR_CHECK_INTERVAL: Seconds between drain passes
    DELETE_MONITOR_CARRY_OVER: Keep probed messages for the next pass
    DELETE_MONITOR_RESPAWN: Restart the task after a crash
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from telegram.constants import MessageLimit, ParseMode
from telegram.error import TelegramError
from telegram.helpers import escape_markdown

from beercan.models import CapturedMessage, MonitorConfig
from beercan.telegram_api import is_message_gone
from beercan.window import MessageWindow

if TYPE_CHECKING:
    from beercan.telegram_api import MessagingApi

logger = logging.getLogger(__name__)

CALL_OUT_SUFFIX = " , вот злодей, удалил сообщение!"
QUOTE_OPEN = "\n```\n"
QUOTE_CLOSE = "\n```"
QUOTE_ELLIPSIS = "…"

# Put on the intake by close(); the task exits when it reads it.
_CLOSE = object()


class IntakeError(Exception):
    """Base class for failures to hand a message to the monitor."""
    pass


class MonitorGone(IntakeError):
    """Raised when the background task is no longer accepting messages."""
    pass


@dataclass
class DrainReport:
    """Outcome of one drain pass."""
    probed: int = 0
    deleted: int = 0
    aborted: bool = False


def build_call_out(message: CapturedMessage) -> str:
    """
    Build the public call-out for a deleted message (MarkdownV2).

    Long quotes are cut and end with an ellipsis so the whole call-out
    stays within Telegram's message length limit.

    Args:
        message: The message that vanished.

    Returns:
        "<name> , вот злодей, удалил сообщение!" followed by a fenced quote
        of the original text or caption when there was one.
    """
    name = escape_markdown(message.author_display_name, version=2)
    text = name + escape_markdown(CALL_OUT_SUFFIX, version=2)
    quote = message.quotable_text
    if quote:
        budget = MessageLimit.MAX_TEXT_LENGTH - len(text) - len(QUOTE_OPEN) - len(QUOTE_CLOSE)
        text += QUOTE_OPEN + _fit_quote(quote, budget) + QUOTE_CLOSE
    return text


def _fit_quote(quote: str, budget: int) -> str:
    """Escape a quote for a pre block, cutting it to at most budget characters."""
    escaped = escape_markdown(quote, version=2, entity_type="pre")
    if len(escaped) <= budget:
        return escaped

    logger.warning(f"Call-out quote truncated (original length: {len(quote)}, limit: {budget})")
    # Cut before escaping so no escape sequence is split
    cut = budget - len(QUOTE_ELLIPSIS)
    while cut > 0:
        escaped = escape_markdown(quote[:cut], version=2, entity_type="pre") + QUOTE_ELLIPSIS
        if len(escaped) <= budget:
            return escaped
        # Each raw character escapes to at most two
        cut -= (len(escaped) - budget + 1) // 2
    return QUOTE_ELLIPSIS


class DeleteMonitor:
    """
    Watches one source group for deleted messages.

    The background task is spawned lazily by the first offer() and lives
    until close() or process exit.

    Args:
        api: Messaging API used for probes and call-outs.
        config: Monitor configuration.
    """

    def __init__(self, api: "MessagingApi", config: MonitorConfig) -> None:
        self.api = api
        self.config = config
        self.window = MessageWindow(config.capacity)

        self._task: Optional[asyncio.Task] = None
        self._intake: Optional[asyncio.Queue] = None
        self._closed = False
        self._died_at: Optional[float] = None
        self._restarts = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # =========================================================================
    # Intake
    # =========================================================================

    async def offer(self, message: CapturedMessage) -> None:
        """
        Hand a message to the background task.

        Returns once the task has taken the message into its window.

        Raises:
            MonitorGone: The task has stopped and cannot be (re)started yet.
        """
        self._ensure_running()
        task, intake = self._task, self._intake

        await intake.put(message)
        accepted = asyncio.ensure_future(intake.join())
        done, _ = await asyncio.wait({accepted, task}, return_when=asyncio.FIRST_COMPLETED)
        if accepted not in done:
            accepted.cancel()
            raise MonitorGone(
                f"Delete monitor for chat {self.config.source_chat_id} stopped "
                f"before accepting message {message.message_id}"
            )

    async def close(self) -> None:
        """Close the intake and wait for the background task to finish."""
        self._closed = True
        if not self.running:
            return
        await self._intake.put(_CLOSE)
        try:
            await self._task
        except Exception as e:
            logger.debug(f"Delete monitor ended with error on close: {e}")

    def _ensure_running(self) -> None:
        """Spawn the task on first use; respawn it after a crash if allowed."""
        if self._closed:
            raise MonitorGone("Delete monitor intake is closed")
        if self._task is None:
            self._spawn()
            return
        if not self._task.done():
            return

        if not self.config.respawn:
            raise MonitorGone(
                f"Delete monitor for chat {self.config.source_chat_id} is not running"
            )

        wait = self._respawn_delay() - (time.monotonic() - (self._died_at or 0.0))
        if wait > 0:
            raise MonitorGone(
                f"Delete monitor for chat {self.config.source_chat_id} crashed, "
                f"respawn in {wait:.0f}s"
            )

        self._restarts += 1
        logger.warning(
            f"Respawning delete monitor for chat {self.config.source_chat_id} "
            f"(restart #{self._restarts})"
        )
        self._spawn()

    def _respawn_delay(self) -> float:
        """min(base * 2**restarts, max), same curve as exponential backoff."""
        return min(
            self.config.respawn_base_delay * (2 ** self._restarts),
            self.config.respawn_max_delay,
        )

    def _spawn(self) -> None:
        self._intake = asyncio.Queue(maxsize=1)
        self._task = asyncio.create_task(
            self._run(self._intake),
            name=f"delete_monitor:{self.config.source_chat_id}",
        )
        self._task.add_done_callback(self._on_task_done)
        logger.info(
            f"Delete monitor started for chat {self.config.source_chat_id} "
            f"(window: {self.config.capacity}, interval: {self.config.check_interval}s)"
        )

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._died_at = time.monotonic()
        if task.cancelled():
            logger.info(f"Delete monitor for chat {self.config.source_chat_id} cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Delete monitor for chat {self.config.source_chat_id} crashed: {error!r}"
            )

    # =========================================================================
    # Background task
    # =========================================================================

    async def _run(self, intake: asyncio.Queue) -> None:
        """Event loop of the monitor: new messages, close marker, drain timer."""
        timer: Optional[asyncio.Task] = None
        getter: Optional[asyncio.Task] = None

        try:
            while True:
                if timer is None:
                    timer = asyncio.ensure_future(asyncio.sleep(self.config.check_interval))
                if getter is None:
                    getter = asyncio.ensure_future(intake.get())

                done, _ = await asyncio.wait({timer, getter}, return_when=asyncio.FIRST_COMPLETED)

                if getter in done:
                    item = getter.result()
                    getter = None
                    if item is _CLOSE:
                        intake.task_done()
                        logger.info(f"Delete monitor for chat {self.config.source_chat_id} closed")
                        return
                    evicted = self.window.append(item)
                    intake.task_done()
                    if evicted is not None:
                        logger.debug(f"Evicted message {evicted.message_id} from window")

                if timer in done:
                    timer = None
                    if getter is not None:
                        getter.cancel()
                        getter = None
                    await self.drain()
        finally:
            for pending in (timer, getter):
                if pending is not None and not pending.done():
                    pending.cancel()

    # =========================================================================
    # Drain pass
    # =========================================================================

    async def drain(self) -> DrainReport:
        """
        Probe every message in the window, oldest first.

        Returns:
            DrainReport with probe and detection counts.
        """
        generation = self.window.take_all()
        report = DrainReport()
        retained: list[CapturedMessage] = []

        if generation:
            logger.debug(f"Drain pass over {len(generation)} message(s)")

        for index, message in enumerate(generation):
            report.probed += 1
            try:
                forwarded = await self.api.forward(message, self.config.forward_chat_id)
            except TelegramError as e:
                if is_message_gone(e):
                    report.deleted += 1
                    await self._call_out(message)
                    continue
                logger.error(
                    f"Failed to forward message {message.message_id}, "
                    f"stopping drain pass: {e}"
                )
                # Unprobed messages go back regardless of carry-over
                retained.extend(generation[index:])
                report.aborted = True
                break

            try:
                await self.api.delete(forwarded)
            except TelegramError as e:
                logger.warning(f"Failed to delete forwarded copy of {message.message_id}: {e}")

            if self.config.carry_over:
                retained.append(message)

        self.window.restore(retained)
        if not report.aborted:
            self._restarts = 0
        return report

    async def _call_out(self, message: CapturedMessage) -> None:
        """Announce a deleted message in the source group."""
        logger.info(
            f"Message {message.message_id} by {message.author_display_name} "
            f"was deleted in chat {message.chat_id}"
        )
        try:
            await self.api.send_text(
                self.config.source_chat_id,
                build_call_out(message),
                parse_mode=ParseMode.MARKDOWN_V2,
            )
        except TelegramError as e:
            logger.error(f"Failed to post deletion call-out: {e}")
