"""
Main orchestrator for Beercan Bot.

This module wires the components together and owns the process lifecycle.

Responsibilities:
    1. Validate configuration and build the Telegram application
    2. Route every incoming update through the UpdateDispatcher
    3. Run the daily greeting task
    4. Treat a broken update stream as fatal (exit status 1)
    5. Shut everything down on SIGINT/SIGTERM

Flow:
    ┌─────────────────────────────────────────────────────────────┐
    │  PTB long polling → TypeHandler(Update) → dispatcher        │
    │      ├─ VaccineReminder.process()                           │
    │      └─ DeleteMonitor.offer()  (task spawned on first use)  │
    │  run_greeting() task, independent of updates                │
    └─────────────────────────────────────────────────────────────┘

Entry Point:
    python -m beercan.bot
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, TypeHandler

from beercan import __version__
from beercan.delete_monitor import DeleteMonitor
from beercan.dispatcher import UpdateDispatcher
from beercan.greeting import run_greeting
from beercan.models import MonitorConfig
from beercan.reminder import VaccineReminder
from beercan.telegram_api import MessagingApi
from config import settings as default_settings
from config.settings import Settings

# Configure logging
logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# Suppress noisy HTTP logs
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


class BeercanBot:
    """
    Main orchestrator that ties all components together.

    This class handles:
    - Component initialization
    - Update polling and routing
    - Greeting task coordination
    - Graceful shutdown
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the bot with empty component references."""
        self.settings = settings or default_settings
        self.app: Optional[Application] = None
        self.api: Optional[MessagingApi] = None
        self.dispatcher: Optional[UpdateDispatcher] = None
        self.monitor: Optional[DeleteMonitor] = None

        self._running = False
        self._fatal_error: Optional[Exception] = None
        self._greeting_task: Optional[asyncio.Task] = None

    def request_stop(self) -> None:
        """Make start() return; stop() does the actual cleanup."""
        self._running = False

    @property
    def failed(self) -> bool:
        """True once the update stream has failed."""
        return self._fatal_error is not None

    def _validate_config(self) -> None:
        """
        Validate required configuration at startup.

        Raises:
            ValueError: If required configuration is missing.
        """
        if not self.settings.telegram_bot_token:
            raise ValueError("Missing required configuration: TELEGRAM_BOT_TOKEN")

        if not (
            self.settings.reminder_enabled
            or self.settings.delete_monitor_enabled
            or self.settings.greeting_enabled
        ):
            logger.warning("No component is configured - the bot will only log updates")

        logger.info("Configuration validation passed")

    def build_components(self, api: MessagingApi) -> UpdateDispatcher:
        """
        Create the handlers enabled in settings and the dispatcher over them.

        Args:
            api: Messaging API shared by all handlers.

        Returns:
            Dispatcher routing to the enabled handlers.
        """
        s = self.settings
        self.api = api

        reminder = None
        if s.reminder_enabled:
            reminder = VaccineReminder(api)
            logger.info(
                f"Vaccine reminder enabled (user {s.reminder_user_id}, group {s.reminder_group_id})"
            )

        if s.delete_monitor_enabled:
            self.monitor = DeleteMonitor(
                api,
                MonitorConfig(
                    source_chat_id=s.delete_monitor_group_id,
                    forward_chat_id=s.delete_monitor_forward_group_id,
                    capacity=s.delete_monitor_window_size,
                    check_interval=s.delete_monitor_check_interval,
                    carry_over=s.delete_monitor_carry_over,
                    respawn=s.delete_monitor_respawn,
                ),
            )
            logger.info(
                f"Delete monitor enabled (user {s.delete_monitor_user_id}, "
                f"group {s.delete_monitor_group_id})"
            )

        self.dispatcher = UpdateDispatcher(
            reminder=reminder,
            reminder_user_id=s.reminder_user_id,
            reminder_group_id=s.reminder_group_id,
            monitor=self.monitor,
            monitor_user_id=s.delete_monitor_user_id,
            monitor_group_id=s.delete_monitor_group_id,
        )
        return self.dispatcher

    async def initialize(self) -> bool:
        """
        Initialize all bot components.

        Returns:
            True if all components initialized successfully, False otherwise.
        """
        logger.info("Initializing components...")

        try:
            self._validate_config()

            self.app = Application.builder().token(self.settings.telegram_bot_token).build()
            self.build_components(MessagingApi(self.app.bot))

            self.app.add_handler(TypeHandler(Update, self._on_update))
            self.app.add_error_handler(self._error_handler)

            logger.info("All components initialized successfully")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize components: {e}")
            return False

    async def start(self) -> None:
        """
        Start polling and background tasks, then block until stopped.

        The delete monitor task is not started here; it is spawned by the
        first message routed to it.
        """
        logger.info("Starting bot...")
        self._running = True

        # PTB v20+ manual start
        await self.app.initialize()
        await self.app.start()
        await self.app.updater.start_polling(error_callback=self._on_polling_error)
        logger.info("Telegram polling active")

        if self.settings.greeting_enabled:
            self._greeting_task = asyncio.create_task(
                run_greeting(
                    self.api,
                    self.settings.greeting_group_id,
                    self.settings.greeting_username,
                    self.settings.greeting_time,
                ),
                name="daily_greeting",
            )
            logger.info("Daily greeting task started")

        # Keep running until stopped
        while self._running:
            await asyncio.sleep(1)

    async def stop(self, reason: str = "Manual shutdown") -> None:
        """Gracefully stop the bot and all tasks."""
        logger.info(f"Stopping bot (Reason: {reason})...")
        self._running = False

        # Stop Telegram first so no update reaches a closed monitor
        if self.app:
            try:
                if self.app.updater and self.app.updater.running:
                    await self.app.updater.stop()
                if self.app.running:
                    await self.app.stop()
            except Exception as e:
                logger.debug(f"Telegram stop error (ignored): {e}")
            # Also needed when start() failed after initialize(); a no-op
            # for an application that was never initialized
            try:
                await self.app.shutdown()
            except Exception as e:
                logger.debug(f"Telegram shutdown error (ignored): {e}")

        if self.monitor:
            await self.monitor.close()

        if self._greeting_task and not self._greeting_task.done():
            self._greeting_task.cancel()
            try:
                await self._greeting_task
            except asyncio.CancelledError:
                pass

        logger.info("Bot stopped")

    # =========================================================================
    # Telegram callbacks
    # =========================================================================

    async def _on_update(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.dispatcher.dispatch(update)

    def _on_polling_error(self, error: TelegramError) -> None:
        """Failing to fetch updates is fatal for the whole process."""
        logger.critical(f"Update stream failed: {error}")
        self._fatal_error = error
        self._running = False

    async def _error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log exceptions raised while handling an update."""
        logger.error(f"Error while handling update: {context.error}")


async def main() -> int:
    """
    Main entry point for the bot.

    Returns:
        Process exit status: 0 on normal shutdown, 1 on failure.
    """
    logger.info("=" * 60)
    logger.info(f"Starting Beercan Bot v{__version__}")
    logger.info("=" * 60)

    bot = BeercanBot()

    if not await bot.initialize():
        logger.error("Failed to initialize bot - exiting")
        return 1

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Shutdown signal received")
        bot.request_stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    exit_code = 0
    try:
        await bot.start()
    except asyncio.CancelledError:
        logger.info("Bot cancelled")
    except Exception as e:
        logger.error(f"Bot error: {e}")
        exit_code = 1
    finally:
        await bot.stop("Update stream failed" if bot.failed else "Shutdown requested")

    if bot.failed:
        exit_code = 1

    logger.info("Bot shutdown complete")
    return exit_code


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
