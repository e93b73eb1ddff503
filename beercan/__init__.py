"""
Beercan Bot - Telegram group bot with a few house jokes.

The bot listens to a group chat and reacts to a handful of patterns:
nagging one member about vaccination, catching another member deleting
messages, and greeting someone every day at a fixed time.

Architecture:
    Update stream (PTB long polling)
        -> dispatcher: routes each update to the matching handlers
            -> reminder: replies to questions with a random phrase
            -> delete_monitor: sliding window, periodic forward-and-delete
               probe, public call-out when a message has vanished
    greeting: independent daily timer task

Modules:
    bot: Main orchestrator and entry point
    dispatcher: Update routing
    classifier: Question detection and reply phrase generation
    reminder: Vaccine reminder handler
    delete_monitor: Delete-detection monitor
    window: Bounded FIFO of captured messages
    models: Captured message snapshot and monitor configuration
    greeting: Scheduled daily greeting
    telegram_api: Thin messaging API over python-telegram-bot

Entry Point:
    python -m beercan.bot
"""

__version__ = "0.1.0"
