"""
Real Functionality Tests - Daily Greeting.

Tests the greeting loop with the clock frozen and sleeps skipped:
- Sleeps until the next occurrence, then greets
- Keeps going day after day
- Stops for good on the first send failure

Mocks: MessagingApi, asyncio.sleep
Real: run_greeting loop, schedule arithmetic
"""

import asyncio
from datetime import time
from unittest.mock import AsyncMock, patch

import pytest
from freezegun import freeze_time
from telegram.error import NetworkError

from beercan.greeting import run_greeting

from tests.conftest import SOURCE_GROUP_ID


@pytest.mark.real
@pytest.mark.asyncio
class TestRunGreeting:
    """Tests for the run_greeting task."""

    async def test_greets_until_send_fails(self, mock_api):
        mock_api.send_text.side_effect = [None, None, NetworkError("Bad Gateway")]
        sleep = AsyncMock()

        with freeze_time("2024-01-15 16:59:59"), patch("beercan.greeting.asyncio.sleep", sleep):
            await run_greeting(mock_api, SOURCE_GROUP_ID, "dasha", time(17, 0, 0))

        assert mock_api.send_text.await_count == 3
        assert sleep.await_count == 3
        assert sleep.await_args_list[0].args[0] == 1.0
        mock_api.send_text.assert_awaited_with(SOURCE_GROUP_ID, "@dasha, доброе утро!")

    async def test_sleeps_full_day_when_started_on_time(self, mock_api):
        mock_api.send_text.side_effect = NetworkError("Bad Gateway")
        sleep = AsyncMock()

        with freeze_time("2024-01-15 17:00:00"), patch("beercan.greeting.asyncio.sleep", sleep):
            await run_greeting(mock_api, SOURCE_GROUP_ID, None, time(17, 0, 0))

        sleep.assert_awaited_once_with(24 * 60 * 60)
        mock_api.send_text.assert_awaited_once_with(SOURCE_GROUP_ID, "Доброе утро!")

    async def test_cancel_while_sleeping(self, mock_api):
        task = asyncio.create_task(
            run_greeting(mock_api, SOURCE_GROUP_ID, "dasha", time(17, 0, 0))
        )
        await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        mock_api.send_text.assert_not_awaited()
