"""Tests for Telegram alert delivery."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiogram.exceptions import TelegramNetworkError, TelegramRetryAfter
from aiogram.methods import SendMessage

from src.bot.notifier import TelegramNotifier, create_bot
from src.detector.exceptions import NotifierError


def _bot() -> MagicMock:
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.session.close = AsyncMock()
    return bot


def _method() -> SendMessage:
    return SendMessage(chat_id=1, text="x")


class TestTelegramNotifier:
    @pytest.mark.asyncio
    async def test_send(self) -> None:
        bot = _bot()
        notifier = TelegramNotifier(bot, "-100123")

        await notifier.send("<b>hi</b>")

        bot.send_message.assert_awaited_once_with(
            chat_id="-100123",
            text="<b>hi</b>",
            parse_mode="HTML",
            disable_web_page_preview=True,
        )
        assert notifier.total_sent == 1

    @pytest.mark.asyncio
    async def test_retries_once_then_succeeds(self) -> None:
        bot = _bot()
        bot.send_message.side_effect = [
            TelegramNetworkError(method=_method(), message="reset"),
            None,
        ]
        notifier = TelegramNotifier(bot, 1)

        with patch("src.bot.notifier.asyncio.sleep", new=AsyncMock()) as sleep:
            await notifier.send("text")

        assert bot.send_message.await_count == 2
        sleep.assert_awaited_once()
        assert notifier.total_sent == 1

    @pytest.mark.asyncio
    async def test_retry_after_honoured(self) -> None:
        bot = _bot()
        bot.send_message.side_effect = [
            TelegramRetryAfter(method=_method(), message="flood", retry_after=7),
            None,
        ]
        notifier = TelegramNotifier(bot, 1)

        with patch("src.bot.notifier.asyncio.sleep", new=AsyncMock()) as sleep:
            await notifier.send("text")

        sleep.assert_awaited_once_with(7.0)

    @pytest.mark.asyncio
    async def test_gives_up(self) -> None:
        bot = _bot()
        bot.send_message.side_effect = TimeoutError()
        notifier = TelegramNotifier(bot, 1)

        with patch("src.bot.notifier.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(NotifierError, match="after 2 attempts"):
                await notifier.send("text")

        assert bot.send_message.await_count == 2
        assert notifier.total_sent == 0

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        bot = _bot()
        await TelegramNotifier(bot, 1).close()
        bot.session.close.assert_awaited_once()


def test_create_bot_requires_token() -> None:
    with pytest.raises(RuntimeError, match="TELEGRAM_BOT_TOKEN"):
        create_bot("")
