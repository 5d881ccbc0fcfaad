"""Telegram delivery of formatted alerts (aiogram 3.x Bot, send-only)."""

import asyncio

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramRetryAfter
from loguru import logger

from src.detector.exceptions import NotifierError

SEND_ATTEMPTS = 2
RETRY_DELAY_SEC = 2.0


def create_bot(token: str) -> Bot:
    if not token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN not configured")
    return Bot(token=token)


class TelegramNotifier:
    """Sends pre-formatted HTML messages to one chat."""

    def __init__(self, bot: Bot, chat_id: str | int) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._total_sent = 0

    @property
    def total_sent(self) -> int:
        return self._total_sent

    async def send(self, text: str) -> None:
        """Deliver `text`; raises NotifierError after the last failed attempt."""
        last_err: Exception | None = None
        for attempt in range(SEND_ATTEMPTS):
            try:
                await self._bot.send_message(
                    chat_id=self._chat_id,
                    text=text,
                    parse_mode="HTML",
                    disable_web_page_preview=True,
                )
                self._total_sent += 1
                return
            except TelegramRetryAfter as e:
                last_err = e
                delay = float(e.retry_after)
            except (TelegramAPIError, TimeoutError) as e:
                last_err = e
                delay = RETRY_DELAY_SEC
            if attempt < SEND_ATTEMPTS - 1:
                logger.debug(f"[ALERT] Telegram send failed ({last_err}), retry in {delay}s")
                await asyncio.sleep(delay)

        raise NotifierError(f"Telegram send failed after {SEND_ATTEMPTS} attempts: {last_err}")

    async def close(self) -> None:
        await self._bot.session.close()
