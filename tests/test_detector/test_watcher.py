"""Tests for the watch loop."""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.chain.exceptions import SubscriptionError
from src.chain.models import TransferLog
from src.detector.exceptions import MalformedPoolError, NotABurnError, NotifierError
from src.detector.watcher import BurnWatcher


def _log(n: int) -> TransferLog:
    return TransferLog(
        transaction_hash=f"0x{n:064x}",
        block_number=100 + n,
        topics=(),
        data="0x",
    )


class FakeSource:
    """Yields the given items; exceptions among them are raised in place."""

    def __init__(self, items: list) -> None:
        self._items = items

    async def stream(self) -> AsyncIterator[TransferLog]:
        for item in self._items:
            if isinstance(item, BaseException):
                raise item
            yield item


def _alert() -> MagicMock:
    alert = MagicMock()
    alert.token_address = "0x2222222222222222222222222222222222222222"
    alert.metrics.burn_percentage = 100.0
    return alert


class TestBurnWatcher:
    @pytest.mark.asyncio
    async def test_loop_survives_per_event_errors(self) -> None:
        pipeline = MagicMock()
        pipeline.process = AsyncMock(
            side_effect=[
                NotABurnError("not a Uniswap LP"),
                MalformedPoolError("pair ABI call failed"),
                NotifierError("telegram down"),
                RuntimeError("bug"),
                _alert(),
            ]
        )
        watcher = BurnWatcher(FakeSource([_log(i) for i in range(5)]), pipeline)

        await watcher.run()

        assert pipeline.process.await_count == 5
        stats = watcher.stats
        assert stats.seen == 5
        assert stats.not_burns == 1
        assert stats.malformed == 1
        assert stats.send_failures == 1
        assert stats.errors == 1
        assert stats.burns == 1

    @pytest.mark.asyncio
    async def test_subscription_error_ends_run(self) -> None:
        pipeline = MagicMock()
        pipeline.process = AsyncMock(return_value=_alert())
        source = FakeSource([_log(1), SubscriptionError("lost"), _log(2)])
        watcher = BurnWatcher(source, pipeline)

        with pytest.raises(SubscriptionError, match="lost"):
            await watcher.run()

        pipeline.process.assert_awaited_once()
        assert watcher.stats.seen == 1

    @pytest.mark.asyncio
    async def test_events_handled_in_order(self) -> None:
        seen: list[str] = []

        async def _process(log: TransferLog):
            seen.append(log.transaction_hash)
            return _alert()

        pipeline = MagicMock()
        pipeline.process = AsyncMock(side_effect=_process)
        logs = [_log(i) for i in range(3)]

        await BurnWatcher(FakeSource(logs), pipeline).run()

        assert seen == [log.transaction_hash for log in logs]

    @pytest.mark.asyncio
    async def test_handle_returns_alert(self) -> None:
        alert = _alert()
        pipeline = MagicMock()
        pipeline.process = AsyncMock(return_value=alert)
        watcher = BurnWatcher(FakeSource([]), pipeline, stats_log_every=1)

        assert await watcher.handle(_log(0)) is alert
        assert watcher.stats.burns == 1
