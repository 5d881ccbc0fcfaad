"""The single-consumer watch loop."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from src.chain.models import TransferLog
from src.detector.exceptions import MalformedPoolError, NotABurnError, NotifierError
from src.detector.models import BurnAlert
from src.detector.pipeline import BurnPipeline


class LogSource(Protocol):
    def stream(self) -> AsyncIterator[TransferLog]: ...


@dataclass
class WatcherStats:
    seen: int = 0
    burns: int = 0
    not_burns: int = 0
    malformed: int = 0
    send_failures: int = 0
    errors: int = 0


class BurnWatcher:
    """Pulls logs one at a time and runs each through the pipeline.

    Per-event failures are logged and the loop continues. Only a
    SubscriptionError from the log source ends `run`.
    """

    def __init__(
        self,
        source: LogSource,
        pipeline: BurnPipeline,
        *,
        stats_log_every: int = 100,
    ) -> None:
        self._source = source
        self._pipeline = pipeline
        self._stats_log_every = stats_log_every
        self.stats = WatcherStats()

    async def run(self) -> None:
        logger.info("[WATCH] Listening for transfer events to dead address...")
        async for log in self._source.stream():
            await self.handle(log)

    async def handle(self, log: TransferLog) -> BurnAlert | None:
        self.stats.seen += 1
        tx_hash = log.transaction_hash
        logger.debug(f"[WATCH] Block {log.block_number}: transfer to dead address in tx {tx_hash}")

        alert: BurnAlert | None = None
        try:
            alert = await self._pipeline.process(log)
        except MalformedPoolError as e:
            self.stats.malformed += 1
            logger.warning(f"[VERIFY] Malformed LP candidate {tx_hash}: {e.reason}")
        except NotABurnError as e:
            self.stats.not_burns += 1
            logger.info(f"[VERIFY] Not an LP burn {tx_hash}: {e.reason}")
        except NotifierError as e:
            self.stats.send_failures += 1
            logger.error(f"[ALERT] {tx_hash}: {e}")
        except Exception:
            self.stats.errors += 1
            logger.exception(f"[WATCH] Unexpected error while processing {tx_hash}")
        else:
            self.stats.burns += 1
            logger.info(
                f"[WATCH] LP burn detected and alert sent: {tx_hash} "
                f"(token {alert.token_address}, {alert.metrics.burn_percentage:.2f}%)"
            )

        if self._stats_log_every and self.stats.seen % self._stats_log_every == 0:
            s = self.stats
            logger.info(
                f"[WATCH] Stats: {s.seen} transfers, {s.burns} burns, "
                f"{s.not_burns} skipped, {s.malformed} malformed, "
                f"{s.send_failures} send failures, {s.errors} errors"
            )
        return alert
