"""Entry point for the LP burn watcher."""

import asyncio
import signal
import sys

from loguru import logger

from config.settings import Settings
from src.bot.notifier import TelegramNotifier, create_bot
from src.chain.exceptions import SubscriptionError
from src.chain.reader import ChainReader
from src.chain.subscriber import LogSubscriber
from src.detector.metrics import MetricsCalculator
from src.detector.pipeline import BurnPipeline
from src.detector.verifier import BurnVerifier
from src.detector.watcher import BurnWatcher
from src.enrichment.geckoterminal.client import GeckoTerminalClient
from src.enrichment.goplus.client import GoPlusClient
from src.utils.logger import setup_logger


async def main(settings: Settings | None = None) -> int:
    settings = settings or Settings()
    setup_logger(level=settings.log_level, json_logs=settings.json_logs)

    missing = settings.missing_required()
    if missing:
        logger.error(f"Missing required settings: {', '.join(missing)}")
        return 1

    reader = ChainReader(
        settings.eth_rpc_url,
        timeout_sec=settings.rpc_timeout_sec,
        max_retries=settings.rpc_max_retries,
        retry_base_delay_sec=settings.rpc_retry_base_delay_sec,
    )
    if not await reader.is_connected():
        logger.error(f"Failed to connect to Ethereum node at {settings.eth_rpc_url}")
        await reader.close()
        return 1
    logger.info("Connected to Ethereum node")

    notifier = TelegramNotifier(create_bot(settings.telegram_bot_token), settings.telegram_chat_id)
    goplus = (
        GoPlusClient(chain_id=settings.chain_id, max_rps=settings.goplus_max_rps)
        if settings.enable_goplus
        else None
    )
    gecko = (
        GeckoTerminalClient(network=settings.gecko_network, max_rps=settings.geckoterminal_max_rps)
        if settings.enable_geckoterminal
        else None
    )

    subscriber = LogSubscriber(
        settings.eth_ws_url,
        dead_address=settings.dead_address,
        reconnect_delay_sec=settings.ws_reconnect_delay_sec,
        max_reconnect_delay_sec=settings.ws_max_reconnect_delay_sec,
        max_resubscribe_attempts=settings.ws_max_resubscribe_attempts,
    )
    pipeline = BurnPipeline(
        BurnVerifier(
            reader,
            dead_address=settings.dead_address,
            weth_address=settings.weth_address,
        ),
        MetricsCalculator(reader),
        notifier,
        goplus=goplus,
        gecko=gecko,
        explorer_url=settings.explorer_url,
    )
    watcher = BurnWatcher(subscriber, pipeline, stats_log_every=settings.stats_log_every)
    logger.info("LP burn detector started")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    exit_code = 0
    watch_task = asyncio.create_task(watcher.run())
    stop_task = asyncio.create_task(shutdown_event.wait())
    try:
        done, pending = await asyncio.wait(
            [watch_task, stop_task], return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if watch_task in done:
            try:
                watch_task.result()
            except SubscriptionError as e:
                logger.error(f"Watch loop terminated: {e}")
                exit_code = 1
    finally:
        await subscriber.stop()
        for client in (goplus, gecko):
            if client is not None:
                await client.close()
        await notifier.close()
        await reader.close()
        logger.info(f"Shutdown complete ({watcher.stats.burns} burns alerted)")

    return exit_code


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
