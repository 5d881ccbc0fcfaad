"""Live `eth_subscribe("logs")` feed of Transfer events sent to the dead address.

Single WebSocket connection, one subscription. On disconnect or a rejected
subscription the client reconnects with exponential backoff; once
`max_resubscribe_attempts` consecutive attempts have failed it raises
SubscriptionError, which ends the watch loop.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from enum import Enum

import websockets
from loguru import logger
from websockets.exceptions import WebSocketException

from src.chain.abi import TRANSFER_EVENT_TOPIC, address_to_topic
from src.chain.exceptions import SubscriptionError
from src.chain.models import TransferLog


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ACTIVE = "active"


class LogSubscriber:
    """Streams TransferLog records for `Transfer(*, dead, *)`."""

    def __init__(
        self,
        ws_url: str,
        *,
        dead_address: str,
        reconnect_delay_sec: float = 3.0,
        max_reconnect_delay_sec: float = 60.0,
        max_resubscribe_attempts: int = 5,
    ) -> None:
        self._ws_url = ws_url
        self._dead_address = dead_address
        self._initial_delay = reconnect_delay_sec
        self._max_reconnect_delay = max_reconnect_delay_sec
        self._max_attempts = max_resubscribe_attempts
        self._connect = websockets.connect
        self._ws = None
        self._state = ConnectionState.DISCONNECTED
        self._running = False
        self._subscription_id: str | None = None
        self._message_count = 0
        self._reconnect_count = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def message_count(self) -> int:
        return self._message_count

    @property
    def reconnect_count(self) -> int:
        return self._reconnect_count

    def build_filter(self) -> dict:
        """topic0 = Transfer, topic1 = any sender, topic2 = dead address."""
        return {
            "topics": [
                TRANSFER_EVENT_TOPIC,
                None,
                address_to_topic(self._dead_address),
            ]
        }

    async def stream(self) -> AsyncIterator[TransferLog]:
        """Yield logs forever. Raises SubscriptionError when reconnects are exhausted."""
        self._running = True
        failures = 0
        delay = self._initial_delay

        while self._running:
            error: BaseException
            try:
                self._state = ConnectionState.CONNECTING
                async with self._connect(
                    self._ws_url,
                    ping_interval=30,
                    ping_timeout=10,
                    close_timeout=5,
                ) as ws:
                    self._ws = ws
                    self._state = ConnectionState.CONNECTED
                    self._subscription_id = await self._subscribe(ws)
                    self._state = ConnectionState.ACTIVE
                    failures = 0
                    delay = self._initial_delay
                    logger.info(
                        f"[SUB] Listening for transfers to {self._dead_address} "
                        f"(subscription {self._subscription_id})"
                    )

                    async for message in ws:
                        log = self._parse_notification(message)
                        if log is None:
                            continue
                        self._message_count += 1
                        yield log
                error = ConnectionError("subscription stream closed by node")
            except (WebSocketException, OSError, TimeoutError, SubscriptionError) as e:
                error = e
            finally:
                self._ws = None
                self._subscription_id = None
                self._state = ConnectionState.DISCONNECTED

            if not self._running:
                return

            failures += 1
            if failures > self._max_attempts:
                logger.error(f"[SUB] Subscription error: {error}")
                raise SubscriptionError(
                    f"log subscription lost after {failures} attempt(s): {error}"
                ) from error

            self._reconnect_count += 1
            logger.warning(
                f"[SUB] Subscription dropped ({type(error).__name__}: {error}), "
                f"resubscribing in {delay:.0f}s ({failures}/{self._max_attempts})"
            )
            await asyncio.sleep(delay)
            delay = min(delay * 2, self._max_reconnect_delay)

    async def _subscribe(self, ws) -> str:
        request = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "eth_subscribe",
            "params": ["logs", self.build_filter()],
        }
        await ws.send(json.dumps(request))
        raw = await ws.recv()
        try:
            response = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SubscriptionError(f"invalid subscribe response: {raw!r:.200}") from e

        if not isinstance(response, dict) or "error" in response or not response.get("result"):
            detail = response.get("error", response) if isinstance(response, dict) else response
            raise SubscriptionError(f"subscribe rejected: {detail}")
        return str(response["result"])

    def _parse_notification(self, message: str | bytes) -> TransferLog | None:
        try:
            data = json.loads(message)
        except json.JSONDecodeError:
            logger.debug("[SUB] Dropping non-JSON frame")
            return None

        if not isinstance(data, dict) or data.get("method") != "eth_subscription":
            return None
        params = data.get("params")
        if not isinstance(params, dict):
            logger.warning(f"[SUB] Malformed notification params: {params!r:.200}")
            return None
        if self._subscription_id and params.get("subscription") != self._subscription_id:
            return None

        result = params.get("result")
        if not isinstance(result, dict):
            logger.warning(f"[SUB] Malformed log notification: {result!r:.200}")
            return None
        try:
            log = TransferLog(
                transaction_hash=result["transactionHash"],
                block_number=_hex_to_int(result["blockNumber"]),
                topics=tuple(result.get("topics", [])),
                data=result.get("data", "0x"),
                address=result.get("address", ""),
                log_index=_hex_to_int(result.get("logIndex", 0)),
                removed=bool(result.get("removed", False)),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"[SUB] Malformed log notification: {e}")
            return None

        if log.removed:
            logger.debug(f"[SUB] Skipping reorged log in tx {log.transaction_hash}")
            return None
        return log

    async def stop(self) -> None:
        self._running = False
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        self._state = ConnectionState.DISCONNECTED


def _hex_to_int(value: str | int) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)
