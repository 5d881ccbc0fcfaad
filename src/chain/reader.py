"""Read-only chain access over HTTP JSON-RPC (web3.py async).

Every call gets a deadline and a bounded retry with exponential backoff for
transient network errors. Contract reverts and decode errors are not retried.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound, Web3Exception

from src.chain.abi import ERC20_PAIR_ABI
from src.chain.exceptions import ChainReadError
from src.chain.models import ChainTransaction

T = TypeVar("T")

# AsyncHTTPProvider re-raises aiohttp errors (disconnects, 429/5xx) unwrapped
TRANSIENT_ERRORS = (TimeoutError, ConnectionError, OSError, aiohttp.ClientError)


class ChainReader:
    """Thin façade over an RPC endpoint: tx lookup and view calls."""

    def __init__(
        self,
        rpc_url: str = "",
        *,
        timeout_sec: float = 15.0,
        max_retries: int = 3,
        retry_base_delay_sec: float = 0.5,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._timeout_sec = timeout_sec
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay_sec

    async def is_connected(self) -> bool:
        try:
            return bool(await self._w3.is_connected())
        except TRANSIENT_ERRORS:
            return False

    async def close(self) -> None:
        provider = self._w3.provider
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()

    async def _with_retry(self, label: str, factory: Callable[[], Awaitable[T]]) -> T:
        for attempt in range(self._max_retries + 1):
            try:
                return await asyncio.wait_for(factory(), timeout=self._timeout_sec)
            except TRANSIENT_ERRORS as e:
                if attempt < self._max_retries:
                    delay = self._retry_base_delay * (2 ** attempt)
                    logger.debug(f"[RPC] {label}: {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                raise ChainReadError(
                    f"{label} failed after {attempt + 1} attempts: {type(e).__name__}: {e}"
                ) from e
            except (Web3Exception, ValueError) as e:
                raise ChainReadError(f"{label} failed: {e}") from e
        raise ChainReadError(f"{label} failed")

    async def get_transaction(self, tx_hash: str) -> ChainTransaction | None:
        """Fetch a transaction by hash. None if the node does not know it."""

        async def _fetch() -> Any:
            try:
                return await self._w3.eth.get_transaction(tx_hash)
            except TransactionNotFound:
                return None

        tx = await self._with_retry(f"getTransaction {tx_hash[:12]}", _fetch)
        if tx is None:
            return None

        to = tx.get("to")
        return ChainTransaction(
            hash=tx_hash,
            to=str(to) if to else None,
            input=bytes(tx.get("input") or b""),
            block_number=tx.get("blockNumber"),
        )

    async def call(self, address: str, fn_name: str, *args: Any) -> Any:
        """Execute a view function from the shared ABI against `address`."""
        try:
            checksum = AsyncWeb3.to_checksum_address(address)
        except ValueError as e:
            raise ChainReadError(f"invalid address {address!r}") from e

        contract = self._w3.eth.contract(address=checksum, abi=ERC20_PAIR_ABI)
        fn = getattr(contract.functions, fn_name)
        return await self._with_retry(
            f"{fn_name}() on {address[:10]}", lambda: fn(*args).call()
        )

    async def name(self, address: str) -> str:
        return str(await self.call(address, "name"))

    async def symbol(self, address: str) -> str:
        return str(await self.call(address, "symbol"))

    async def decimals(self, address: str) -> int:
        return int(await self.call(address, "decimals"))

    async def total_supply(self, address: str) -> int:
        return int(await self.call(address, "totalSupply"))

    async def token0(self, address: str) -> str:
        return str(await self.call(address, "token0"))

    async def token1(self, address: str) -> str:
        return str(await self.call(address, "token1"))

    async def balance_of(self, token: str, holder: str) -> int:
        try:
            holder = AsyncWeb3.to_checksum_address(holder)
        except ValueError as e:
            raise ChainReadError(f"invalid address {holder!r}") from e
        return int(await self.call(token, "balanceOf", holder))
