"""GeckoTerminal pool price client (public app API, no key)."""

import asyncio

import httpx
from loguru import logger
from pydantic import ValidationError

from src.enrichment.geckoterminal.models import GeckoPoolResponse, PoolPrice
from src.enrichment.rate_limiter import RateLimiter

BASE_URL = "https://app.geckoterminal.com/api/p1"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]

HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Referer": "https://www.geckoterminal.com/",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:124.0) Gecko/20100101 Firefox/124.0",
}


class GeckoTerminalClient:
    """Async REST client for GeckoTerminal pool pages."""

    def __init__(self, network: str = "eth", max_rps: float = 0.5) -> None:
        self._network = network
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(base_url=BASE_URL, timeout=10.0, headers=HEADERS)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_pool_price(self, pool_address: str) -> PoolPrice | None:
        """Price summary for the base token of a pool. None on any failure."""
        path = f"/{self._network}/pools/{pool_address}"
        params = {"include": "pairs", "base_token": "0"}

        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.get(path, params=params)

                if resp.status_code == 429:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[GECKO] 429 rate limited, retrying in {delay}s")
                    await asyncio.sleep(delay)
                    continue

                if resp.status_code != 200:
                    logger.warning(f"[GECKO] HTTP {resp.status_code} for pool {pool_address[:12]}")
                    return None

                return _parse_pool(GeckoPoolResponse.model_validate(resp.json()))

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[GECKO] {type(e).__name__}, retrying in {delay}s")
                    await asyncio.sleep(delay)
                else:
                    logger.warning(f"[GECKO] Failed after retries for {pool_address[:12]}: {e}")
                    return None
            except (httpx.HTTPError, ValidationError, ValueError) as e:
                logger.warning(f"[GECKO] Bad response for {pool_address[:12]}: {e}")
                return None

        return None


def _parse_float(val: str | int | float | None) -> float:
    """Decimal string to float, 0.0 when missing or unparseable."""
    if val is None or val == "":
        return 0.0
    try:
        return float(val)
    except (ValueError, TypeError):
        return 0.0


def _parse_pool(data: GeckoPoolResponse) -> PoolPrice | None:
    if not data.included or data.included[0].attributes is None:
        return None
    attrs = data.included[0].attributes
    if not attrs.base_address:
        return None

    changes = attrs.price_change_data
    day = changes.last_86400_s.prices if changes and changes.last_86400_s else None

    def _window(field: str) -> float:
        window = getattr(changes, field, None) if changes else None
        return _parse_float(window.base_token_usd if window else None)

    return PoolPrice(
        base_address=attrs.base_address,
        price_usd=_parse_float(attrs.base_price_in_usd),
        swap_count_24h=int(_parse_float(attrs.swap_count)),
        price_change_pct=_parse_float(attrs.base_price_in_usd_percent_change),
        change_5m=_window("last_300_s"),
        change_15m=_window("last_900_s"),
        change_30m=_window("last_1800_s"),
        high_24h=_parse_float(day.base_token_high_price_in_usd if day else None),
        low_24h=_parse_float(day.base_token_low_price_in_usd if day else None),
    )
