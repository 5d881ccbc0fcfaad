"""GoPlus Security API client: free token security analysis for EVM chains."""

import asyncio

import httpx
from loguru import logger

from src.enrichment.goplus.models import HolderShare, TokenSecurity
from src.enrichment.rate_limiter import RateLimiter

BASE_URL = "https://api.gopluslabs.io/api/v1/token_security"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class GoPlusClient:
    """Async HTTP client for GoPlus Security API (free, no key)."""

    def __init__(self, chain_id: int = 1, max_rps: float = 0.5) -> None:
        self._chain_id = chain_id
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(timeout=10.0, headers={"Accept": "*/*"})

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token_security(self, address: str) -> TokenSecurity | None:
        """Fetch security report for an ERC-20 token. None on any failure."""
        url = f"{BASE_URL}/{self._chain_id}"
        params = {"contract_addresses": address}

        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.get(url, params=params)

                if resp.status_code == 429:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[GOPLUS] Rate limited, waiting {delay}s")
                    await asyncio.sleep(delay)
                    continue

                if resp.status_code != 200:
                    logger.warning(f"[GOPLUS] HTTP {resp.status_code} for {address[:12]}")
                    return None

                return _parse_report(resp.json(), address)

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[GOPLUS] {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                else:
                    logger.warning(f"[GOPLUS] Failed after retries for {address[:12]}: {e}")
                    return None
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"[GOPLUS] Bad response for {address[:12]}: {e}")
                return None

        return None


def _parse_bool(val: str | None) -> bool | None:
    """Parse GoPlus '0'/'1' string to bool."""
    if val is None or val == "":
        return None
    return val == "1"


def _parse_pct(val: str | None) -> float | None:
    """Parse a GoPlus fraction ("0.05") to a percentage (5.0)."""
    if val is None or val == "":
        return None
    try:
        return float(val) * 100
    except (ValueError, TypeError):
        return None


def _parse_int(val: str | int | None) -> int | None:
    if val is None or val == "":
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def _parse_holders(raw: list | None) -> list[HolderShare]:
    holders: list[HolderShare] = []
    for entry in raw or []:
        if not isinstance(entry, dict) or not entry.get("address"):
            continue
        holders.append(
            HolderShare(
                address=entry["address"],
                percent=_parse_pct(entry.get("percent")) or 0.0,
            )
        )
    return holders


def _parse_report(data: dict, address: str) -> TokenSecurity | None:
    """Parse GoPlus API response."""
    result = data.get("result") or {}
    if not result:
        return None

    # GoPlus keys results by lower-case contract address
    token_data = result.get(address.lower()) or result.get(address)
    if not token_data:
        return None

    return TokenSecurity(
        token_name=token_data.get("token_name") or None,
        token_symbol=token_data.get("token_symbol") or None,
        is_honeypot=_parse_bool(token_data.get("is_honeypot")),
        buy_tax=_parse_pct(token_data.get("buy_tax")),
        sell_tax=_parse_pct(token_data.get("sell_tax")),
        holder_count=_parse_int(token_data.get("holder_count")),
        holders=_parse_holders(token_data.get("holders")),
    )
