"""Burn and clog metrics from raw on-chain integers.

All normalisation goes through Decimal with 80 significant digits, enough
for any uint256 value; only the final figures are turned into floats.

Burn percentage is total LP supply divided by the burned amount (times 100),
not burned over supply. Alerts have always shown this figure, so it is kept
as is.
"""

from decimal import Decimal, localcontext

from loguru import logger

from src.chain.abi import LP_DECIMALS, same_address
from src.chain.exceptions import ChainReadError
from src.chain.reader import ChainReader
from src.detector.models import BurnMetrics, TokenInfo, VerifiedBurn

# uint256 has up to 78 digits
PRECISION = 80
DEFAULT_TOKEN_DECIMALS = 18


def normalize(raw: int, decimals: int) -> Decimal:
    """raw / 10**decimals without going through float."""
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return Decimal(raw) / (Decimal(10) ** decimals)


def _ratio_pct(numerator: Decimal, denominator: Decimal) -> float:
    if denominator == 0:
        return 0.0
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return float(numerator / denominator * 100)


def burn_percentage(total_supply_raw: int, burned_raw: int) -> float:
    """(supply / 1e18) / (burned / 1e18) * 100; 0.0 when nothing was burned."""
    return _ratio_pct(
        normalize(total_supply_raw, LP_DECIMALS), normalize(burned_raw, LP_DECIMALS)
    )


def clog_percentage(balance_raw: int, total_supply_raw: int, decimals: int) -> float:
    """(self balance / 10^d) / (supply / 10^d) * 100; 0.0 for zero supply."""
    return _ratio_pct(normalize(balance_raw, decimals), normalize(total_supply_raw, decimals))


def compute_metrics(burn: VerifiedBurn, token: TokenInfo) -> BurnMetrics:
    burned_raw = burn.candidate.decoded_amount
    return BurnMetrics(
        burned_amount=float(normalize(burned_raw, LP_DECIMALS)),
        burn_percentage=burn_percentage(burn.pool.total_supply, burned_raw),
        clogged_amount=float(normalize(token.balance_held_by_self, token.decimals)),
        clogged_percentage=clog_percentage(
            token.balance_held_by_self, token.total_supply, token.decimals
        ),
    )


def market_cap(price_usd: float, total_supply_raw: int, decimals: int) -> int:
    """floor(price * normalised supply)."""
    if price_usd <= 0 or total_supply_raw <= 0:
        return 0
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return int(Decimal(str(price_usd)) * normalize(total_supply_raw, decimals))


class MetricsCalculator:
    """Reads the underlying token and turns a verified burn into BurnMetrics.

    Read failures never abort the alert: decimals fall back to 18, supply and
    self balance fall back to zero.
    """

    def __init__(self, reader: ChainReader) -> None:
        self._reader = reader

    async def read_token(self, token_address: str) -> TokenInfo:
        try:
            decimals = await self._reader.decimals(token_address)
        except ChainReadError as e:
            logger.warning(
                f"[METRICS] decimals() failed for {token_address}, assuming "
                f"{DEFAULT_TOKEN_DECIMALS}: {e}"
            )
            decimals = DEFAULT_TOKEN_DECIMALS

        try:
            total_supply = await self._reader.total_supply(token_address)
        except ChainReadError as e:
            logger.warning(f"[METRICS] totalSupply() failed for {token_address}: {e}")
            total_supply = 0

        try:
            balance = await self._reader.balance_of(token_address, token_address)
        except ChainReadError as e:
            logger.warning(f"[METRICS] balanceOf(self) failed for {token_address}: {e}")
            balance = 0

        return TokenInfo(
            address=token_address,
            decimals=decimals,
            total_supply=total_supply,
            balance_held_by_self=balance,
        )

    async def measure(self, burn: VerifiedBurn) -> tuple[TokenInfo, BurnMetrics]:
        token = await self.read_token(burn.token_address)
        metrics = compute_metrics(burn, token)
        logger.debug(
            f"[METRICS] {burn.candidate.transaction_hash[:12]} burned="
            f"{metrics.burned_amount:.4f} LP ({metrics.burn_percentage:.2f}%), "
            f"clogged={metrics.clogged_percentage:.2f}%"
        )
        return token, metrics

    async def market_cap_for(
        self, price_usd: float, base_address: str, token: TokenInfo
    ) -> int | None:
        """Market cap of the priced base token; reuses `token` when it is the same."""
        if not base_address or price_usd <= 0:
            return None
        if same_address(base_address, token.address):
            return market_cap(price_usd, token.total_supply, token.decimals)
        try:
            supply = await self._reader.total_supply(base_address)
            decimals = await self._reader.decimals(base_address)
        except ChainReadError as e:
            logger.warning(f"[METRICS] market cap reads failed for {base_address}: {e}")
            return None
        return market_cap(price_usd, supply, decimals)
