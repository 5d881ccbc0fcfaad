"""Records built while verifying and measuring one LP burn."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.enrichment.geckoterminal.models import PoolPrice
    from src.enrichment.goplus.models import TokenSecurity


@dataclass
class CandidateBurn:
    """Working record for one verification pass."""

    transaction_hash: str
    pool_address: str
    decoded_recipient: str
    decoded_amount: int  # raw, 18 implied decimals


@dataclass(frozen=True)
class PoolInfo:
    address: str
    name: str
    token0: str
    token1: str
    total_supply: int


@dataclass(frozen=True)
class TokenInfo:
    address: str
    decimals: int
    total_supply: int
    balance_held_by_self: int  # tokens stuck in the token contract ("clogged")


@dataclass(frozen=True)
class BurnMetrics:
    burned_amount: float  # LP units
    burn_percentage: float  # supply / burned * 100, see metrics.burn_percentage
    clogged_amount: float  # token units
    clogged_percentage: float


@dataclass(frozen=True)
class VerifiedBurn:
    candidate: CandidateBurn
    pool: PoolInfo
    token_address: str  # the non-WETH side of the pair


@dataclass
class BurnAlert:
    """Everything the alert template needs."""

    burn: VerifiedBurn
    token: TokenInfo
    metrics: BurnMetrics
    security: TokenSecurity | None = None
    price: PoolPrice | None = None
    market_cap: int | None = None
    block_number: int | None = None
    sent: bool = field(default=False, compare=False)

    @property
    def tx_hash(self) -> str:
        return self.burn.candidate.transaction_hash

    @property
    def token_address(self) -> str:
        return self.burn.token_address

    @property
    def pool_address(self) -> str:
        return self.burn.pool.address
