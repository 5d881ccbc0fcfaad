from dataclasses import dataclass

from pydantic import BaseModel


class GeckoWindowChange(BaseModel):
    base_token_usd: str | None = None

    model_config = {"extra": "ignore"}


class GeckoDayPrices(BaseModel):
    base_token_high_price_in_usd: str | None = None
    base_token_low_price_in_usd: str | None = None

    model_config = {"extra": "ignore"}


class GeckoDayChange(BaseModel):
    prices: GeckoDayPrices | None = None

    model_config = {"extra": "ignore"}


class GeckoPriceChangeData(BaseModel):
    last_300_s: GeckoWindowChange | None = None
    last_900_s: GeckoWindowChange | None = None
    last_1800_s: GeckoWindowChange | None = None
    last_86400_s: GeckoDayChange | None = None

    model_config = {"extra": "ignore"}


class GeckoPairAttributes(BaseModel):
    base_address: str | None = None
    base_price_in_usd: str | None = None
    base_price_in_usd_percent_change: str | None = None
    swap_count: int | str | None = None
    price_change_data: GeckoPriceChangeData | None = None

    model_config = {"extra": "ignore"}


class GeckoIncluded(BaseModel):
    attributes: GeckoPairAttributes | None = None

    model_config = {"extra": "ignore"}


class GeckoPoolResponse(BaseModel):
    included: list[GeckoIncluded] = []

    model_config = {"extra": "ignore"}


@dataclass
class PoolPrice:
    """Parsed pool price summary, rendered in the alert. Unparseable numbers are 0."""

    base_address: str
    price_usd: float = 0.0
    swap_count_24h: int = 0
    price_change_pct: float = 0.0
    change_5m: float = 0.0
    change_15m: float = 0.0
    change_30m: float = 0.0
    high_24h: float = 0.0
    low_24h: float = 0.0
