"""Data models for GoPlus token security responses (EVM)."""

from dataclasses import dataclass, field


@dataclass
class HolderShare:
    address: str
    percent: float  # percentage (0-100)


@dataclass
class TokenSecurity:
    """Token security report from GoPlus API."""

    token_name: str | None = None
    token_symbol: str | None = None
    is_honeypot: bool | None = None
    buy_tax: float | None = None  # percentage (0-100)
    sell_tax: float | None = None  # percentage (0-100)
    holder_count: int | None = None
    holders: list[HolderShare] = field(default_factory=list)  # largest first
