"""Format LP burn alerts into Telegram HTML messages."""

import html

from src.detector.models import BurnAlert
from src.enrichment.geckoterminal.models import PoolPrice
from src.enrichment.goplus.models import HolderShare, TokenSecurity

UNKNOWN = "Unknown 🟨"
NOT_AVAILABLE = "N/A"
UNKNOWN_NAME = "Unknown"
UNKNOWN_SYMBOL = "UNK"
TOP_HOLDERS_SHOWN = 2


def format_burn_alert(alert: BurnAlert, *, explorer_url: str = "https://etherscan.io") -> str:
    """Render one burn alert. Missing enrichment shows sentinel text."""
    token = alert.token_address
    security = alert.security or TokenSecurity()
    metrics = alert.metrics
    explorer = explorer_url.rstrip("/")

    name = html.escape(security.token_name or UNKNOWN_NAME)
    symbol = html.escape(security.token_symbol or UNKNOWN_SYMBOL)
    mcap = f"${format_number(alert.market_cap)}" if alert.market_cap else NOT_AVAILABLE
    swaps = format_number(alert.price.swap_count_24h) if alert.price else NOT_AVAILABLE
    holder_count = (
        format_number(security.holder_count) if security.holder_count is not None else UNKNOWN
    )

    return (
        "🔥🔥New LP Burn Detected🔥🔥\n"
        f'<a href="{explorer}/address/{token}">{name}</a><b>({symbol})</b>\n'
        f"<code>{token}</code>\n"
        "\n"
        f"💰<b>Mcap:</b> {mcap}\n"
        f"{_price_lines(alert.price)}"
        f'        <b>⎿ Hash:</b> <a href="{explorer}/tx/{alert.tx_hash}">Click Here</a>\n'
        f"        <b>⎿ Burned:</b> {metrics.burned_amount:.1f}({metrics.burn_percentage:.2f}%)\n"
        f"        <b>⎿ Swaps 24h:</b> {swaps}\n"
        "\n"
        f"🔵 Honeypot : {_honeypot_status(security.is_honeypot)}\n"
        f"        <b>⎿ Buy Tax:</b> {_tax(security.buy_tax)}\n"
        f"        <b>⎿ Sell Tax:</b> {_tax(security.sell_tax)}\n"
        f"        <b>⎿ Clogged:</b> {format_number(int(metrics.clogged_amount))} "
        f"({metrics.clogged_percentage:.1f}%)\n"
        "\n"
        f"👤 Current Holders Count: {holder_count}\n"
        f"        <b>⎿ Top Holders:</b> {_top_holders(security.holders, explorer)}\n"
        "\n"
        f'<b>Chart:</b> <a href="https://www.dextools.io/app/en/ether/pair-explorer/{token}">DexTools</a>'
        f' | <a href="https://dexscreener.com/ethereum/{token}">DexScreener</a>'
        f' | <a href="https://dexspy.io/eth/token/{token}">DexSpy</a>\n'
        f'<b>Snipe:</b> <a href="https://t.me/MaestroSniperBot?start={token}">Maestro</a>'
        f' (<a href="https://t.me/MaestroProBot?start={token}">Pro</a>)'
    )


def format_number(num: int) -> str:
    """1234567 -> '1,234,567'."""
    return f"{int(num):,}"


def _honeypot_status(is_honeypot: bool | None) -> str:
    if is_honeypot is None:
        return UNKNOWN
    return "True 🟥" if is_honeypot else "False 🟩"


def _tax(pct: float | None) -> str:
    if pct is None:
        return UNKNOWN
    return f"{pct:.1f}%"


def _top_holders(holders: list[HolderShare], explorer: str) -> str:
    if not holders:
        return NOT_AVAILABLE
    return "|".join(
        f'<a href="{explorer}/address/{html.escape(h.address)}">{h.percent:.4f}%</a>'
        for h in holders[:TOP_HOLDERS_SHOWN]
    )


def _price_lines(price: PoolPrice | None) -> str:
    if price is None:
        return f"        <b>⎿ Price:</b> {NOT_AVAILABLE}\n"
    return (
        f"        <b>⎿ Price:</b> ${price.price_usd:.9f} ({price.price_change_pct:+.2f}%)\n"
        f"        <b>⎿ 5m | 15m | 30m:</b> {price.change_5m:+.2f}% | "
        f"{price.change_15m:+.2f}% | {price.change_30m:+.2f}%\n"
        f"        <b>⎿ 24h High/Low:</b> ${price.high_24h:.9f} / ${price.low_24h:.9f}\n"
    )
