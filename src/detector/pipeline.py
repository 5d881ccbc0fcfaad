"""Per-event pipeline: verify → metrics → enrichment → format → notify.

`BurnPipeline.process` handles exactly one log and shares no state between
calls apart from the long-lived clients, so events could be fanned out to
workers later without changes here.
"""

from loguru import logger

from src.bot.formatters import format_burn_alert
from src.bot.notifier import TelegramNotifier
from src.chain.models import TransferLog
from src.detector.metrics import MetricsCalculator
from src.detector.models import BurnAlert
from src.detector.verifier import BurnVerifier
from src.enrichment.geckoterminal.client import GeckoTerminalClient
from src.enrichment.geckoterminal.models import PoolPrice
from src.enrichment.goplus.client import GoPlusClient
from src.enrichment.goplus.models import TokenSecurity


class BurnPipeline:
    def __init__(
        self,
        verifier: BurnVerifier,
        metrics: MetricsCalculator,
        notifier: TelegramNotifier,
        *,
        goplus: GoPlusClient | None = None,
        gecko: GeckoTerminalClient | None = None,
        explorer_url: str = "https://etherscan.io",
    ) -> None:
        self._verifier = verifier
        self._metrics = metrics
        self._notifier = notifier
        self._goplus = goplus
        self._gecko = gecko
        self._explorer_url = explorer_url

    async def process(self, log: TransferLog) -> BurnAlert:
        """Run one log through the pipeline and send the alert.

        Raises NotABurnError when verification fails and NotifierError when
        delivery fails. Enrichment failures only degrade the message.
        """
        burn = await self._verifier.verify(log.transaction_hash)
        token, metrics = await self._metrics.measure(burn)

        security = await self._fetch_security(burn.token_address)
        price = await self._fetch_price(burn.pool.address)
        market_cap = None
        if price is not None:
            market_cap = await self._metrics.market_cap_for(
                price.price_usd, price.base_address, token
            )

        alert = BurnAlert(
            burn=burn,
            token=token,
            metrics=metrics,
            security=security,
            price=price,
            market_cap=market_cap,
            block_number=log.block_number,
        )
        text = format_burn_alert(alert, explorer_url=self._explorer_url)
        await self._notifier.send(text)
        alert.sent = True
        return alert

    async def _fetch_security(self, token_address: str) -> TokenSecurity | None:
        if self._goplus is None:
            return None
        try:
            security = await self._goplus.get_token_security(token_address)
        except Exception as e:
            logger.warning(f"[GOPLUS] Lookup failed for {token_address}: {e}")
            return None
        if security is None:
            logger.info(f"[GOPLUS] No security data for {token_address}, using defaults")
        return security

    async def _fetch_price(self, pool_address: str) -> PoolPrice | None:
        if self._gecko is None:
            return None
        try:
            price = await self._gecko.get_pool_price(pool_address)
        except Exception as e:
            logger.warning(f"[GECKO] Lookup failed for {pool_address}: {e}")
            return None
        if price is None:
            logger.info(f"[GECKO] No price data for pool {pool_address}")
        return price
