"""
UpstreamClient: one call per data category, provider fallback included.

Fallback chains (first success wins):
    block  -> mempool v1 listing, mempool legacy listing
    price  -> CoinGecko (coin endpoint, then simple price), mempool price-only
    fees   -> recommended tiers, tiers derived from projected blocks
"""

from blockwatch.infrastructure.observability import get_ingestion_logger
from blockwatch.ingestion.adapters.coingecko_plugin import CoinGeckoClient
from blockwatch.ingestion.adapters.mempool_plugin import MempoolClient
from blockwatch.shared.models import (
    BlockInfo,
    DifficultyAdjustment,
    Fees,
    MempoolStats,
    PriceQuote,
    PriceSource,
)


class UpstreamClient:
    """Category-level facade over the provider plugins. Never raises on upstream failure."""

    def __init__(self, mempool: MempoolClient, coingecko: CoinGeckoClient):
        self.mempool = mempool
        self.coingecko = coingecko
        self.log = get_ingestion_logger("upstream-client")

    async def fetch_block(self) -> BlockInfo | None:
        return await self.mempool.fetch_latest_block()

    async def fetch_mempool(self) -> MempoolStats | None:
        return await self.mempool.fetch_mempool_stats()

    async def fetch_fees(self) -> Fees | None:
        return await self.mempool.fetch_fees()

    async def fetch_difficulty(self) -> DifficultyAdjustment | None:
        return await self.mempool.fetch_difficulty()

    async def fetch_price(self) -> PriceQuote:
        """
        Price with change data when the rich provider answers.

        Returns:
            PriceQuote whose source names the provider that answered;
            all fields None when every provider failed
        """
        quote = await self.coingecko.fetch_quote()
        if quote is not None:
            return quote

        self.log.info("price_provider_fallback", provider=PriceSource.MEMPOOL.value)
        price = await self.mempool.fetch_price(self.coingecko.vs_currency.upper())
        if price is None:
            return PriceQuote()
        return PriceQuote(price=price, source=PriceSource.MEMPOOL)
