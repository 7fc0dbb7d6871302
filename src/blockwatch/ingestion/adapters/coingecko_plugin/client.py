"""CoinGecko client: the rich price provider."""

from blockwatch.ingestion.adapters.base import UpstreamAdapter
from blockwatch.ingestion.adapters.coingecko_plugin import mappers
from blockwatch.ingestion.ports.http import IHttpClient
from blockwatch.shared.models import PriceQuote


class CoinGeckoClient(UpstreamAdapter):
    """Async client for the CoinGecko public API.

    The coin endpoint gives price, 24h/7d/30d change, extrema and a 7 day
    sparkline. When it fails, the lighter simple-price endpoint still
    gives price and 24h change.
    """

    provider = "coingecko"

    def __init__(
        self,
        http_client: IHttpClient,
        base_url: str,
        coin_id: str = "bitcoin",
        vs_currency: str = "usd",
    ):
        super().__init__(http_client, base_url)
        self.coin_id = coin_id
        self.vs_currency = vs_currency.lower()

    async def fetch_market_data(self) -> PriceQuote | None:
        endpoint = f"coins/{self.coin_id}"
        payload = await self._get_json(
            endpoint,
            params={
                "localization": "false",
                "tickers": "false",
                "market_data": "true",
                "community_data": "false",
                "developer_data": "false",
                "sparkline": "true",
            },
        )
        return self._decode(
            endpoint,
            payload,
            lambda body: mappers.map_market_data(body, self.vs_currency),
        )

    async def fetch_simple_price(self) -> PriceQuote | None:
        payload = await self._get_json(
            "simple/price",
            params={
                "ids": self.coin_id,
                "vs_currencies": self.vs_currency,
                "include_24hr_change": "true",
            },
        )
        return self._decode(
            "simple/price",
            payload,
            lambda body: mappers.map_simple_price(body, self.coin_id, self.vs_currency),
        )

    async def fetch_quote(self) -> PriceQuote | None:
        """Rich market data, else simple price; None if both fail."""
        quote = await self.fetch_market_data()
        if quote is not None:
            return quote
        self.log.info("price_fallback", endpoint="simple/price")
        return await self.fetch_simple_price()
