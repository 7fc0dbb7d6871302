"""
CoinGecko payload mappers.

The coin endpoint nests most values under `market_data` keyed by currency;
older payloads and the simple endpoint use flat `<currency>_...` keys.
"""

from typing import Any

from blockwatch.ingestion.decoding import (
    as_datetime,
    as_float,
    as_float_list,
    as_mapping,
    probe,
)
from blockwatch.shared.models import PriceDetails, PriceQuote, PriceSource


def map_market_data(payload: Any, currency: str = "usd") -> PriceQuote:
    """
    /coins/{id} with market_data and sparkline -> rich quote.

    Raises:
        ValueError: If no current price can be resolved
    """
    raw = as_mapping(payload)
    market = probe(raw, ("market_data",), as_mapping) or {}
    cur = currency.lower()

    price = probe(market, (f"current_price.{cur}",), as_float)
    if price is None:
        raise ValueError(f"No current price for '{cur}'")

    change_24h = probe(
        market,
        (
            f"price_change_percentage_24h_in_currency.{cur}",
            "price_change_percentage_24h",
        ),
        as_float,
    )

    details = PriceDetails(
        change_7d=probe(
            market,
            (
                f"price_change_percentage_7d_in_currency.{cur}",
                "price_change_percentage_7d",
            ),
            as_float,
        ),
        change_30d=probe(
            market,
            (
                f"price_change_percentage_30d_in_currency.{cur}",
                "price_change_percentage_30d",
            ),
            as_float,
        ),
        high_24h=probe(market, (f"high_24h.{cur}",), as_float),
        low_24h=probe(market, (f"low_24h.{cur}",), as_float),
        ath=probe(market, (f"ath.{cur}",), as_float),
        ath_date=probe(market, (f"ath_date.{cur}",), as_datetime),
        atl=probe(market, (f"atl.{cur}",), as_float),
        atl_date=probe(market, (f"atl_date.{cur}",), as_datetime),
        last_updated=probe(market, ("last_updated",), as_datetime)
        or probe(raw, ("last_updated",), as_datetime),
        sparkline_7d=probe(
            market, ("sparkline_7d.price", "sparkline_7d"), as_float_list
        )
        or [],
    )

    return PriceQuote(
        price=price,
        change_24h=change_24h,
        source=PriceSource.COINGECKO,
        details=details,
    )


def map_simple_price(
    payload: Any, coin_id: str = "bitcoin", currency: str = "usd"
) -> PriceQuote:
    """
    /simple/price?include_24hr_change=true -> quote without details.

    Raises:
        ValueError: If the coin or its price is missing
    """
    raw = as_mapping(payload)
    cur = currency.lower()
    price = probe(raw, (f"{coin_id}.{cur}",), as_float)
    if price is None:
        raise ValueError(f"No simple price for '{coin_id}' in '{cur}'")
    return PriceQuote(
        price=price,
        change_24h=probe(raw, (f"{coin_id}.{cur}_24h_change",), as_float),
        source=PriceSource.COINGECKO,
    )
