"""Tests for MempoolClient endpoint fallbacks over a fake transport."""

import asyncio

import aiohttp
import pytest

from blockwatch.ingestion.adapters.mempool_plugin import MempoolClient

BASE = "https://mempool.test/api"

BLOCK = {
    "id": "0000abc",
    "height": 840001,
    "timestamp": 1713572000,
    "tx_count": 4000,
    "size": 1_600_000,
    "weight": 3_999_000,
}


@pytest.fixture
def client(fake_http):
    return MempoolClient(fake_http, BASE + "/")


class TestLatestBlock:
    @pytest.mark.asyncio
    async def test_v1_listing_preferred(self, client, fake_http):
        fake_http.add(f"{BASE}/v1/blocks", [dict(BLOCK, extras={"pool": "AntPool"})])
        fake_http.add(f"{BASE}/blocks", [dict(BLOCK, height=1)])

        block = await client.fetch_latest_block()

        assert block.height == 840001
        assert block.extras.pool_name == "AntPool"
        assert fake_http.requested(f"{BASE}/blocks") == 0

    @pytest.mark.asyncio
    async def test_falls_back_to_legacy_on_bad_status(self, client, fake_http):
        fake_http.add(f"{BASE}/v1/blocks", "Service Unavailable", status=503)
        fake_http.add(f"{BASE}/blocks", [BLOCK])

        block = await client.fetch_latest_block()

        assert block.height == 840001
        assert block.extras is None

    @pytest.mark.asyncio
    async def test_falls_back_to_legacy_on_schema_mismatch(self, client, fake_http):
        fake_http.add(f"{BASE}/v1/blocks", {"unexpected": "object"})
        fake_http.add(f"{BASE}/blocks", [BLOCK])

        assert (await client.fetch_latest_block()).id == "0000abc"

    @pytest.mark.asyncio
    async def test_both_variants_fail(self, client, fake_http):
        fake_http.fail(f"{BASE}/v1/blocks", aiohttp.ClientConnectionError("refused"))
        fake_http.fail(f"{BASE}/blocks", asyncio.TimeoutError())

        assert await client.fetch_latest_block() is None


class TestFees:
    @pytest.mark.asyncio
    async def test_recommended_preferred(self, client, fake_http):
        fake_http.add(
            f"{BASE}/v1/fees/recommended",
            {"fastestFee": 21, "halfHourFee": 18, "hourFee": 12, "economyFee": 6, "minimumFee": 3},
        )

        fees = await client.fetch_fees()

        assert fees.fastest_fee == 21.0
        assert fees.minimum_fee == 3.0
        assert fake_http.requested(f"{BASE}/v1/fees/mempool-blocks") == 0

    @pytest.mark.asyncio
    async def test_derived_from_projected_blocks(self, client, fake_http):
        fake_http.add(f"{BASE}/v1/fees/recommended", "oops", status=500)
        fake_http.add(
            f"{BASE}/v1/fees/mempool-blocks",
            [{"medianFee": m} for m in (40.26, 33.0, 22.15, 18.0, 15.0, 11.04, 9.0, 7.0)],
        )

        fees = await client.fetch_fees()

        assert fees.fastest_fee == 40.3
        assert fees.half_hour_fee == 22.2
        assert fees.hour_fee == 11.0
        assert fees.economy_fee is None

    @pytest.mark.asyncio
    async def test_empty_projection_is_failure(self, client, fake_http):
        fake_http.add(f"{BASE}/v1/fees/mempool-blocks", [])
        assert await client.fetch_fees() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("median", [1e30, "NaN", "Infinity"])
    async def test_unusable_median_is_failure(self, client, fake_http, median):
        fake_http.add(f"{BASE}/v1/fees/recommended", "unavailable", status=503)
        fake_http.add(f"{BASE}/v1/fees/mempool-blocks", [{"medianFee": median}])

        assert await client.fetch_fees() is None


@pytest.mark.asyncio
async def test_mempool_stats(client, fake_http):
    fake_http.add(f"{BASE}/mempool", {"count": 10, "vsize": 2048, "total_fee": 99})
    stats = await client.fetch_mempool_stats()
    assert (stats.count, stats.vsize, stats.total_fee) == (10, 2048, 99)


@pytest.mark.asyncio
async def test_difficulty(client, fake_http):
    fake_http.add(
        f"{BASE}/v1/difficulty-adjustment",
        {"progressPercent": 12.0, "remainingBlocks": 1774, "difficultyChange": 0.8},
    )
    adjustment = await client.fetch_difficulty()
    assert adjustment.remaining_blocks == 1774


@pytest.mark.asyncio
async def test_price_only(client, fake_http):
    fake_http.add(f"{BASE}/v1/prices", {"USD": 63_500, "EUR": 59_000})
    assert await client.fetch_price("USD") == 63_500.0


@pytest.mark.asyncio
async def test_non_json_body_is_failure(client, fake_http):
    fake_http.add(f"{BASE}/mempool", "<html>maintenance</html>")
    assert await client.fetch_mempool_stats() is None


@pytest.mark.asyncio
async def test_cancellation_propagates(client, fake_http):
    fake_http.fail(f"{BASE}/mempool", asyncio.CancelledError())
    with pytest.raises(asyncio.CancelledError):
        await client.fetch_mempool_stats()
