"""End-to-end service tests over a fake transport."""

import pytest

from blockwatch.config.state import ConfigState
from blockwatch.dependency_container import BlockwatchDependencyContainer
from blockwatch.exceptions import InvalidRefreshInterval
from blockwatch.service import BlockwatchService
from blockwatch.shared.models import PriceSource, RefreshInterval

MEMPOOL = "https://mempool.space/api"
COINGECKO = "https://api.coingecko.com/api/v3"


def serve_everything(fake_http):
    fake_http.add(
        f"{MEMPOOL}/v1/blocks",
        [
            {
                "id": "0000beef",
                "height": 850000,
                "timestamp": 1719000000,
                "tx_count": 3100,
                "size": 1_700_000,
                "weight": 3_998_000,
                "extras": {"pool": {"name": "Foundry USA"}, "feeRange": [2, 80]},
            }
        ],
    )
    fake_http.add(f"{MEMPOOL}/mempool", {"count": 42_000, "vsize": 25_000_000})
    fake_http.add(
        f"{MEMPOOL}/v1/fees/recommended",
        {"fastestFee": 12, "halfHourFee": 9, "hourFee": 7},
    )
    fake_http.add(f"{MEMPOOL}/v1/difficulty-adjustment", {"progressPercent": 64.2})
    fake_http.add(
        f"{COINGECKO}/coins/bitcoin",
        {"market_data": {"current_price": {"usd": 62_500}, "price_change_percentage_24h": -1.2}},
    )


@pytest.fixture
def service(fake_http, clock, instant_sleep):
    container = BlockwatchDependencyContainer(
        http_client=fake_http, clock=clock, sleep=instant_sleep
    )
    return BlockwatchService(container)


@pytest.mark.asyncio
async def test_refresh_publishes_merged_snapshot(service, fake_http):
    serve_everything(fake_http)

    assert await service.refresh() is True

    snapshot = service.snapshot
    assert snapshot.block.extras.pool_name == "Foundry USA"
    assert snapshot.mempool.count == 42_000
    assert snapshot.fees.fastest_fee == 12.0
    assert snapshot.difficulty.progress_percent == 64.2
    assert snapshot.price_usd == 62_500.0
    assert snapshot.price_change_24h == -1.2
    assert snapshot.price_source is PriceSource.COINGECKO
    assert snapshot.sats_per_unit == 1600
    assert not service.is_stale
    assert service.error_message is None


@pytest.mark.asyncio
async def test_total_outage_retries_then_reports_error(service, fake_http, instant_sleep):
    assert await service.refresh() is False

    assert service.snapshot is None
    assert service.error_message == "Unable to load Bitcoin data."
    assert service.is_stale
    assert instant_sleep.delays == [1.0, 3.0]
    assert fake_http.requested(f"{MEMPOOL}/mempool") == 3


@pytest.mark.asyncio
async def test_outage_after_success_keeps_snapshot(service, fake_http):
    serve_everything(fake_http)
    await service.refresh()
    previous = service.snapshot

    fake_http.routes.clear()
    await service.refresh()

    assert service.snapshot is previous
    assert service.error_message is not None


@pytest.mark.asyncio
async def test_price_fallback_carries_change(service, fake_http):
    serve_everything(fake_http)
    await service.refresh()

    del fake_http.routes[f"{COINGECKO}/coins/bitcoin"]
    fake_http.add(f"{MEMPOOL}/v1/prices", {"USD": 62_000})
    await service.refresh()

    assert service.snapshot.price_source is PriceSource.MEMPOOL
    assert service.snapshot.price_usd == 62_000.0
    assert service.snapshot.price_change_24h == -1.2


def test_set_refresh_interval(service):
    events = []
    service.subscribe(events.append)

    service.set_refresh_interval(5)
    assert service.refresh_interval is RefreshInterval.FIVE_MINUTES
    service.set_refresh_interval(RefreshInterval.MANUAL)
    assert service.state().refresh_interval is RefreshInterval.MANUAL
    assert len(events) == 2

    with pytest.raises(InvalidRefreshInterval):
        service.set_refresh_interval(7)


@pytest.mark.asyncio
async def test_context_manager_closes_transport(fake_http, clock, controlled_sleep, run_pending):
    serve_everything(fake_http)
    container = BlockwatchDependencyContainer(
        http_client=fake_http, clock=clock, sleep=controlled_sleep
    )

    async with BlockwatchService(container) as service:
        await run_pending(50)
        assert service.snapshot is not None
        assert service.refresh_now() is not None
        await run_pending(50)

    assert fake_http.closed
    assert controlled_sleep.pending() == []


def test_from_config_uses_configured_interval():
    state = ConfigState(scheduler={"refresh_interval_minutes": 15})
    container = BlockwatchDependencyContainer.from_config(state)
    assert container.refresh_interval is RefreshInterval.FIFTEEN_MINUTES
    assert container.retry_policy.max_attempts == 3
