"""Tests for mempool.space payload mappers."""

import pytest

from blockwatch.ingestion.adapters.mempool_plugin.mappers import (
    derive_fee_tiers,
    map_difficulty,
    map_latest_block,
    map_mempool_block_medians,
    map_mempool_stats,
    map_price,
    map_recommended_fees,
    round_fee,
)

V1_BLOCK = {
    "id": "00000000000000000001f6a2",
    "height": 840000,
    "version": 710926336,
    "timestamp": 1713571767,
    "tx_count": 3050,
    "size": 2325617,
    "weight": 3993281,
    "difficulty": 86388558925171.02,
    "extras": {
        "feeRange": [1.0, 15.3, 120.0],
        "medianFee": 12.4,
        "totalFees": 3_717_000_000,
        "reward": 4_029_500_000,
        "pool": {"id": 111, "name": "ViaBTC", "slug": "viabtc"},
    },
}

LEGACY_BLOCK = {
    "id": "00000000000000000002aa",
    "height": 839999,
    "timestamp": 1713571000,
    "tx_count": 2500,
    "size": 1_500_000,
    "weight": 3_990_000,
}


class TestLatestBlock:
    def test_v1_listing_with_extras(self):
        block = map_latest_block([V1_BLOCK, LEGACY_BLOCK])
        assert block.height == 840000
        assert block.difficulty == pytest.approx(86388558925171.02)
        assert block.extras.pool_name == "ViaBTC"
        assert block.extras.fee_range == [1.0, 15.3, 120.0]
        assert block.extras.median_fee == 12.4
        assert block.extras.reward == 4_029_500_000

    def test_legacy_listing_without_extras(self):
        block = map_latest_block([LEGACY_BLOCK])
        assert block.id == LEGACY_BLOCK["id"]
        assert block.extras is None
        assert block.difficulty is None

    def test_pool_given_as_string(self):
        raw = dict(V1_BLOCK, extras={"pool": "Foundry USA"})
        assert map_latest_block([raw]).extras.pool_name == "Foundry USA"

    def test_alternative_pool_key(self):
        raw = dict(V1_BLOCK, extras={"poolName": "MARA Pool"})
        assert map_latest_block([raw]).extras.pool_name == "MARA Pool"

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            map_latest_block([])

    def test_object_instead_of_list_rejected(self):
        with pytest.raises(TypeError):
            map_latest_block(V1_BLOCK)

    def test_missing_required_field_rejected(self):
        raw = {k: v for k, v in LEGACY_BLOCK.items() if k != "height"}
        with pytest.raises(ValueError):
            map_latest_block([raw])


def test_mempool_stats():
    stats = map_mempool_stats({"count": 51234, "vsize": 31_000_000, "total_fee": 12_345_678})
    assert stats.count == 51234
    assert stats.vsize == 31_000_000
    assert stats.total_fee == 12_345_678


def test_recommended_fees():
    fees = map_recommended_fees(
        {"fastestFee": 25, "halfHourFee": 20, "hourFee": 15, "economyFee": 8, "minimumFee": 4}
    )
    assert (fees.fastest_fee, fees.half_hour_fee, fees.hour_fee) == (25.0, 20.0, 15.0)
    assert fees.economy_fee == 8.0


def test_recommended_fees_missing_tier_rejected():
    with pytest.raises(ValueError):
        map_recommended_fees({"fastestFee": 25, "hourFee": 15})


class TestFeeTiers:
    def test_full_projection_uses_indexes_0_2_5(self):
        medians = [30.0, 25.0, 20.0, 15.0, 12.0, 10.0, 8.0, 5.0]
        fees = derive_fee_tiers(medians)
        assert (fees.fastest_fee, fees.half_hour_fee, fees.hour_fee) == (30.0, 20.0, 10.0)

    def test_short_projection_clamps_to_last(self):
        fees = derive_fee_tiers([12.0, 6.0])
        assert (fees.fastest_fee, fees.half_hour_fee, fees.hour_fee) == (12.0, 6.0, 6.0)

    def test_single_block(self):
        fees = derive_fee_tiers([3.0])
        assert fees.fastest_fee == fees.half_hour_fee == fees.hour_fee == 3.0

    def test_empty_projection(self):
        assert derive_fee_tiers([]) is None

    def test_tiers_rounded_to_one_decimal(self):
        fees = derive_fee_tiers([10.04, 9.0, 8.25])
        assert fees.fastest_fee == 10.0
        assert fees.half_hour_fee == 8.3

    def test_medians_from_projected_blocks(self):
        payload = [{"medianFee": 11.2, "blockSize": 1}, {"medianFee": 9}]
        assert map_mempool_block_medians(payload) == [11.2, 9.0]


@pytest.mark.parametrize("fee, expected", [(1.25, 1.3), (1.24, 1.2), (2.35, 2.4), (7, 7.0)])
def test_round_fee_half_up(fee, expected):
    assert round_fee(fee) == expected


class TestDifficulty:
    def test_primary_keys(self):
        adjustment = map_difficulty(
            {
                "progressPercent": 42.5,
                "difficultyChange": -1.9,
                "estimatedRetargetDate": 1714000000000,
                "remainingBlocks": 1160,
                "timeAvg": 610000,
            }
        )
        assert adjustment.progress_percent == 42.5
        assert adjustment.remaining_blocks == 1160
        assert adjustment.difficulty_change == -1.9

    def test_alternative_keys(self):
        adjustment = map_difficulty({"estimatedDifficultyDelta": 3.1, "averageBlockTime": 590000})
        assert adjustment.difficulty_change == 3.1
        assert adjustment.time_avg == 590000.0

    def test_unrecognised_object_rejected(self):
        with pytest.raises(ValueError):
            map_difficulty({"foo": 1})


def test_price_only_quote():
    assert map_price({"time": 1713571767, "USD": 64123, "EUR": 60001}) == 64123.0
    with pytest.raises(ValueError):
        map_price({"EUR": 60001}, "USD")
