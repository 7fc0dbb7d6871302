"""mempool.space client: blocks, mempool, fees, difficulty and a price-only quote."""

from blockwatch.ingestion.adapters.base import UpstreamAdapter
from blockwatch.ingestion.adapters.mempool_plugin import mappers
from blockwatch.shared.models import BlockInfo, DifficultyAdjustment, Fees, MempoolStats


class MempoolClient(UpstreamAdapter):
    """Async client for the mempool.space REST API.

    Every method returns None on failure; see UpstreamAdapter.
    """

    provider = "mempool"

    # Variant A carries `extras` (pool, fee range, reward); B is the legacy listing
    BLOCKS_V1 = "v1/blocks"
    BLOCKS_LEGACY = "blocks"

    async def fetch_blocks_v1(self) -> BlockInfo | None:
        payload = await self._get_json(self.BLOCKS_V1)
        return self._decode(self.BLOCKS_V1, payload, mappers.map_latest_block)

    async def fetch_blocks_legacy(self) -> BlockInfo | None:
        payload = await self._get_json(self.BLOCKS_LEGACY)
        return self._decode(self.BLOCKS_LEGACY, payload, mappers.map_latest_block)

    async def fetch_latest_block(self) -> BlockInfo | None:
        """Newest block: v1 listing first, legacy listing as fallback."""
        block = await self.fetch_blocks_v1()
        if block is not None:
            return block
        self.log.info("block_fallback", endpoint=self.BLOCKS_LEGACY)
        return await self.fetch_blocks_legacy()

    async def fetch_mempool_stats(self) -> MempoolStats | None:
        payload = await self._get_json("mempool")
        return self._decode("mempool", payload, mappers.map_mempool_stats)

    async def fetch_recommended_fees(self) -> Fees | None:
        payload = await self._get_json("v1/fees/recommended")
        return self._decode("v1/fees/recommended", payload, mappers.map_recommended_fees)

    async def fetch_fees_from_mempool_blocks(self) -> Fees | None:
        payload = await self._get_json("v1/fees/mempool-blocks")
        return self._decode(
            "v1/fees/mempool-blocks",
            payload,
            lambda body: mappers.derive_fee_tiers(mappers.map_mempool_block_medians(body)),
        )

    async def fetch_fees(self) -> Fees | None:
        """Recommended tiers, else tiers derived from projected blocks."""
        fees = await self.fetch_recommended_fees()
        if fees is not None:
            return fees
        self.log.info("fees_fallback", endpoint="v1/fees/mempool-blocks")
        return await self.fetch_fees_from_mempool_blocks()

    async def fetch_difficulty(self) -> DifficultyAdjustment | None:
        payload = await self._get_json("v1/difficulty-adjustment")
        return self._decode("v1/difficulty-adjustment", payload, mappers.map_difficulty)

    async def fetch_price(self, currency: str = "USD") -> float | None:
        payload = await self._get_json("v1/prices")
        return self._decode(
            "v1/prices", payload, lambda body: mappers.map_price(body, currency)
        )
