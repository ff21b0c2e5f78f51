"""Valuation engine — prices each holding in the base asset."""
from __future__ import annotations

import asyncio
import logging

from ..config import SweepConfig
from ..interfaces.aggregator import SwapAggregator
from ..models import HoldingRecord, PricedHolding

logger = logging.getLogger(__name__)


class ValuationEngine:
    """Quote every holding concurrently; a failed quote values it at zero."""

    def __init__(self, aggregator: SwapAggregator, config: SweepConfig) -> None:
        self._aggregator = aggregator
        self._base_mint = config.base_asset_mint
        self._base_scale = 10 ** config.base_asset_decimals

    async def _value_one(self, holding: HoldingRecord) -> float:
        try:
            amount = holding.minor_units
            if amount <= 0:
                logger.warning("Holding %s rounds to zero units, valued at 0", holding.mint)
                return 0.0

            quote = await self._aggregator.get_quote(holding.mint, self._base_mint, amount)
            value = int(quote["outAmount"]) / self._base_scale
        except Exception as e:
            logger.warning("Valuation failed for %s: %s", holding.mint, e)
            return 0.0

        return max(value, 0.0)

    async def value(self, holdings: list[HoldingRecord]) -> list[PricedHolding]:
        values = await asyncio.gather(*(self._value_one(h) for h in holdings))
        priced = [PricedHolding.from_holding(h, v) for h, v in zip(holdings, values)]

        logger.info(
            "Valued %d holdings, total %.9f in base asset",
            len(priced), sum(p.base_value for p in priced),
        )
        return priced
