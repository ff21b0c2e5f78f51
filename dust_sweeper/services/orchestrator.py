"""Sequential swap orchestration: quote, build, sign, submit, confirm."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Collection

from ..config import SweepConfig
from ..interfaces.aggregator import SwapAggregator
from ..interfaces.wallet import WalletSession
from ..models import HoldingRecord, SwapOutcome, SwapStage

logger = logging.getLogger(__name__)


class SwapOrchestrator:
    """Swap each selected holding into the base asset, one at a time.

    Every holding runs inside its own failure boundary: an error at any stage
    is recorded as a failed outcome and the batch moves on to the next one.
    """

    def __init__(
        self,
        wallet: WalletSession,
        aggregator: SwapAggregator,
        config: SweepConfig,
    ) -> None:
        self._wallet = wallet
        self._aggregator = aggregator
        self._base_mint = config.base_asset_mint
        self._fee = config.fee
        self._confirm_timeout = config.confirm_timeout_seconds

    @staticmethod
    def plan(
        holdings: list[HoldingRecord], selection: Collection[str]
    ) -> list[HoldingRecord]:
        """Selected holdings in snapshot order, one per mint.

        Selected mints absent from ``holdings`` are ignored.
        """
        planned: list[HoldingRecord] = []
        seen: set[str] = set()
        for holding in holdings:
            if holding.mint not in selection:
                continue
            if holding.mint in seen:
                logger.warning(
                    "Skipping extra token account %s for %s", holding.account, holding.mint
                )
                continue
            seen.add(holding.mint)
            planned.append(holding)
        return planned

    async def _swap_one(self, holding: HoldingRecord, identity: str) -> SwapOutcome:
        mint = holding.mint
        stage = SwapStage.PENDING
        signature: str | None = None

        def advance(next_stage: SwapStage) -> SwapStage:
            logger.debug("%s: %s -> %s", mint, stage.value, next_stage.value)
            return next_stage

        try:
            stage = advance(SwapStage.QUOTING)
            route = await self._aggregator.get_quote(
                mint, self._base_mint, holding.minor_units, fee_bps=self._fee.fee_bps
            )

            stage = advance(SwapStage.BUILDING)
            raw_tx = await self._aggregator.build_swap_transaction(
                route, identity, self._fee.fee_account, wrap_unwrap_sol=True
            )

            stage = advance(SwapStage.SIGNING)
            connection = self._wallet.connection
            tx = connection.deserialize_transaction(raw_tx)
            signed = await self._wallet.sign_transaction(tx)

            stage = advance(SwapStage.SUBMITTING)
            signature = await self._wallet.send_transaction(signed, connection)

            stage = advance(SwapStage.CONFIRMING)
            await connection.confirm_transaction(signature, timeout=self._confirm_timeout)
        except Exception as e:
            logger.error("Swap failed for %s at %s: %s", mint, stage.value, e)
            return SwapOutcome(
                mint=mint,
                succeeded=False,
                stage=stage,
                signature=signature,
                error=f"{type(e).__name__}: {e}",
            )

        logger.info("Swapped %s, txid: %s", mint, signature)
        return SwapOutcome(
            mint=mint, succeeded=True, stage=SwapStage.CONFIRMED, signature=signature
        )

    async def iter_outcomes(
        self,
        holdings: list[HoldingRecord],
        selection: Collection[str],
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[SwapOutcome]:
        """Yield one outcome per planned holding as soon as it settles."""
        wallet = self._wallet
        identity = wallet.identity
        if not wallet.is_connected or identity is None or not wallet.can_sign:
            logger.warning("Wallet not connected or cannot sign, nothing swapped")
            return

        planned = self.plan(holdings, selection)
        logger.info("Sweeping %d selected holdings", len(planned))

        for holding in planned:
            if cancel is not None and cancel.is_set():
                yield SwapOutcome(
                    mint=holding.mint,
                    succeeded=False,
                    stage=SwapStage.PENDING,
                    error="cancelled",
                )
                continue
            yield await self._swap_one(holding, identity)

    async def run(
        self,
        holdings: list[HoldingRecord],
        selection: Collection[str],
        cancel: asyncio.Event | None = None,
    ) -> list[SwapOutcome]:
        return [
            outcome
            async for outcome in self.iter_outcomes(holdings, selection, cancel)
        ]
