"""Sweep session wiring discovery, valuation, selection and swapping."""
from __future__ import annotations

import asyncio
import logging

from ..aggregators import JupiterClient
from ..config import AppConfig
from ..interfaces.aggregator import SwapAggregator
from ..interfaces.notifier import Notifier
from ..interfaces.wallet import WalletSession
from ..models import PricedHolding, SwapOutcome
from ..notifications import TelegramNotifier
from .discovery import HoldingsDiscovery
from .orchestrator import SwapOrchestrator
from .report import format_sweep_report
from .selection import SelectionSet
from .valuation import ValuationEngine

logger = logging.getLogger(__name__)


class Sweeper:
    """Holds the latest valued snapshot and the user's selection for one wallet."""

    def __init__(
        self,
        config: AppConfig,
        wallet: WalletSession,
        aggregator: SwapAggregator | None = None,
        notifiers: list[Notifier] | None = None,
    ) -> None:
        self._config = config
        self._wallet = wallet
        self._aggregator: SwapAggregator = aggregator or JupiterClient(config.aggregator)

        self._discovery = HoldingsDiscovery(
            wallet.connection, config.chain.token_program_id
        )
        self._valuation = ValuationEngine(self._aggregator, config.sweep)
        self._orchestrator = SwapOrchestrator(wallet, self._aggregator, config.sweep)

        if notifiers is None:
            notifiers = []
            if config.notifications.telegram.enabled:
                notifiers.append(TelegramNotifier(config.notifications.telegram))
        self._notifiers = notifiers

        self._holdings: list[PricedHolding] = []
        self.selection = SelectionSet()

    @property
    def holdings(self) -> list[PricedHolding]:
        return list(self._holdings)

    @property
    def wallet_identity(self) -> str | None:
        return self._wallet.identity

    # ------------------------------------------------------------------
    # Discovery and selection
    # ------------------------------------------------------------------

    async def refresh(self) -> list[PricedHolding]:
        """Re-discover and re-value holdings, replacing the snapshot wholesale.

        Without a wallet identity the current snapshot is returned unchanged.
        DiscoveryError propagates and leaves the previous snapshot in place.
        """
        owner = self._wallet.identity
        if owner is None:
            logger.info("Wallet has no identity yet, keeping current holdings")
            return self.holdings

        discovered = await self._discovery.discover(owner)
        self._holdings = await self._valuation.value(discovered)

        stale = self.selection.reconcile(h.mint for h in self._holdings)
        if stale:
            logger.info("Dropped %d stale selections: %s", len(stale), ", ".join(sorted(stale)))

        return self.holdings

    def toggle(self, mint: str) -> bool:
        return self.selection.toggle(mint)

    def select_all(
        self, min_value: float | None = None, max_value: float | None = None
    ) -> int:
        """Select every holding whose base value lies within the bounds."""
        count = 0
        for h in self._holdings:
            if min_value is not None and h.base_value < min_value:
                continue
            if max_value is not None and h.base_value > max_value:
                continue
            self.selection.select(h.mint)
            count += 1
        return count

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _notify(self, message: str, silent: bool) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.notify(message, silent=silent)
            except Exception as e:
                logger.error("Notifier failed: %s", e)

    # ------------------------------------------------------------------
    # Sweeping
    # ------------------------------------------------------------------

    async def sweep(self, cancel: asyncio.Event | None = None) -> list[SwapOutcome]:
        """Swap the selected holdings of the current snapshot."""
        outcomes = await self._orchestrator.run(self._holdings, self.selection, cancel)
        if not outcomes:
            return outcomes

        failed = [o for o in outcomes if not o.succeeded]
        logger.info(
            "Sweep finished: %d swapped, %d failed", len(outcomes) - len(failed), len(failed)
        )
        for outcome in failed:
            logger.warning(
                "Not swapped: %s at %s (%s)", outcome.mint, outcome.stage.value, outcome.error
            )

        await self._notify(
            format_sweep_report(outcomes, self.wallet_identity), silent=not failed
        )
        return outcomes
