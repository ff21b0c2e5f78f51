"""Swap aggregator protocol — quoting and transaction building."""
from typing import Any, Protocol


class SwapAggregator(Protocol):
    """Abstract interface for a quote/swap routing service."""

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        fee_bps: int | None = None,
    ) -> dict[str, Any]: ...

    async def build_swap_transaction(
        self,
        route: dict[str, Any],
        user_public_key: str,
        fee_account: str,
        wrap_unwrap_sol: bool = True,
    ) -> bytes: ...
