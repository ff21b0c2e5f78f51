"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from enum import Enum


@dataclass(frozen=True)
class HoldingRecord:
    """A positive balance of one token account owned by the wallet."""

    account: str
    mint: str
    raw_amount: int
    decimals: int
    display_amount: float

    def __post_init__(self) -> None:
        if self.raw_amount <= 0:
            raise ValueError(f"Holding {self.mint} has non-positive balance")
        if self.decimals < 0:
            raise ValueError(f"Holding {self.mint} has negative decimals")

    @property
    def minor_units(self) -> int:
        """Display amount scaled back to integer units, rounded down and
        capped at ``raw_amount``.
        """
        scaled = Decimal(str(self.display_amount)) * (Decimal(10) ** self.decimals)
        return min(int(scaled.to_integral_value(rounding=ROUND_DOWN)), self.raw_amount)


@dataclass(frozen=True)
class PricedHolding(HoldingRecord):
    """Holding plus its estimated value in the base asset."""

    base_value: float = 0.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.base_value < 0:
            raise ValueError(f"Holding {self.mint} has negative base value")

    @classmethod
    def from_holding(cls, holding: HoldingRecord, base_value: float) -> PricedHolding:
        return cls(
            account=holding.account,
            mint=holding.mint,
            raw_amount=holding.raw_amount,
            decimals=holding.decimals,
            display_amount=holding.display_amount,
            base_value=base_value,
        )


class SwapStage(str, Enum):
    """Lifecycle of a single selected holding during a sweep."""

    PENDING = "pending"
    QUOTING = "quoting"
    BUILDING = "building"
    SIGNING = "signing"
    SUBMITTING = "submitting"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SwapStage.CONFIRMED, SwapStage.FAILED)


@dataclass(frozen=True)
class SwapOutcome:
    """Result of one holding's swap.

    ``stage`` is CONFIRMED on success, otherwise the stage that failed.
    """

    mint: str
    succeeded: bool
    stage: SwapStage
    signature: str | None = None
    error: str | None = None

    @property
    def final_stage(self) -> SwapStage:
        return SwapStage.CONFIRMED if self.succeeded else SwapStage.FAILED
