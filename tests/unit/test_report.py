"""Unit tests for report formatting."""
from __future__ import annotations

from dust_sweeper.models import PricedHolding, SwapOutcome, SwapStage
from dust_sweeper.services.report import (
    format_holdings,
    format_sweep_report,
    short_address,
)


class TestShortAddress:
    def test_long_address_shortened(self) -> None:
        assert short_address("So11111111111111111111111111111111111111112") == "So1111...1112"

    def test_short_value_untouched(self) -> None:
        assert short_address("abc") == "abc"


class TestFormatHoldings:
    def test_empty(self) -> None:
        assert format_holdings([]) == "No token balances found."

    def test_rows_markers_and_total(self, priced_holdings: list[PricedHolding]) -> None:
        mint_a = priced_holdings[0].mint
        text = format_holdings(priced_holdings, selected={mint_a})
        lines = text.splitlines()

        assert "Base value" in lines[0]
        assert len(lines) == len(priced_holdings) + 2
        assert lines[1].startswith("* " + mint_a)
        assert lines[2].startswith("  " + priced_holdings[1].mint)
        assert lines[-1].strip().startswith("Total")
        assert lines[-1].endswith("1.270000")


class TestFormatSweepReport:
    def test_counts_and_lines(self) -> None:
        outcomes = [
            SwapOutcome(
                mint="MintAAAAAAAAAAAAAAAAAAAA", succeeded=True,
                stage=SwapStage.CONFIRMED, signature="5igSig",
            ),
            SwapOutcome(
                mint="MintBBBBBBBBBBBBBBBBBBBB", succeeded=False,
                stage=SwapStage.BUILDING, error="SwapBuildError: stale route",
            ),
        ]
        text = format_sweep_report(outcomes, wallet="WalletXXXXXXXXXXXXXXXXXXXX1234")

        assert text.startswith("🧹 Dust sweep · Wallet...1234")
        assert "Swapped: 1 · Failed: 1" in text
        assert "✅ MintAA...AAAA  5igSig" in text
        assert "❌ MintBB...BBBB  [building] SwapBuildError: stale route" in text
        assert text.rstrip().endswith("UTC")

    def test_no_wallet(self) -> None:
        text = format_sweep_report([])
        assert text.splitlines()[0] == "🧹 Dust sweep"
        assert "Swapped: 0 · Failed: 0" in text
