"""Plain-text rendering of holdings and sweep results."""
from __future__ import annotations

from collections.abc import Collection
from datetime import datetime, timezone

from ..models import PricedHolding, SwapOutcome


def short_address(address: str) -> str:
    if len(address) > 16:
        return f"{address[:6]}...{address[-4:]}"
    return address


def _now_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_holdings(
    holdings: list[PricedHolding], selected: Collection[str] = ()
) -> str:
    """One line per holding: marker, mint, amount, value in base asset."""
    if not holdings:
        return "No token balances found."

    lines = [f"{'':2}{'Mint':<46}{'Amount':>22}{'Base value':>16}"]
    for h in holdings:
        marker = "*" if h.mint in selected else " "
        lines.append(
            f"{marker:2}{h.mint:<46}{h.display_amount:>22,.6f}{h.base_value:>16.6f}"
        )
    total = sum(h.base_value for h in holdings)
    lines.append(f"{'':2}{'Total':<46}{'':>22}{total:>16.6f}")
    return "\n".join(lines)


def format_sweep_report(outcomes: list[SwapOutcome], wallet: str | None = None) -> str:
    succeeded = [o for o in outcomes if o.succeeded]
    failed = [o for o in outcomes if not o.succeeded]

    header = "🧹 Dust sweep"
    if wallet:
        header += f" · {short_address(wallet)}"

    lines = [header, "", f"Swapped: {len(succeeded)} · Failed: {len(failed)}"]

    if succeeded:
        lines.append("")
        for o in succeeded:
            lines.append(f"✅ {short_address(o.mint)}  {o.signature}")

    if failed:
        lines.append("")
        for o in failed:
            lines.append(f"❌ {short_address(o.mint)}  [{o.stage.value}] {o.error}")

    lines.extend(["", f"{_now_str()} UTC"])
    return "\n".join(lines)
