"""Discover the positive token balances owned by a wallet."""
from __future__ import annotations

import logging
import math
from typing import Any

from ..errors import DiscoveryError
from ..interfaces.chain import ChainConnection
from ..models import HoldingRecord

logger = logging.getLogger(__name__)


def parse_token_account(entry: dict[str, Any]) -> HoldingRecord | None:
    """Turn one jsonParsed token account into a HoldingRecord.

    Returns None for empty balances. Raises KeyError/TypeError/ValueError
    when the entry is not a parsed token account.
    """
    info = entry["account"]["data"]["parsed"]["info"]
    token_amount = info["tokenAmount"]

    raw_amount = int(token_amount["amount"])
    decimals = int(token_amount["decimals"])

    ui_amount_string = token_amount.get("uiAmountString")
    if ui_amount_string:
        display_amount = float(ui_amount_string)
    else:
        display_amount = raw_amount / (10 ** decimals)

    if not math.isfinite(display_amount):
        raise ValueError(f"Non-finite display amount {display_amount!r}")

    if raw_amount <= 0 or display_amount <= 0:
        return None

    return HoldingRecord(
        account=str(entry.get("pubkey", "")),
        mint=str(info["mint"]),
        raw_amount=raw_amount,
        decimals=decimals,
        display_amount=display_amount,
    )


class HoldingsDiscovery:
    """Enumerate the wallet's token accounts with a strictly positive balance."""

    def __init__(self, connection: ChainConnection, token_program_id: str) -> None:
        self._connection = connection
        self._program_id = token_program_id

    async def discover(self, owner: str | None) -> list[HoldingRecord]:
        if owner is None:
            logger.debug("No wallet identity, skipping discovery")
            return []

        try:
            accounts = await self._connection.get_parsed_token_accounts_by_owner(
                owner, self._program_id
            )
        except Exception as e:
            raise DiscoveryError(f"Token account query for {owner} failed: {e}") from e

        holdings: list[HoldingRecord] = []
        for entry in accounts:
            try:
                holding = parse_token_account(entry)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping unparseable token account %s: %s",
                    entry.get("pubkey", "?") if isinstance(entry, dict) else "?",
                    e,
                )
                continue
            if holding is not None:
                holdings.append(holding)

        logger.info(
            "Found %d non-empty token accounts (of %d) for %s",
            len(holdings), len(accounts), owner,
        )
        return holdings
