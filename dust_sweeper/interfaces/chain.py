"""Chain connection protocol — the read/submit side of a Solana RPC node."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..chains.solana.transaction import Transaction


class ChainConnection(Protocol):
    """Abstract interface for the chain-state provider used by a wallet session."""

    async def get_parsed_token_accounts_by_owner(
        self, owner: str, program_id: str
    ) -> list[dict[str, Any]]: ...

    def deserialize_transaction(self, raw: bytes) -> Transaction: ...

    async def send_raw_transaction(self, raw: bytes) -> str: ...

    async def confirm_transaction(
        self, signature: str, timeout: float | None = None
    ) -> str: ...
