"""Wallet session protocol — identity plus signing capability."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .chain import ChainConnection

if TYPE_CHECKING:
    from ..chains.solana.transaction import Transaction


class WalletSession(Protocol):
    """Abstract interface for a connected wallet."""

    @property
    def identity(self) -> str | None: ...

    @property
    def is_connected(self) -> bool: ...

    @property
    def can_sign(self) -> bool: ...

    @property
    def connection(self) -> ChainConnection: ...

    async def sign_transaction(self, tx: Transaction) -> Transaction: ...

    async def send_transaction(
        self, signed: Transaction, connection: ChainConnection
    ) -> str: ...
