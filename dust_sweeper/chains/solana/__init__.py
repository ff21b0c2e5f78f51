"""Solana chain support."""
from .client import SolanaClient
from .transaction import Transaction

__all__ = ["SolanaClient", "Transaction"]
