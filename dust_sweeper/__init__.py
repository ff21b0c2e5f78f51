"""Dust sweeper - swap many small Solana token balances into SOL in one batch."""

__version__ = "0.1.0"
