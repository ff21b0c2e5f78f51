"""Wallet sessions."""
from .keypair import KeypairWallet, WatchOnlyWallet, load_wallet

__all__ = ["KeypairWallet", "WatchOnlyWallet", "load_wallet"]
