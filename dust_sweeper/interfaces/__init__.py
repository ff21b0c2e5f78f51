"""Protocol interfaces for the dust sweeper."""
from .aggregator import SwapAggregator
from .chain import ChainConnection
from .notifier import Notifier
from .wallet import WalletSession

__all__ = ["ChainConnection", "Notifier", "SwapAggregator", "WalletSession"]
