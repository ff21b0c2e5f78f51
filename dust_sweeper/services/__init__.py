"""Service modules."""
from .discovery import HoldingsDiscovery
from .orchestrator import SwapOrchestrator
from .selection import SelectionSet
from .sweeper import Sweeper
from .valuation import ValuationEngine

__all__ = [
    "HoldingsDiscovery",
    "SelectionSet",
    "SwapOrchestrator",
    "Sweeper",
    "ValuationEngine",
]
