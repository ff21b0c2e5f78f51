"""Notifier protocol — notification channel abstraction."""
from typing import Protocol


class Notifier(Protocol):
    """Abstract interface for sending sweep reports."""

    async def notify(self, message: str, silent: bool = False) -> bool: ...
