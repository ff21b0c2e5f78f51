"""Which mints the user wants swept."""
from __future__ import annotations

from collections.abc import Iterable, Iterator


class SelectionSet:
    """Set of selected mints with toggle semantics. Single writer, no I/O."""

    def __init__(self, mints: Iterable[str] = ()) -> None:
        self._mints: set[str] = set(mints)

    def toggle(self, mint: str) -> bool:
        """Flip membership; returns True if the mint is now selected."""
        if mint in self._mints:
            self._mints.discard(mint)
            return False
        self._mints.add(mint)
        return True

    def select(self, mint: str) -> None:
        self._mints.add(mint)

    def deselect(self, mint: str) -> None:
        self._mints.discard(mint)

    def clear(self) -> None:
        self._mints.clear()

    def reconcile(self, known_mints: Iterable[str]) -> frozenset[str]:
        """Drop mints not in ``known_mints``; returns the dropped ones."""
        stale = frozenset(self._mints.difference(known_mints))
        self._mints.difference_update(stale)
        return stale

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._mints)

    def __contains__(self, mint: object) -> bool:
        return mint in self._mints

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._mints))

    def __len__(self) -> int:
        return len(self._mints)

    def __repr__(self) -> str:
        return f"SelectionSet({sorted(self._mints)!r})"
