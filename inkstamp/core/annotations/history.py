"""
Bounded snapshot history for undo.
"""
from typing import List, Optional
import copy

from .models import PlacedElement


class HistoryManager:
    """Keeps the last few element lists so that structural edits can be undone."""

    def __init__(self, capacity: int = 5):
        """
        Args:
            capacity: Maximum number of snapshots kept; the oldest is dropped first
        """
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._snapshots: List[List[PlacedElement]] = []

    def snapshot(self, elements: List[PlacedElement]) -> None:
        """
        Record the element list as it is right before a mutation.

        Args:
            elements: Current elements; stored as an independent deep copy
        """
        self._snapshots.append(copy.deepcopy(list(elements)))

        if len(self._snapshots) > self.capacity:
            self._snapshots.pop(0)

    def can_undo(self) -> bool:
        return len(self._snapshots) > 0

    def undo(self) -> Optional[List[PlacedElement]]:
        """
        Take the most recent snapshot.

        Returns:
            The element list to restore, or None when there is nothing to undo
        """
        if not self.can_undo():
            return None
        return self._snapshots.pop()

    def discard_latest(self) -> None:
        """Drop the most recent snapshot when the edit it guarded was abandoned."""
        if self._snapshots:
            self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)
