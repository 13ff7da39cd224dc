"""
In-memory store of placed elements and the current selection.
"""
import copy
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from .models import PlacedElement


class AnnotationStore:
    """Holds every placed element of the open document, in insertion (paint) order."""

    def __init__(self, page_count: int = 0):
        self._elements: List[PlacedElement] = []
        self._selected_id: Optional[str] = None
        self.page_count = page_count
        self._listeners: List[Callable[[], None]] = []

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every change to elements or selection."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback()

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[PlacedElement]:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, element_id: str) -> bool:
        return self.get(element_id) is not None

    def get(self, element_id: str) -> Optional[PlacedElement]:
        for element in self._elements:
            if element.id == element_id:
                return element
        return None

    def add(self, element: PlacedElement) -> None:
        """
        Append an element.

        Args:
            element: Element to add

        Raises:
            ValueError: If the id is already used or the page does not exist
        """
        if element.id in self:
            raise ValueError(f"Duplicate element id '{element.id}'")
        if self.page_count and not 1 <= element.page <= self.page_count:
            raise ValueError(f"Page {element.page} is outside the document (1-{self.page_count})")

        self._elements.append(element)
        self._notify()

    def update(self, element_id: str, **patch: Any) -> PlacedElement:
        """
        Replace fields of an existing element.

        Args:
            element_id: Element to change
            **patch: Field values to set

        Returns:
            The updated element

        Raises:
            KeyError: If no element has this id
        """
        for index, element in enumerate(self._elements):
            if element.id == element_id:
                updated = replace(element, **patch)
                self._elements[index] = updated
                self._notify()
                return updated
        raise KeyError(element_id)

    def remove(self, element_id: str) -> bool:
        """
        Remove an element, clearing the selection if it pointed at it.

        Returns:
            True if an element was removed
        """
        for index, element in enumerate(self._elements):
            if element.id == element_id:
                del self._elements[index]
                if self._selected_id == element_id:
                    self._selected_id = None
                self._notify()
                return True
        return False

    def list(self, page: Optional[int] = None) -> List[PlacedElement]:
        """Elements in paint order, optionally restricted to one page."""
        if page is None:
            return list(self._elements)
        return [e for e in self._elements if e.page == page]

    def snapshot(self) -> List[PlacedElement]:
        """Independent deep copy of every element, for the undo history."""
        return copy.deepcopy(self._elements)

    def count_by_page(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for element in self._elements:
            counts[element.page] = counts.get(element.page, 0) + 1
        return counts

    def select(self, element_id: Optional[str]) -> None:
        if element_id is not None and element_id not in self:
            raise KeyError(element_id)
        if element_id != self._selected_id:
            self._selected_id = element_id
            self._notify()

    def replace_all(self, elements: List[PlacedElement]) -> None:
        """Swap in a whole element list, as undo does. Clears the selection."""
        self._elements = list(elements)
        self._selected_id = None
        self._notify()

    def clear(self) -> None:
        self.replace_all([])
