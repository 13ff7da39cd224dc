"""
Placed elements, their store and undo history.
"""
from .models import Asset, ElementType, Handle, PlacedElement, ToolType, new_element_id
from .store import AnnotationStore
from .history import HistoryManager

__all__ = [
    'Asset',
    'ElementType',
    'Handle',
    'PlacedElement',
    'ToolType',
    'new_element_id',
    'AnnotationStore',
    'HistoryManager',
]
