"""
Controllers connecting the editor widgets to the core logic.
"""
from .interaction import (
    Click, DrawingHighlight, Dragging, Idle, InteractionEngine, KeyPress,
    PointerDown, PointerMove, PointerUp, Resizing,
)
from .view_controller import ViewController
from .editor_controller import EditorController

__all__ = [
    'Click',
    'DrawingHighlight',
    'Dragging',
    'Idle',
    'InteractionEngine',
    'KeyPress',
    'PointerDown',
    'PointerMove',
    'PointerUp',
    'Resizing',
    'ViewController',
    'EditorController',
]
