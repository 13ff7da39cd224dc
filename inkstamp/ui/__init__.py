"""
User interface components.
"""
from .windows.editor_window import EditorWindow

__all__ = ['EditorWindow']
