"""
Editor side panels.
"""
from .tool_panel import ToolPanel

__all__ = ['ToolPanel']
