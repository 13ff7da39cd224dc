"""
Document loading, rendering and baking.
"""
from .renderer import DocumentRenderer, RenderedPage, RenderTicket
from .images import ImageLoader, detect_image_format
from .baker import BakeResult, bake, bake_document

__all__ = [
    'DocumentRenderer',
    'RenderedPage',
    'RenderTicket',
    'ImageLoader',
    'detect_image_format',
    'BakeResult',
    'bake',
    'bake_document',
]
