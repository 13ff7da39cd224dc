"""
Inkstamp: an interactive PDF annotation editor.

Places stamps, signatures, free text and highlights on top of rendered
PDF pages and bakes them into a new PDF byte stream.
"""

__version__ = "0.1.0"
