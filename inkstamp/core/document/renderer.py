"""
Page rasterisation with supersedable render tickets.
"""
from dataclasses import dataclass
from typing import Optional
import itertools

import fitz  # PyMuPDF

from inkstamp.core.errors import LoadError, RenderError
from inkstamp.core.geometry import PageSize
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)


class RenderTicket:
    """
    Identifies one render request.

    Every ticket handed out by a renderer supersedes all earlier ones.
    """

    def __init__(self, renderer: 'DocumentRenderer', token: int):
        self._renderer = renderer
        self.token = token

    @property
    def cancelled(self) -> bool:
        return self.token != self._renderer.current_token


@dataclass
class RenderedPage:
    """A rasterised page, ready to be wrapped in a QImage."""
    page_number: int
    scale: float
    samples: bytes
    width: int
    height: int
    stride: int
    page_size: PageSize


class DocumentRenderer:
    """Owns a private copy of the document and rasterises its pages."""

    def __init__(self):
        self.doc: Optional[fitz.Document] = None
        self._tokens = itertools.count(1)
        self.current_token = 0

    @property
    def page_count(self) -> int:
        return self.doc.page_count if self.doc else 0

    @property
    def is_loaded(self) -> bool:
        return self.doc is not None

    def load(self, data: bytes) -> int:
        """
        Open a document from bytes.

        Args:
            data: PDF bytes; the renderer keeps its own copy

        Returns:
            Number of pages

        Raises:
            LoadError: If the bytes are not a readable PDF
        """
        self.close()

        try:
            doc = fitz.open(stream=bytes(data), filetype="pdf")
        except Exception as e:
            raise LoadError(f"Could not open document: {e}") from e

        if doc.page_count == 0:
            doc.close()
            raise LoadError("Document has no pages")

        self.doc = doc
        logger.info(f"Loaded document with {doc.page_count} pages")
        return doc.page_count

    def page_size(self, page_number: int) -> PageSize:
        """Size of a 1-based page in document units."""
        self._check_page(page_number)
        rect = self.doc[page_number - 1].rect
        return PageSize(rect.width, rect.height)

    def begin_render(self) -> RenderTicket:
        """Start a new render request, superseding any in flight."""
        self.current_token = next(self._tokens)
        return RenderTicket(self, self.current_token)

    def cancel(self) -> None:
        """Supersede the render in flight without starting another."""
        self.current_token = next(self._tokens)

    def render_page(self, page_number: int, scale: float,
                    ticket: RenderTicket) -> Optional[RenderedPage]:
        """
        Rasterise one page.

        Args:
            page_number: 1-based page number
            scale: Zoom factor
            ticket: Ticket from ``begin_render``

        Returns:
            The rendered page, or None if the ticket was superseded

        Raises:
            RenderError: If the page cannot be rendered
        """
        if ticket.cancelled:
            return None
        self._check_page(page_number)

        try:
            page = self.doc.load_page(page_number - 1)
            if ticket.cancelled:
                return None

            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            if ticket.cancelled:
                return None
        except Exception as e:
            raise RenderError(f"Could not render page {page_number}: {e}") from e

        return RenderedPage(
            page_number=page_number,
            scale=scale,
            samples=bytes(pix.samples),
            width=pix.width,
            height=pix.height,
            stride=pix.stride,
            page_size=PageSize(page.rect.width, page.rect.height),
        )

    def close(self) -> None:
        self.cancel()
        if self.doc:
            self.doc.close()
            self.doc = None

    def _check_page(self, page_number: int) -> None:
        if not self.doc:
            raise RenderError("No document loaded")
        if not 1 <= page_number <= self.doc.page_count:
            raise RenderError(f"Page {page_number} does not exist")
