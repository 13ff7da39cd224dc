"""
Event-loop scheduling of page renders.
"""
from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from inkstamp.core.errors import EditorError
from inkstamp.utils.logging_service import get_logger

from .renderer import DocumentRenderer, RenderTicket

logger = get_logger(__name__)


class RenderTask(QObject):
    """
    Runs page renders on the UI event loop, one at a time.

    Requesting a render supersedes the previous request, so only the
    latest page and zoom ever reach the surface.
    """

    rendered = pyqtSignal(object)  # RenderedPage
    failed = pyqtSignal(object)  # RenderError

    def __init__(self, renderer: DocumentRenderer, parent=None):
        super().__init__(parent)
        self._renderer = renderer

    def request(self, page_number: int, scale: float) -> RenderTicket:
        ticket = self._renderer.begin_render()
        QTimer.singleShot(0, lambda: self._run(ticket, page_number, scale))
        return ticket

    def cancel(self) -> None:
        self._renderer.cancel()

    def _run(self, ticket: RenderTicket, page_number: int, scale: float) -> None:
        if ticket.cancelled:
            logger.debug(f"Render of page {page_number} superseded before start")
            return

        try:
            result = self._renderer.render_page(page_number, scale, ticket)
        except EditorError as e:
            logger.error(str(e))
            self.failed.emit(e)
            return

        if result is None:
            logger.debug(f"Render of page {page_number} superseded")
            return

        self.rendered.emit(result)
