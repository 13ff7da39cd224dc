"""
Widget showing one rendered page with its placed elements on top.
"""
from typing import Dict, List, Optional

from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QColor, QFont, QImage, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import QSizePolicy, QWidget

from inkstamp.controllers.input_handler import UserInputHandler
from inkstamp.controllers.interaction import handle_positions
from inkstamp.core.annotations import ElementType, PlacedElement, ToolType
from inkstamp.core.document import RenderedPage
from inkstamp.core.document.image_worker import ImagePreloader
from inkstamp.core.geometry import Box
from inkstamp.core.text_layout import line_height, wrap_text
from inkstamp.styles import ThemeColors, ThemeManager
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)


class PageCanvas(QWidget):
    """
    Paints the page raster and an overlay of placed elements.

    The overlay is drawn from store state on every repaint; the canvas
    keeps no element state of its own. Mouse input is forwarded to a
    ``UserInputHandler``.
    """

    def __init__(self, settings: EditorSettings, images: ImagePreloader, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.images = images
        self.images.image_ready.connect(self._on_image_ready)
        self.theme: ThemeColors = ThemeManager.get_theme_colors()

        self.input_handler: Optional[UserInputHandler] = None

        # Page data
        self.page_pixmap: Optional[QPixmap] = None
        self.scale = 1.0
        self.error_message: Optional[str] = None

        # Overlay data
        self.elements: List[PlacedElement] = []
        self.selected_id: Optional[str] = None
        self.tool = ToolType.SELECT

        self._asset_pixmaps: Dict[str, QPixmap] = {}

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.ClickFocus)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

    def set_rendered_page(self, rendered: RenderedPage) -> None:
        """Show a freshly rendered page raster."""
        image = QImage(rendered.samples, rendered.width, rendered.height,
                       rendered.stride, QImage.Format_RGB888)
        self.page_pixmap = QPixmap.fromImage(image)
        self.scale = rendered.scale
        self.error_message = None
        self.setFixedSize(rendered.width, rendered.height)
        self.update()

    def set_error(self, message: str) -> None:
        self.page_pixmap = None
        self.error_message = message
        self.setFixedSize(max(self.width(), 480), max(self.height(), 240))
        self.update()

    def set_overlay(self, elements: List[PlacedElement], selected_id: Optional[str],
                    tool: ToolType) -> None:
        self.elements = elements
        self.selected_id = selected_id
        self.tool = tool
        self.setCursor(Qt.ArrowCursor if tool == ToolType.SELECT else Qt.CrossCursor)
        self.update()

    def clear(self) -> None:
        self.page_pixmap = None
        self.error_message = None
        self.elements = []
        self.selected_id = None
        self.update()

    # Painting

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        if self.error_message:
            painter.setPen(QColor(self.theme.error))
            painter.drawText(self.rect(), Qt.AlignCenter, self.error_message)
            return

        if self.page_pixmap is None:
            return

        painter.drawPixmap(0, 0, self.page_pixmap)

        for element in self.elements:
            rect = self._screen_rect(element.box)
            if element.type == ElementType.HIGHLIGHT:
                self._paint_highlight(painter, element, rect)
            elif element.type == ElementType.TEXT:
                self._paint_text(painter, element, rect)
            else:
                self._paint_asset(painter, element, rect)

            if element.id == self.selected_id:
                self._paint_selection(painter, element, rect)

    def _screen_rect(self, box: Box) -> QRectF:
        s = self.scale
        return QRectF(box.x * s, box.y * s, box.width * s, box.height * s)

    def _paint_highlight(self, painter: QPainter, element: PlacedElement, rect: QRectF) -> None:
        color = QColor(element.highlight_color or self.settings.default_highlight_color)
        color.setAlphaF(self.settings.highlight_opacity)
        painter.fillRect(rect, color)

    def _paint_text(self, painter: QPainter, element: PlacedElement, rect: QRectF) -> None:
        font_size = element.font_size or self.settings.default_font_size
        font = QFont("Helvetica")
        font.setPixelSize(max(1, int(round(font_size * self.scale))))
        painter.setFont(font)
        painter.setPen(QColor(element.color or self.settings.text_color))

        step = line_height(font_size, self.settings.line_height_factor)
        lines = wrap_text(element.text or "", element.width, font_size)
        for index, line in enumerate(lines):
            baseline = (element.y + font_size + index * step) * self.scale
            painter.drawText(QPointF(rect.left(), baseline), line)

        painter.setPen(QPen(QColor(self.theme.element_outline), 1, Qt.DashLine))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(rect)

    def _paint_asset(self, painter: QPainter, element: PlacedElement, rect: QRectF) -> None:
        pixmap = self._asset_pixmap(element)
        if pixmap is not None:
            painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))
            return

        painter.setPen(QPen(QColor(self.theme.element_outline), 1, Qt.DashLine))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(rect)
        name = element.asset.display_name if element.asset else element.type.value
        painter.drawText(rect, Qt.AlignCenter | Qt.TextWordWrap, name)

    def _asset_pixmap(self, element: PlacedElement) -> Optional[QPixmap]:
        """Pixmap for an asset element, or None while its image is still loading."""
        if element.asset is None:
            return None
        url = element.asset.image_url
        if url in self._asset_pixmaps:
            return self._asset_pixmaps[url]

        data = self.images.get(url)
        if data is None:
            return None
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            logger.warning(f"Image for '{element.asset.display_name}' is not displayable")
            return None
        self._asset_pixmaps[url] = pixmap
        return pixmap

    def _on_image_ready(self, url: str) -> None:
        self._asset_pixmaps.pop(url, None)
        if any(e.asset is not None and e.asset.image_url == url for e in self.elements):
            self.update()

    def _paint_selection(self, painter: QPainter, element: PlacedElement, rect: QRectF) -> None:
        painter.setPen(QPen(QColor(self.theme.selection_ring), 2))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(rect)

        size = self.settings.handle_size
        painter.setPen(QPen(QColor(self.theme.handle_border), 1))
        painter.setBrush(QColor(self.theme.handle_fill))
        for corner in handle_positions(element.box).values():
            painter.drawRect(QRectF(corner.x * self.scale - size / 2,
                                    corner.y * self.scale - size / 2, size, size))

    # Input

    def mousePressEvent(self, event):
        if self.input_handler and self.page_pixmap is not None:
            self.input_handler.handle_mouse_press(event)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self.input_handler and self.page_pixmap is not None:
            self.input_handler.handle_mouse_move(event)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self.input_handler and self.page_pixmap is not None:
            self.input_handler.handle_mouse_release(event)
        super().mouseReleaseEvent(event)
