"""
Controller for the current page and zoom level.
"""
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from inkstamp.utils.config_service import EditorSettings


class ViewController(QObject):
    """Tracks which page is shown and at what zoom."""

    # Signals
    page_changed = pyqtSignal(int)  # 1-based page number
    zoom_changed = pyqtSignal(float)  # render scale

    def __init__(self, settings: Optional[EditorSettings] = None):
        super().__init__()
        self.settings = settings or EditorSettings()

        self.current_page: int = 1
        self.page_count: int = 0
        self.zoom_level: float = self.settings.default_zoom

    def set_document_info(self, page_count: int) -> None:
        """
        Reset the view for a newly loaded document.

        Args:
            page_count: Number of pages in the document
        """
        self.page_count = page_count
        self.current_page = 1
        self.zoom_level = self.clamp_zoom(self.settings.default_zoom)

    def clamp_zoom(self, zoom: float) -> float:
        """Snap a zoom value to the step grid and keep it within bounds."""
        step = self.settings.zoom_step
        snapped = round(zoom / step) * step
        return max(self.settings.min_zoom, min(snapped, self.settings.max_zoom))

    def set_zoom(self, zoom: float) -> float:
        """
        Set the render scale.

        Args:
            zoom: Requested scale, 1.0 being actual size

        Returns:
            The scale actually applied
        """
        new_zoom = self.clamp_zoom(zoom)
        if new_zoom != self.zoom_level:
            self.zoom_level = new_zoom
            self.zoom_changed.emit(new_zoom)
        return self.zoom_level

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom_level + self.settings.zoom_step)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom_level - self.settings.zoom_step)

    def can_zoom_in(self) -> bool:
        return self.zoom_level < self.settings.max_zoom

    def can_zoom_out(self) -> bool:
        return self.zoom_level > self.settings.min_zoom

    def get_zoom_percent(self) -> int:
        return int(round(self.zoom_level * 100))

    def jump_to_page(self, page_num: int) -> bool:
        """
        Show a specific page.

        Args:
            page_num: 1-based page number

        Returns:
            True if the page changed
        """
        if not (1 <= page_num <= self.page_count) or page_num == self.current_page:
            return False
        self.current_page = page_num
        self.page_changed.emit(page_num)
        return True

    def next_page(self) -> bool:
        return self.jump_to_page(self.current_page + 1)

    def prev_page(self) -> bool:
        return self.jump_to_page(self.current_page - 1)

    def can_go_next(self) -> bool:
        return self.current_page < self.page_count

    def can_go_prev(self) -> bool:
        return self.current_page > 1
