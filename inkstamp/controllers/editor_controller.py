"""
Controller for one editing session: load a document, edit its
annotations, and hand the baked result to the host.
"""
from typing import Callable, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from inkstamp.core.annotations import (
    AnnotationStore, Asset, HistoryManager, PlacedElement, ToolType,
)
from inkstamp.core.document import BakeResult, DocumentRenderer, ImageLoader, bake_document
from inkstamp.core.errors import LoadError, SaveError
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

from .interaction import GestureState, InputEvent, InteractionEngine
from .view_controller import ViewController

logger = get_logger(__name__)

SaveCallback = Callable[[bytes], None]


class EditorController(QObject):
    """Owns the renderer, the element store, the history and the interaction engine."""

    # Signals
    document_loaded = pyqtSignal(int)  # page count
    annotations_changed = pyqtSignal()  # elements or selection changed
    view_changed = pyqtSignal()  # page or zoom changed
    error_occurred = pyqtSignal(object)  # EditorError
    saved = pyqtSignal(object)  # BakeResult

    def __init__(self, on_save: SaveCallback,
                 settings: Optional[EditorSettings] = None,
                 image_loader: Optional[Callable[[str], bytes]] = None):
        super().__init__()
        self.settings = settings or EditorSettings()
        self.on_save = on_save
        self.image_loader = image_loader or ImageLoader(timeout=self.settings.image_fetch_timeout)

        self.renderer = DocumentRenderer()
        self.store = AnnotationStore()
        self.history = HistoryManager(self.settings.history_capacity)
        self.engine = InteractionEngine(self.store, self.history, self.settings)
        self.view = ViewController(self.settings)

        self.label = ""
        self.load_error: Optional[LoadError] = None
        self._original: Optional[bytes] = None

        self.store.add_listener(self.annotations_changed.emit)
        self.view.page_changed.connect(self._on_view_changed)
        self.view.zoom_changed.connect(self._on_view_changed)

    @property
    def is_loaded(self) -> bool:
        return self._original is not None

    def open_document(self, data: bytes, label: str = "") -> bool:
        """
        Start a session on a document.

        Args:
            data: Original PDF bytes, copied so the caller's buffer is never touched
            label: Name shown in the header

        Returns:
            True if the document loaded
        """
        self.close()
        self.label = label

        try:
            page_count = self.renderer.load(data)
        except LoadError as e:
            logger.error(f"Failed to load '{label}': {e}")
            self.load_error = e
            self.error_occurred.emit(e)
            return False

        self._original = bytes(data)
        self.store.page_count = page_count
        self.view.set_document_info(page_count)
        self._sync_viewport()

        logger.info(f"Opened '{label}' ({page_count} pages)")
        self.document_loaded.emit(page_count)
        return True

    def close(self) -> None:
        """End the session, dropping every placed element and snapshot."""
        self.renderer.close()
        self.history.clear()
        self.store.page_count = 0
        self.store.clear()
        self.engine.reset()
        self._original = None
        self.load_error = None

    # Viewport

    def _sync_viewport(self) -> None:
        page = self.view.current_page
        self.engine.set_viewport(page, self.renderer.page_size(page), self.view.zoom_level)

    def _on_view_changed(self, *_args) -> None:
        if self.is_loaded:
            self._sync_viewport()
        self.view_changed.emit()

    # Editing

    def handle_event(self, event: InputEvent) -> GestureState:
        previous = self.engine.state
        state = self.engine.handle(event)
        if state != previous:
            # Tool switches do not touch the store but change what is shown
            self.annotations_changed.emit()
        return state

    def set_tool(self, tool: ToolType) -> None:
        self.engine.set_tool(tool)

    def set_pending_text(self, text: str) -> None:
        self.engine.pending_text = text

    def set_font_size(self, size: float) -> None:
        self.engine.font_size = size

    def set_highlight_color(self, color: str) -> None:
        self.engine.highlight_color = color

    def add_asset(self, asset: Asset) -> Optional[PlacedElement]:
        if not self.is_loaded:
            return None
        return self.engine.add_asset(asset)

    def delete_selected(self) -> bool:
        return self.engine.delete_selected()

    def undo(self) -> bool:
        return self.engine.undo()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def element_counts(self) -> Tuple[int, int]:
        """Return (elements in the document, elements on the current page)."""
        return len(self.store), len(self.store.list(self.view.current_page))

    # Saving

    def save(self) -> bool:
        """
        Bake the annotations and pass the bytes to the save callback.

        Saving with no annotations is allowed and validates the document
        as is. On failure an error is emitted and the session is left
        untouched so the user can retry.

        Returns:
            True if the callback accepted the document
        """
        if not self.is_loaded:
            error = SaveError("No document is open")
            self.error_occurred.emit(error)
            return False

        try:
            result: BakeResult = bake_document(self._original, self.store.list(),
                                               self.image_loader, self.settings)
            self.on_save(result.data)
        except Exception as e:
            if isinstance(e, SaveError):
                error = e
            else:
                error = SaveError(str(e))
                error.__cause__ = e
            logger.error(f"Save failed: {e}")
            self.error_occurred.emit(error)
            return False

        if result.failures:
            logger.warning(f"Saved with {len(result.failures)} elements skipped")
        self.saved.emit(result)
        return True
