from typing import Callable, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QMainWindow, QMessageBox, QPushButton,
    QScrollArea, QStackedWidget, QToolButton, QVBoxLayout, QWidget,
)

from inkstamp.controllers.editor_controller import EditorController
from inkstamp.controllers.input_handler import UserInputHandler
from inkstamp.core.assets import AssetCatalog
from inkstamp.core.document.image_worker import ImagePreloader
from inkstamp.core.document.render_task import RenderTask
from inkstamp.core.errors import EditorError, user_message
from inkstamp.styles import ThemeManager
from inkstamp.ui.toolbars.tool_panel import ToolPanel
from inkstamp.ui.widgets.page_canvas import PageCanvas
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)

PAGE_VIEW, MESSAGE_VIEW = 0, 1


class EditorWindow(QMainWindow):
    """
    Annotation editor for a single document.

    The host supplies the document bytes, the asset catalog and a save
    callback; the window closes once the callback accepts the result.
    """

    def __init__(self, on_save: Callable[[bytes], None],
                 settings: Optional[EditorSettings] = None,
                 catalog: Optional[AssetCatalog] = None,
                 dark_mode: bool = False):
        super().__init__()
        self.setWindowTitle("Inkstamp")
        self.settings = settings or EditorSettings()
        self.catalog = catalog or AssetCatalog()
        self.dark_mode = dark_mode

        self.controller = EditorController(on_save, self.settings)
        self.input_handler = UserInputHandler(self.controller)
        self.render_task = RenderTask(self.controller.renderer, self)
        self.images = ImagePreloader(self.controller.image_loader, self)

        self.setup_ui()
        ThemeManager.apply_theme(self, dark_mode)
        self._connect_signals()

    # UI setup

    def setup_ui(self):
        central = QWidget()
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.tool_panel = ToolPanel(self.settings, self.images)
        self.tool_panel.set_assets(self.catalog.stamps, self.catalog.signatures)
        root.addWidget(self.tool_panel)

        main_column = QVBoxLayout()
        main_column.setContentsMargins(0, 0, 0, 0)
        main_column.setSpacing(0)
        main_column.addWidget(self._create_top_bar())

        self.stack = QStackedWidget()

        self.scroll_area = QScrollArea()
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.canvas = PageCanvas(self.settings, self.images)
        self.canvas.theme = ThemeManager.get_theme_colors(self.dark_mode)
        self.canvas.input_handler = self.input_handler
        self.scroll_area.setWidget(self.canvas)
        self.stack.addWidget(self.scroll_area)

        self.message_label = QLabel()
        self.message_label.setObjectName("ErrorLabel")
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        self.stack.addWidget(self.message_label)

        main_column.addWidget(self.stack, 1)
        root.addLayout(main_column, 1)
        self.setCentralWidget(central)

    def _create_top_bar(self) -> QFrame:
        frame = QFrame()
        frame.setObjectName("TopFrame")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(10, 6, 10, 6)

        self.title_label = QLabel("Edit document")
        self.title_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.title_label)
        layout.addStretch()

        self.undo_button = self._tool_button("Undo", "Undo (Ctrl+Z)", self.controller.undo)
        layout.addWidget(self.undo_button)
        layout.addSpacing(12)

        self.zoom_out_button = self._tool_button("-", "Zoom out", self.controller.view.zoom_out)
        self.zoom_label = QLabel("100%")
        self.zoom_label.setMinimumWidth(48)
        self.zoom_label.setAlignment(Qt.AlignCenter)
        self.zoom_in_button = self._tool_button("+", "Zoom in", self.controller.view.zoom_in)
        layout.addWidget(self.zoom_out_button)
        layout.addWidget(self.zoom_label)
        layout.addWidget(self.zoom_in_button)
        layout.addSpacing(12)

        self.prev_button = self._tool_button("<", "Previous page", self.controller.view.prev_page)
        self.page_label = QLabel("- / -")
        self.page_label.setMinimumWidth(60)
        self.page_label.setAlignment(Qt.AlignCenter)
        self.next_button = self._tool_button(">", "Next page", self.controller.view.next_page)
        layout.addWidget(self.prev_button)
        layout.addWidget(self.page_label)
        layout.addWidget(self.next_button)
        layout.addSpacing(12)

        self.save_button = QPushButton("Save and validate")
        self.save_button.setObjectName("SaveButton")
        self.save_button.clicked.connect(self.save)
        layout.addWidget(self.save_button)

        close_button = QPushButton("Close")
        close_button.clicked.connect(self.close)
        layout.addWidget(close_button)

        return frame

    def _tool_button(self, text: str, tooltip: str, slot) -> QToolButton:
        button = QToolButton()
        button.setText(text)
        button.setToolTip(tooltip)
        button.clicked.connect(lambda: slot())
        return button

    def _connect_signals(self):
        controller = self.controller
        controller.annotations_changed.connect(self.refresh_overlay)
        controller.view_changed.connect(self._on_view_changed)
        controller.error_occurred.connect(self._on_error)
        controller.saved.connect(self._on_saved)

        self.render_task.rendered.connect(self._on_page_rendered)
        self.render_task.failed.connect(self._on_render_failed)

        panel = self.tool_panel
        panel.tool_selected.connect(self._on_tool_selected)
        panel.pending_text_changed.connect(controller.set_pending_text)
        panel.font_size_changed.connect(controller.set_font_size)
        panel.highlight_color_changed.connect(controller.set_highlight_color)
        panel.asset_chosen.connect(controller.add_asset)
        panel.delete_requested.connect(controller.delete_selected)

    # Document lifecycle

    def open_document(self, data: bytes, label: str = "") -> bool:
        """
        Load a document into the editor.

        Args:
            data: Original PDF bytes
            label: Name shown in the title bar

        Returns:
            True if the document loaded
        """
        if label:
            self.title_label.setText(f"Edit document: {label}")
            self.setWindowTitle(f"Inkstamp - {label}")

        if not self.controller.open_document(data, label):
            return False

        self.stack.setCurrentIndex(PAGE_VIEW)
        self._on_view_changed()
        return True

    def closeEvent(self, event):
        self.render_task.cancel()
        self.images.stop()
        self.controller.close()
        super().closeEvent(event)

    def keyPressEvent(self, event):
        if not self.input_handler.handle_key_press(event):
            super().keyPressEvent(event)

    # Refresh

    def request_render(self) -> None:
        view = self.controller.view
        self.render_task.request(view.current_page, view.zoom_level)

    def refresh_overlay(self) -> None:
        controller = self.controller
        engine = controller.engine
        store = controller.store

        self.canvas.set_overlay(store.list(controller.view.current_page),
                                store.selected_id, engine.tool)
        self.tool_panel.set_tool(engine.tool)
        self.tool_panel.set_selection(store.selected)
        if not engine.pending_text:
            self.tool_panel.clear_pending_text()

        total, on_page = controller.element_counts()
        self.tool_panel.set_counts(total, on_page)

        self.undo_button.setEnabled(controller.can_undo())
        self.undo_button.setToolTip(f"Undo (Ctrl+Z), {len(controller.history)} steps available")

    def _update_navigation(self) -> None:
        view = self.controller.view
        loaded = self.controller.is_loaded
        self.page_label.setText(f"{view.current_page} / {view.page_count}" if loaded else "- / -")
        self.zoom_label.setText(f"{view.get_zoom_percent()}%")
        self.prev_button.setEnabled(loaded and view.can_go_prev())
        self.next_button.setEnabled(loaded and view.can_go_next())
        self.zoom_in_button.setEnabled(loaded and view.can_zoom_in())
        self.zoom_out_button.setEnabled(loaded and view.can_zoom_out())
        self.save_button.setEnabled(loaded)

    # Slots

    def _on_view_changed(self) -> None:
        self._update_navigation()
        if self.controller.is_loaded:
            self.request_render()
        self.refresh_overlay()

    def _on_tool_selected(self, tool) -> None:
        self.controller.set_tool(tool)
        self.refresh_overlay()

    def _on_page_rendered(self, rendered) -> None:
        self.canvas.set_rendered_page(rendered)
        self.refresh_overlay()

    def _on_render_failed(self, error: EditorError) -> None:
        self.canvas.set_error(user_message(error))

    def _on_error(self, error: EditorError) -> None:
        if error.category == "load":
            self.message_label.setText(user_message(error))
            self.stack.setCurrentIndex(MESSAGE_VIEW)
            self._update_navigation()
        elif error.category == "render":
            self.canvas.set_error(user_message(error))
        else:
            QMessageBox.warning(self, "Save failed", user_message(error))

    def _on_saved(self, result) -> None:
        if result.failures:
            QMessageBox.information(
                self, "Saved",
                f"The document was saved, but {len(result.failures)} annotation(s) "
                f"could not be added and were skipped.")
        self.close()

    def save(self) -> bool:
        self.save_button.setEnabled(False)
        try:
            return self.controller.save()
        finally:
            self.save_button.setEnabled(self.controller.is_loaded)
