"""
Sidebar with tools, tool options, the asset lists and the selection panel.
"""
from typing import Dict, List, Optional

from PyQt5.QtCore import Qt, QSize, pyqtSignal
from PyQt5.QtGui import QColor, QIcon, QPixmap
from PyQt5.QtWidgets import (
    QButtonGroup, QColorDialog, QComboBox, QFrame, QHBoxLayout, QLabel,
    QListWidget, QListWidgetItem, QPlainTextEdit, QPushButton, QToolButton,
    QVBoxLayout,
)

from inkstamp.core.annotations import Asset, PlacedElement, ToolType
from inkstamp.core.document.image_worker import ImagePreloader
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)

TOOL_LABELS = {
    ToolType.SELECT: "Select",
    ToolType.TEXT: "Text",
    ToolType.HIGHLIGHT: "Highlight",
}


class ToolPanel(QFrame):
    """Left-hand panel of the editor window."""

    # Signals
    tool_selected = pyqtSignal(object)  # ToolType
    pending_text_changed = pyqtSignal(str)
    font_size_changed = pyqtSignal(int)
    highlight_color_changed = pyqtSignal(str)
    asset_chosen = pyqtSignal(object)  # Asset
    delete_requested = pyqtSignal()

    def __init__(self, settings: EditorSettings, images: ImagePreloader, parent=None):
        super().__init__(parent)
        self.setObjectName("ToolPanel")
        self.setFixedWidth(260)
        self.settings = settings
        self.images = images
        self.images.image_ready.connect(self._on_image_ready)

        self._tool_buttons: Dict[ToolType, QToolButton] = {}
        self._swatch_buttons: List[QToolButton] = []
        self._assets: Dict[int, Asset] = {}
        self._items_by_url: Dict[str, List[QListWidgetItem]] = {}

        self._setup_ui()

    def _section(self, layout: QVBoxLayout, title: str) -> None:
        label = QLabel(title)
        label.setObjectName("SectionLabel")
        layout.addWidget(label)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        # Tools
        self._section(layout, "Tools")
        tools_row = QHBoxLayout()
        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(True)
        for tool, label in TOOL_LABELS.items():
            button = QToolButton()
            button.setText(label)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, t=tool: self.tool_selected.emit(t))
            self._tool_group.addButton(button)
            self._tool_buttons[tool] = button
            tools_row.addWidget(button)
        layout.addLayout(tools_row)

        # Text options
        self._section(layout, "Text")
        self.text_input = QPlainTextEdit()
        self.text_input.setPlaceholderText("Type text, then click on the page")
        self.text_input.setFixedHeight(70)
        self.text_input.textChanged.connect(
            lambda: self.pending_text_changed.emit(self.text_input.toPlainText()))
        layout.addWidget(self.text_input)

        size_row = QHBoxLayout()
        size_row.addWidget(QLabel("Font size"))
        self.font_size_combo = QComboBox()
        for size in self.settings.font_sizes:
            self.font_size_combo.addItem(f"{size}px", size)
        default_index = self.font_size_combo.findData(self.settings.default_font_size)
        self.font_size_combo.setCurrentIndex(max(0, default_index))
        self.font_size_combo.currentIndexChanged.connect(
            lambda index: self.font_size_changed.emit(self.font_size_combo.itemData(index)))
        size_row.addWidget(self.font_size_combo)
        layout.addLayout(size_row)

        # Highlight colours
        self._section(layout, "Highlight colour")
        swatch_row = QHBoxLayout()
        self._swatch_group = QButtonGroup(self)
        self._swatch_group.setExclusive(False)
        for color in self.settings.highlight_colors:
            swatch_row.addWidget(self._make_swatch(color))
        custom_button = QToolButton()
        custom_button.setText("...")
        custom_button.setToolTip("Pick a custom colour")
        custom_button.clicked.connect(self._pick_custom_color)
        swatch_row.addWidget(custom_button)
        swatch_row.addStretch()
        layout.addLayout(swatch_row)

        # Assets
        self._section(layout, "Stamps")
        self.stamp_list = self._make_asset_list()
        layout.addWidget(self.stamp_list)

        self._section(layout, "Signatures")
        self.signature_list = self._make_asset_list()
        layout.addWidget(self.signature_list)

        # Selection
        self._section(layout, "Selected")
        self.selection_label = QLabel("Nothing selected")
        self.selection_label.setWordWrap(True)
        layout.addWidget(self.selection_label)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setEnabled(False)
        self.delete_button.clicked.connect(self.delete_requested.emit)
        layout.addWidget(self.delete_button)

        layout.addStretch()

        self.count_label = QLabel()
        layout.addWidget(self.count_label)

        self.set_tool(ToolType.SELECT)
        self.set_highlight_color(self.settings.default_highlight_color)

    def _make_swatch(self, color: str) -> QToolButton:
        button = QToolButton()
        button.setCheckable(True)
        button.setFixedSize(24, 24)
        button.setToolTip(color)
        button.setProperty("swatchColor", color)
        button.setStyleSheet(
            f"QToolButton {{ background-color: {color}; border: 1px solid #999; border-radius: 4px; }}"
            f"QToolButton:checked {{ border: 2px solid #2563eb; }}")
        button.clicked.connect(lambda _checked, c=color: self._choose_color(c))
        self._swatch_group.addButton(button)
        self._swatch_buttons.append(button)
        return button

    def _make_asset_list(self) -> QListWidget:
        asset_list = QListWidget()
        asset_list.setIconSize(QSize(48, 48))
        asset_list.setMaximumHeight(140)
        asset_list.itemClicked.connect(self._on_asset_clicked)
        return asset_list

    # Updates from the window

    def set_assets(self, stamps: List[Asset], signatures: List[Asset]) -> None:
        """Fill both asset lists; thumbnails appear as their images arrive."""
        self._assets.clear()
        self._items_by_url.clear()
        for asset_list, assets in ((self.stamp_list, stamps), (self.signature_list, signatures)):
            asset_list.clear()
            for asset in assets:
                item = QListWidgetItem(asset.display_name)
                key = len(self._assets)
                item.setData(Qt.UserRole, key)
                self._assets[key] = asset
                self._items_by_url.setdefault(asset.image_url, []).append(item)
                asset_list.addItem(item)
            if not assets:
                placeholder = QListWidgetItem("None available")
                placeholder.setFlags(Qt.NoItemFlags)
                asset_list.addItem(placeholder)

        urls = list(self._items_by_url)
        self.images.request(urls)
        for url in urls:
            if self.images.get(url) is not None:
                self._on_image_ready(url)

    def _on_image_ready(self, url: str) -> None:
        items = self._items_by_url.get(url)
        if not items:
            return
        pixmap = QPixmap()
        if not pixmap.loadFromData(self.images.get(url)):
            logger.warning(f"Thumbnail {url} is not displayable")
            return
        icon = QIcon(pixmap)
        for item in items:
            item.setIcon(icon)

    def set_tool(self, tool: ToolType) -> None:
        button = self._tool_buttons.get(tool)
        if button and not button.isChecked():
            button.setChecked(True)

    def set_highlight_color(self, color: str) -> None:
        for button in self._swatch_buttons:
            button.setChecked(button.property("swatchColor") == color)

    def clear_pending_text(self) -> None:
        if self.text_input.toPlainText():
            self.text_input.clear()

    def set_selection(self, element: Optional[PlacedElement]) -> None:
        if element is None:
            self.selection_label.setText("Nothing selected")
            self.delete_button.setEnabled(False)
            return

        name = element.asset.display_name if element.asset else element.type.value.capitalize()
        self.selection_label.setText(
            f"{name} on page {element.page}\n"
            f"{element.width:.0f} x {element.height:.0f} at ({element.x:.0f}, {element.y:.0f})")
        self.delete_button.setEnabled(True)

    def set_counts(self, total: int, on_page: int) -> None:
        self.count_label.setText(f"{total} elements ({on_page} on this page)")

    # Internal handlers

    def _choose_color(self, color: str) -> None:
        self.set_highlight_color(color)
        self.highlight_color_changed.emit(color)

    def _pick_custom_color(self) -> None:
        color = QColorDialog.getColor(QColor(self.settings.default_highlight_color), self,
                                      "Highlight colour")
        if color.isValid():
            self._choose_color(color.name())

    def _on_asset_clicked(self, item: QListWidgetItem) -> None:
        asset = self._assets.get(item.data(Qt.UserRole))
        if asset is not None:
            self.asset_chosen.emit(asset)
