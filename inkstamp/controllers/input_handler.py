"""
Translation of Qt mouse and keyboard events into interaction events.
"""
from typing import Optional

from PyQt5.QtCore import Qt, QPoint
from PyQt5.QtWidgets import QApplication, QLineEdit, QPlainTextEdit, QTextEdit, QAbstractSpinBox

from inkstamp.core.geometry import ScreenPoint

from .editor_controller import EditorController
from .interaction import Click, KeyPress, PointerDown, PointerMove, PointerUp

TEXT_INPUT_TYPES = (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox)

KEY_NAMES = {
    Qt.Key_Delete: "Delete",
    Qt.Key_Backspace: "Backspace",
}


def text_input_has_focus() -> bool:
    """Check whether keyboard focus sits in a widget that takes typed text."""
    widget = QApplication.focusWidget()
    return isinstance(widget, TEXT_INPUT_TYPES)


class UserInputHandler:
    """
    Feeds canvas mouse events and window key presses to the editor.

    A press followed by a release that moved less than the drag threshold
    is also reported as a click.
    """

    def __init__(self, controller: EditorController):
        self.controller = controller
        self._press_pos: Optional[QPoint] = None
        self._moved = False

    @staticmethod
    def _to_screen_point(pos: QPoint) -> ScreenPoint:
        return ScreenPoint(float(pos.x()), float(pos.y()))

    def handle_mouse_press(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return
        self._press_pos = event.pos()
        self._moved = False
        self.controller.handle_event(PointerDown(self._to_screen_point(event.pos())))

    def handle_mouse_move(self, event) -> None:
        if self._press_pos is None or not (event.buttons() & Qt.LeftButton):
            return
        if not self._moved:
            distance = (event.pos() - self._press_pos).manhattanLength()
            if distance < self.controller.settings.drag_threshold:
                return
            self._moved = True
        self.controller.handle_event(PointerMove(self._to_screen_point(event.pos())))

    def handle_mouse_release(self, event) -> None:
        if event.button() != Qt.LeftButton or self._press_pos is None:
            return
        point = self._to_screen_point(event.pos())
        self.controller.handle_event(PointerUp(point))
        if not self._moved:
            self.controller.handle_event(Click(point))
        self._press_pos = None
        self._moved = False

    def handle_key_press(self, event) -> bool:
        """
        Handle a key press for the editor window.

        Returns:
            True if the event was consumed
        """
        modifiers = event.modifiers()
        ctrl = bool(modifiers & Qt.ControlModifier)
        meta = bool(modifiers & Qt.MetaModifier)

        key = KEY_NAMES.get(event.key())
        if key is None and event.key() == Qt.Key_Z:
            key = "z"
        if key is None:
            event.ignore()
            return False

        focused = text_input_has_focus()
        if focused or (key == "z" and not (ctrl or meta)):
            event.ignore()
            return False

        self.controller.handle_event(KeyPress(key, ctrl=ctrl, meta=meta, text_input_focused=focused))
        event.accept()
        return True
