"""
Pointer and keyboard interaction with placed elements.

The engine is a state machine. Its state is one of ``Idle``, ``Dragging``,
``Resizing`` or ``DrawingHighlight``; every input event produces the next
state through ``InteractionEngine.handle``. Gesture state never leaks
outside the engine, and all geometry written to the store is clamped to
the current page.

Structural edits push a history snapshot right before the first change
they make. Pointer movement within a gesture never pushes.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from inkstamp.core.annotations import (
    AnnotationStore, Asset, ElementType, Handle, HistoryManager,
    PlacedElement, ToolType, new_element_id,
)
from inkstamp.core.geometry import (
    Box, PagePoint, PageSize, ScreenPoint, clamp,
    page_to_screen, screen_delta_to_page, screen_to_page,
)
from inkstamp.core.text_layout import Measure, helvetica_width, text_box_height
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)


# --- States -----------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    tool: ToolType = ToolType.SELECT


@dataclass(frozen=True)
class Dragging:
    element_id: str
    pointer_anchor: ScreenPoint
    element_anchor: PagePoint


@dataclass(frozen=True)
class Resizing:
    element_id: str
    handle: Handle
    pointer_anchor: ScreenPoint
    element_anchor_box: Box


@dataclass(frozen=True)
class DrawingHighlight:
    element_id: str
    anchor_point: PagePoint


GestureState = Union[Idle, Dragging, Resizing, DrawingHighlight]


# --- Events -----------------------------------------------------------------

@dataclass(frozen=True)
class PointerDown:
    point: ScreenPoint


@dataclass(frozen=True)
class PointerMove:
    point: ScreenPoint


@dataclass(frozen=True)
class PointerUp:
    point: ScreenPoint


@dataclass(frozen=True)
class Click:
    """Press and release without movement, sent after the matching PointerUp."""
    point: ScreenPoint


@dataclass(frozen=True)
class KeyPress:
    key: str  # "Delete", "Backspace" or a character such as "z"
    ctrl: bool = False
    meta: bool = False
    text_input_focused: bool = False


InputEvent = Union[PointerDown, PointerMove, PointerUp, Click, KeyPress]

DELETE_KEYS = ("Delete", "Backspace")


# --- Geometry helpers -------------------------------------------------------

def handle_position(box: Box, handle: Handle) -> PagePoint:
    """Page-space position of a corner grip."""
    x = box.x if handle.moves_left_edge else box.right
    y = box.y if handle.moves_top_edge else box.bottom
    return PagePoint(x, y)


def handle_positions(box: Box) -> Dict[Handle, PagePoint]:
    return {handle: handle_position(box, handle) for handle in Handle}


def move_box(box: Box, dx: float, dy: float, page: PageSize) -> Box:
    """Translate a box, keeping it inside the page."""
    x = clamp(box.x + dx, 0.0, page.width - box.width)
    y = clamp(box.y + dy, 0.0, page.height - box.height)
    return Box(x, y, box.width, box.height)


def _resize_axis(start: float, length: float, delta: float, moves_low_edge: bool,
                 limit: float, min_size: float) -> Tuple[float, float]:
    """Resize along one axis with the far edge fixed. Returns (position, length)."""
    if moves_low_edge:
        fixed = start + length
        size = max(min_size, fixed - (start + delta))
        size = min(size, fixed)
        return fixed - size, size

    fixed = start
    size = max(min_size, (start + length + delta) - fixed)
    size = min(size, limit - fixed)
    return fixed, size


def resize_box(box: Box, handle: Handle, dx: float, dy: float,
               page: PageSize, min_size: float) -> Box:
    """
    Resize a box by moving one corner; the diagonally opposite corner stays put.

    Sizes never drop below ``min_size`` unless the page edge leaves less
    room than that, in which case the page edge wins.

    Args:
        box: Box at the start of the gesture
        handle: Corner being dragged
        dx, dy: Pointer movement since the start, in document units
        page: Page bounds
        min_size: Smallest allowed width and height

    Returns:
        The resized box
    """
    x, width = _resize_axis(box.x, box.width, dx, handle.moves_left_edge, page.width, min_size)
    y, height = _resize_axis(box.y, box.height, dy, handle.moves_top_edge, page.height, min_size)
    return Box(x, y, width, height)


# --- Engine -----------------------------------------------------------------

class InteractionEngine:
    """Turns pointer and keyboard input into store mutations."""

    def __init__(self, store: AnnotationStore, history: HistoryManager,
                 settings: Optional[EditorSettings] = None,
                 measure: Measure = helvetica_width):
        self.store = store
        self.history = history
        self.settings = settings or EditorSettings()
        self.measure = measure

        self.state: GestureState = Idle(ToolType.SELECT)

        # Viewport
        self.page = 1
        self.page_size = PageSize(0.0, 0.0)
        self.scale = 1.0

        # Tool options
        self.pending_text = ""
        self.font_size: float = self.settings.default_font_size
        self.highlight_color = self.settings.default_highlight_color

        # Snapshot taken at pointer-down, pushed on the first real change
        self._gesture_snapshot: Optional[List[PlacedElement]] = None

    # Viewport and tools

    @property
    def tool(self) -> ToolType:
        if isinstance(self.state, Idle):
            return self.state.tool
        if isinstance(self.state, DrawingHighlight):
            return ToolType.HIGHLIGHT
        return ToolType.SELECT

    @property
    def in_gesture(self) -> bool:
        return not isinstance(self.state, Idle)

    def set_tool(self, tool: ToolType) -> GestureState:
        self._end_gesture()
        self.state = Idle(tool)
        return self.state

    def set_viewport(self, page: int, page_size: PageSize, scale: float) -> None:
        """
        Follow page navigation and zoom.

        Changing page cancels any gesture and clears a selection that
        belongs to the previous page.
        """
        if page != self.page:
            if self.in_gesture:
                self.state = Idle(ToolType.SELECT)
                self._end_gesture()
            selected = self.store.selected
            if selected is not None and selected.page != page:
                self.store.select(None)

        self.page = page
        self.page_size = page_size
        self.scale = scale

    def reset(self) -> None:
        self.state = Idle(ToolType.SELECT)
        self._gesture_snapshot = None
        self.pending_text = ""
        self.font_size = self.settings.default_font_size
        self.highlight_color = self.settings.default_highlight_color

    # Hit testing

    def hit_test(self, point: ScreenPoint) -> Optional[Tuple[str, Optional[Handle]]]:
        """
        Find what lies under a pointer position on the current page.

        Grips of the selected element are checked first, then element
        bodies from the top-most down.

        Returns:
            (element_id, handle) where handle is None for a body hit, or None
        """
        selected = self.store.selected
        if selected is not None and selected.page == self.page:
            half = self.settings.handle_size / 2.0
            for handle, corner in handle_positions(selected.box).items():
                grip = page_to_screen(corner, self.scale)
                if abs(point.x - grip.x) <= half and abs(point.y - grip.y) <= half:
                    return selected.id, handle

        page_point = screen_to_page(point, self.scale)
        for element in reversed(self.store.list(self.page)):
            if element.box.contains(page_point):
                return element.id, None
        return None

    # Event dispatch

    def handle(self, event: InputEvent) -> GestureState:
        """
        Apply one input event.

        Args:
            event: Pointer or keyboard event

        Returns:
            The new gesture state
        """
        if isinstance(event, PointerDown):
            self._on_pointer_down(event.point)
        elif isinstance(event, PointerMove):
            self._on_pointer_move(event.point)
        elif isinstance(event, PointerUp):
            self._on_pointer_up()
        elif isinstance(event, Click):
            self._on_click(event.point)
        elif isinstance(event, KeyPress):
            self._on_key_press(event)
        return self.state

    def _on_pointer_down(self, point: ScreenPoint) -> None:
        if self.in_gesture:
            return

        if self.tool == ToolType.HIGHLIGHT:
            self._begin_highlight(point)
            return

        if self.tool != ToolType.SELECT:
            return

        hit = self.hit_test(point)
        if hit is None:
            return

        element_id, handle = hit
        element = self.store.get(element_id)
        self._gesture_snapshot = self.store.snapshot()

        if handle is not None:
            self.state = Resizing(element_id, handle, point, element.box)
        else:
            self.store.select(element_id)
            self.state = Dragging(element_id, point, PagePoint(element.x, element.y))

    def _on_pointer_move(self, point: ScreenPoint) -> None:
        state = self.state
        if isinstance(state, Idle):
            return

        element = self.store.get(state.element_id)
        if element is None:
            self.state = Idle(ToolType.SELECT)
            self._end_gesture()
            return

        if isinstance(state, Dragging):
            delta = screen_delta_to_page(state.pointer_anchor, point, self.scale)
            start = Box(state.element_anchor.x, state.element_anchor.y, element.width, element.height)
            self._apply_box(element, move_box(start, delta.x, delta.y, self.page_size))
        elif isinstance(state, Resizing):
            delta = screen_delta_to_page(state.pointer_anchor, point, self.scale)
            box = resize_box(state.element_anchor_box, state.handle, delta.x, delta.y,
                             self.page_size, self.settings.min_element_size)
            self._apply_box(element, box)
        elif isinstance(state, DrawingHighlight):
            self._apply_box(element, self._highlight_box(state.anchor_point, point))

    def _on_pointer_up(self) -> None:
        state = self.state
        if isinstance(state, Idle):
            return

        if isinstance(state, DrawingHighlight):
            element = self.store.get(state.element_id)
            if element is not None and (
                element.width < self.settings.highlight_min_width
                or element.height < self.settings.highlight_min_height
            ):
                self.store.remove(element.id)
                self.history.discard_latest()
                logger.debug(f"Discarded undersized highlight {element.id}")

        self.state = Idle(ToolType.SELECT)
        self._end_gesture()

    def _on_click(self, point: ScreenPoint) -> None:
        if self.in_gesture:
            return

        if self.tool == ToolType.TEXT:
            if self.pending_text.strip():
                self._create_text(point)
            return

        if self.tool == ToolType.SELECT:
            hit = self.hit_test(point)
            self.store.select(hit[0] if hit else None)

    def _on_key_press(self, event: KeyPress) -> None:
        if event.text_input_focused:
            return

        if event.key in DELETE_KEYS:
            self.delete_selected()
        elif event.key.lower() == "z" and (event.ctrl or event.meta):
            self.undo()

    # Gestures

    def _begin_highlight(self, point: ScreenPoint) -> None:
        size = self.page_size
        anchor = screen_to_page(point, self.scale)
        anchor = PagePoint(clamp(anchor.x, 0.0, size.width), clamp(anchor.y, 0.0, size.height))

        height = min(self.settings.highlight_draw_min_height, size.height)
        element = PlacedElement(
            id=new_element_id(ElementType.HIGHLIGHT),
            type=ElementType.HIGHLIGHT,
            page=self.page,
            x=min(anchor.x, max(0.0, size.width - 1.0)),
            y=min(anchor.y, size.height - height),
            width=min(1.0, size.width),
            height=height,
            highlight_color=self.highlight_color,
        )

        self.history.snapshot(self.store.list())
        self.store.add(element)
        self.store.select(element.id)
        self.state = DrawingHighlight(element.id, anchor)

    def _highlight_box(self, anchor: PagePoint, point: ScreenPoint) -> Box:
        size = self.page_size
        current = screen_to_page(point, self.scale)
        cx = clamp(current.x, 0.0, size.width)
        cy = clamp(current.y, 0.0, size.height)

        width = abs(cx - anchor.x)
        height = min(max(self.settings.highlight_draw_min_height, abs(cy - anchor.y)), size.height)
        x = min(anchor.x, cx)
        y = clamp(min(anchor.y, cy), 0.0, size.height - height)
        return Box(x, y, width, height)

    def _apply_box(self, element: PlacedElement, box: Box) -> None:
        if box == element.box:
            return
        if self._gesture_snapshot is not None:
            self.history.snapshot(self._gesture_snapshot)
            self._gesture_snapshot = None
        self.store.update(element.id, x=box.x, y=box.y, width=box.width, height=box.height)

    def _end_gesture(self) -> None:
        self._gesture_snapshot = None

    # Commands

    def _create_text(self, point: ScreenPoint) -> PlacedElement:
        size = self.page_size
        settings = self.settings
        text = self.pending_text

        width = min(settings.text_box_width, size.width)
        height = text_box_height(text, width, self.font_size, settings.text_padding,
                                 settings.line_height_factor, self.measure)
        height = min(max(settings.min_element_size, height), size.height)

        origin = screen_to_page(point, self.scale)
        element = PlacedElement(
            id=new_element_id(ElementType.TEXT),
            type=ElementType.TEXT,
            page=self.page,
            x=clamp(origin.x, 0.0, size.width - width),
            y=clamp(origin.y, 0.0, size.height - height),
            width=width,
            height=height,
            text=text,
            font_size=self.font_size,
            color=settings.text_color,
        )

        self.history.snapshot(self.store.list())
        self.store.add(element)
        self.store.select(element.id)
        self.pending_text = ""
        self.state = Idle(ToolType.SELECT)
        return element

    def add_asset(self, asset: Asset) -> PlacedElement:
        """
        Place a stamp or signature at the default spot on the current page.

        Args:
            asset: Asset chosen in the sidebar

        Returns:
            The new element, selected
        """
        settings = self.settings
        size = self.page_size
        default_w, default_h = (settings.stamp_size if asset.type == ElementType.STAMP
                                else settings.signature_size)
        width = min(default_w, size.width)
        height = min(default_h, size.height)
        origin_x, origin_y = settings.asset_origin

        element = PlacedElement(
            id=new_element_id(asset.type),
            type=asset.type,
            page=self.page,
            x=clamp(origin_x, 0.0, size.width - width),
            y=clamp(origin_y, 0.0, size.height - height),
            width=width,
            height=height,
            asset=asset,
        )

        self._end_gesture()
        self.history.snapshot(self.store.list())
        self.store.add(element)
        self.store.select(element.id)
        self.state = Idle(ToolType.SELECT)
        return element

    def delete_selected(self) -> bool:
        """Remove the selected element. Returns True if something was removed."""
        element_id = self.store.selected_id
        if element_id is None:
            return False

        if self.in_gesture:
            self.state = Idle(ToolType.SELECT)
            self._end_gesture()

        self.history.snapshot(self.store.list())
        self.store.remove(element_id)
        return True

    def undo(self) -> bool:
        """
        Restore the most recent snapshot, cancelling any gesture.

        Returns:
            True if a snapshot was restored
        """
        restored = self.history.undo()
        if restored is None:
            return False

        if self.in_gesture:
            self.state = Idle(ToolType.SELECT)
        self._end_gesture()
        self.store.replace_all(restored)
        return True
