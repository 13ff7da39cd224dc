"""
Coordinate spaces and boxes.

Three spaces are kept apart by type:

- ``ScreenPoint``: rendered pixels, top-left origin, y down
- ``PagePoint``: unscaled document units, top-left origin, y down
- ``PdfPoint``: PDF user space, bottom-left origin, y up

Conversions between them are explicit functions.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class PagePoint:
    x: float
    y: float


@dataclass(frozen=True)
class PdfPoint:
    x: float
    y: float


@dataclass(frozen=True)
class PageSize:
    """Page dimensions in document units."""
    width: float
    height: float


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in page space."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: PagePoint) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def within(self, size: PageSize, tolerance: float = 1e-6) -> bool:
        """Check that the box lies fully inside a page."""
        return (
            self.x >= -tolerance
            and self.y >= -tolerance
            and self.right <= size.width + tolerance
            and self.bottom <= size.height + tolerance
        )


def screen_to_page(point: ScreenPoint, scale: float) -> PagePoint:
    """
    Convert a pointer position on the rendered page into document units.

    Args:
        point: Position relative to the rendered page origin
        scale: Current render scale (zoom)

    Returns:
        The same position in page space
    """
    return PagePoint(point.x / scale, point.y / scale)


def page_to_screen(point: PagePoint, scale: float) -> ScreenPoint:
    return ScreenPoint(point.x * scale, point.y * scale)


def screen_delta_to_page(start: ScreenPoint, end: ScreenPoint, scale: float) -> PagePoint:
    """Pointer movement between two screen points, expressed in document units."""
    return PagePoint((end.x - start.x) / scale, (end.y - start.y) / scale)


def page_to_pdf(point: PagePoint, page_height: float) -> PdfPoint:
    return PdfPoint(point.x, page_height - point.y)


def flip_box_bottom(box: Box, page_height: float) -> PdfPoint:
    """Lower-left corner of a page-space box in PDF user space."""
    return page_to_pdf(PagePoint(box.x, box.bottom), page_height)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
