"""
Compositing placed elements into a new PDF.

Each element is first planned as drawing operations in PDF user space
(bottom-left origin, y up), the same way the values would be written into
a content stream. The operations are then handed to PyMuPDF, whose page
API uses a top-left origin, through a single flip per operation.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import fitz  # PyMuPDF

from inkstamp.core.annotations.models import ElementType, PlacedElement
from inkstamp.core.errors import ElementBakeError, LoadError
from inkstamp.core.geometry import PdfPoint, flip_box_bottom
from inkstamp.core.text_layout import FONT_NAME, line_height, wrap_text
from inkstamp.utils.config_service import EditorSettings
from inkstamp.utils.logging_service import get_logger

from .images import ImageLoader, detect_image_format

logger = get_logger(__name__)

RGB = Tuple[float, float, float]
ImageSource = Callable[[str], bytes]


@dataclass(frozen=True)
class DrawText:
    element_id: str
    text: str
    baseline: PdfPoint
    font_size: float
    color: RGB


@dataclass(frozen=True)
class DrawRect:
    element_id: str
    origin: PdfPoint  # lower-left corner
    width: float
    height: float
    fill: RGB
    opacity: float


@dataclass(frozen=True)
class DrawImage:
    element_id: str
    origin: PdfPoint  # lower-left corner
    width: float
    height: float
    data: bytes = field(repr=False)
    image_format: str = "png"


DrawOperation = Union[DrawText, DrawRect, DrawImage]


@dataclass
class BakeResult:
    data: bytes
    page_count: int
    failures: List[ElementBakeError] = field(default_factory=list)


def parse_hex_color(value: str) -> RGB:
    """
    Convert ``#rrggbb`` (or ``#rgb``) into PDF colour components in 0-1.

    Raises:
        ValueError: If the string is not a hex colour
    """
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6:
        raise ValueError(f"Invalid colour '{value}'")
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    return (r / 255.0, g / 255.0, b / 255.0)


def plan_element(element: PlacedElement, page_height: float,
                 image_source: ImageSource,
                 settings: EditorSettings) -> List[DrawOperation]:
    """
    Work out the drawing operations for one element.

    Args:
        element: Element to draw
        page_height: Height of its page in document units
        image_source: Callable returning image bytes for a URL
        settings: Editor settings (default colours, opacity, line height)

    Returns:
        Operations in PDF user space

    Raises:
        ElementBakeError: If the element cannot be drawn
    """
    if element.type == ElementType.TEXT:
        return _plan_text(element, page_height, settings)
    if element.type == ElementType.HIGHLIGHT:
        return _plan_highlight(element, page_height, settings)
    if element.type.is_image:
        return _plan_image(element, page_height, image_source)
    raise ElementBakeError(element.id, f"Unsupported element type {element.type}")


def _plan_text(element: PlacedElement, page_height: float,
               settings: EditorSettings) -> List[DrawOperation]:
    font_size = element.font_size or settings.default_font_size
    try:
        color = parse_hex_color(element.color or settings.text_color)
    except ValueError as e:
        raise ElementBakeError(element.id, str(e)) from e

    step = line_height(font_size, settings.line_height_factor)
    lines = wrap_text(element.text or "", element.width, font_size)

    operations: List[DrawOperation] = []
    for index, line in enumerate(lines):
        if not line:
            continue
        baseline = PdfPoint(element.x, page_height - element.y - font_size - index * step)
        operations.append(DrawText(element.id, line, baseline, font_size, color))
    return operations


def _plan_highlight(element: PlacedElement, page_height: float,
                    settings: EditorSettings) -> List[DrawOperation]:
    try:
        fill = parse_hex_color(element.highlight_color or settings.default_highlight_color)
    except ValueError as e:
        raise ElementBakeError(element.id, str(e)) from e

    origin = flip_box_bottom(element.box, page_height)
    return [DrawRect(element.id, origin, element.width, element.height,
                     fill, settings.highlight_opacity)]


def _plan_image(element: PlacedElement, page_height: float,
                image_source: ImageSource) -> List[DrawOperation]:
    if element.asset is None:
        raise ElementBakeError(element.id, "No image asset attached")

    try:
        data = image_source(element.asset.image_url)
    except Exception as e:
        raise ElementBakeError(element.id, f"Could not fetch image: {e}") from e

    image_format = detect_image_format(data)
    if image_format is None:
        raise ElementBakeError(element.id, "Image is neither PNG nor JPEG")

    origin = flip_box_bottom(element.box, page_height)
    return [DrawImage(element.id, origin, element.width, element.height, data, image_format)]


def draw_operation(page: fitz.Page, operation: DrawOperation) -> None:
    """
    Emit one planned operation onto a PyMuPDF page.

    Operations are planned against the page as displayed. On a page with
    a /Rotate entry, positions are mapped back into unrotated page space
    and text and images are counter-rotated so they appear upright.
    """
    page_height = page.rect.height
    derotate = page.derotation_matrix
    rotation = page.rotation

    if isinstance(operation, DrawText):
        point = fitz.Point(operation.baseline.x, page_height - operation.baseline.y)
        page.insert_text(point * derotate, operation.text, fontsize=operation.font_size,
                         fontname=FONT_NAME, color=operation.color, rotate=rotation)
        return

    top = page_height - operation.origin.y - operation.height
    rect = fitz.Rect(operation.origin.x, top,
                     operation.origin.x + operation.width, top + operation.height) * derotate

    if isinstance(operation, DrawRect):
        shape = page.new_shape()
        shape.draw_rect(rect)
        shape.finish(color=None, fill=operation.fill, fill_opacity=operation.opacity, width=0)
        shape.commit()
    elif isinstance(operation, DrawImage):
        page.insert_image(rect, stream=operation.data, keep_proportion=False, rotate=rotation)
    else:
        raise TypeError(f"Unknown drawing operation {operation!r}")


def bake_document(original: bytes, elements: Sequence[PlacedElement],
                  image_source: Optional[ImageSource] = None,
                  settings: Optional[EditorSettings] = None) -> BakeResult:
    """
    Composite elements onto a copy of the original document.

    The original bytes are never modified. Elements that fail to draw are
    logged, reported in the result and skipped.

    Args:
        original: Bytes of the original PDF
        elements: Elements in paint order
        image_source: Callable returning image bytes for a URL
        settings: Editor settings

    Returns:
        BakeResult with the new document bytes

    Raises:
        LoadError: If the original document cannot be opened
    """
    settings = settings or EditorSettings()
    if image_source is None:
        image_source = ImageLoader(timeout=settings.image_fetch_timeout)

    try:
        doc = fitz.open(stream=bytes(original), filetype="pdf")
    except Exception as e:
        raise LoadError(f"Could not open document for baking: {e}") from e

    if doc.page_count == 0:
        doc.close()
        raise LoadError("Document has no pages")

    failures: List[ElementBakeError] = []

    elements_by_page: Dict[int, List[PlacedElement]] = defaultdict(list)
    for element in elements:
        elements_by_page[element.page].append(element)

    try:
        for page_number in sorted(elements_by_page):
            page_elements = elements_by_page[page_number]
            if not 1 <= page_number <= doc.page_count:
                logger.warning(f"Skipping {len(page_elements)} elements on missing page {page_number}")
                failures.extend(ElementBakeError(e.id, f"Page {page_number} does not exist")
                                for e in page_elements)
                continue

            page = doc[page_number - 1]
            for element in page_elements:
                try:
                    for operation in plan_element(element, page.rect.height, image_source, settings):
                        draw_operation(page, operation)
                except ElementBakeError as e:
                    logger.warning(f"Skipping element: {e}")
                    failures.append(e)
                except Exception as e:
                    logger.warning(f"Skipping element {element.id}: {e}")
                    failures.append(ElementBakeError(element.id, str(e)))

        data = doc.tobytes(garbage=4, deflate=True)
        page_count = doc.page_count
    finally:
        doc.close()

    logger.info(f"Baked {len(elements) - len(failures)} of {len(elements)} elements "
                f"into {page_count} pages")
    return BakeResult(data=data, page_count=page_count, failures=failures)


def bake(original: bytes, elements: Sequence[PlacedElement],
         image_source: Optional[ImageSource] = None,
         settings: Optional[EditorSettings] = None) -> bytes:
    """Composite elements and return only the new document bytes."""
    return bake_document(original, elements, image_source, settings).data
