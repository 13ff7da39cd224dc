"""
Line breaking for free-text elements.

The same wrapping is used to size text boxes in the editor and to draw
them when baking, so both agree on the number of lines.
"""
from typing import Callable, List

import fitz  # PyMuPDF

FONT_NAME = "helv"
LINE_HEIGHT_FACTOR = 1.2

Measure = Callable[[str, float], float]


def helvetica_width(text: str, font_size: float) -> float:
    """Width of a string set in Helvetica, in document units."""
    return fitz.get_text_length(text, fontname=FONT_NAME, fontsize=font_size)


def line_height(font_size: float, factor: float = LINE_HEIGHT_FACTOR) -> float:
    return font_size * factor


def wrap_text(text: str, max_width: float, font_size: float,
              measure: Measure = helvetica_width) -> List[str]:
    """
    Break text into lines no wider than ``max_width``.

    Explicit newlines always break. A blank paragraph yields an empty line.
    Words are packed greedily; a single word wider than the limit is
    placed alone on its own line rather than split.

    Args:
        text: Text to wrap
        max_width: Available width in document units
        font_size: Font size used for measuring
        measure: Function returning the width of a string at a font size

    Returns:
        Lines in reading order
    """
    lines: List[str] = []

    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue

        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if measure(candidate, font_size) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = word

        if current:
            lines.append(current)

    return lines


def text_box_height(text: str, max_width: float, font_size: float, padding: float,
                    factor: float = LINE_HEIGHT_FACTOR,
                    measure: Measure = helvetica_width) -> float:
    """Height needed to show wrapped text plus padding."""
    line_count = max(1, len(wrap_text(text, max_width, font_size, measure)))
    return line_count * line_height(font_size, factor) + padding
