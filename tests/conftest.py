import fitz
import pytest

from inkstamp.core.annotations import (
    AnnotationStore, Asset, ElementType, HistoryManager, PlacedElement,
)
from inkstamp.core.geometry import PageSize
from inkstamp.controllers.interaction import InteractionEngine
from inkstamp.utils.config_service import EditorSettings

PAGE_WIDTH = 595.0
PAGE_HEIGHT = 842.0


def make_pdf(pages=1, width=PAGE_WIDTH, height=PAGE_HEIGHT, rotation=0) -> bytes:
    doc = fitz.open()
    for _ in range(pages):
        page = doc.new_page(width=width, height=height)
        if rotation:
            page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


def fixed_width(text, font_size):
    """Monospace stand-in for font metrics: every character is half the font size wide."""
    return len(text) * font_size * 0.5


@pytest.fixture()
def pdf_bytes():
    return make_pdf(pages=1)


@pytest.fixture()
def three_page_pdf():
    return make_pdf(pages=3)


@pytest.fixture()
def png_bytes():
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), False)
    pix.set_rect(pix.irect, (200, 30, 30))
    return pix.tobytes("png")


@pytest.fixture()
def settings():
    return EditorSettings()


@pytest.fixture()
def store():
    return AnnotationStore(page_count=3)


@pytest.fixture()
def history(settings):
    return HistoryManager(settings.history_capacity)


@pytest.fixture()
def engine(store, history, settings):
    engine = InteractionEngine(store, history, settings, measure=fixed_width)
    engine.set_viewport(1, PageSize(PAGE_WIDTH, PAGE_HEIGHT), 1.0)
    return engine


@pytest.fixture()
def stamp_asset():
    return Asset(id="a1", type=ElementType.STAMP, display_name="Paid",
                 image_url="https://assets.example.com/paid.png")


@pytest.fixture()
def signature_asset():
    return Asset(id="a2", type=ElementType.SIGNATURE, display_name="J. Doe",
                 image_url="https://assets.example.com/sig.png")


def make_element(element_id="e1", element_type=ElementType.STAMP, page=1,
                 x=10.0, y=10.0, width=50.0, height=50.0, **kwargs) -> PlacedElement:
    return PlacedElement(id=element_id, type=element_type, page=page,
                         x=x, y=y, width=width, height=height, **kwargs)
