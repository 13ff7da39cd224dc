import fitz
import pytest

from inkstamp.core.annotations import Asset, ElementType
from inkstamp.core.document.baker import (
    DrawImage, DrawRect, DrawText, bake, bake_document, parse_hex_color, plan_element,
)
from inkstamp.core.errors import ElementBakeError, LoadError
from inkstamp.utils.config_service import EditorSettings

from conftest import PAGE_HEIGHT, make_element, make_pdf


def no_images(url):
    raise AssertionError(f"unexpected image fetch for {url}")


def text_element(**kwargs):
    fields = dict(element_id="t1", element_type=ElementType.TEXT, x=50, y=50, width=200,
                  height=22.4, text="Hello world", font_size=12, color="#000000")
    fields.update(kwargs)
    return make_element(**fields)


def stamp_element(element_id="s1", url="https://assets.example.com/paid.png", **kwargs):
    asset = Asset(id="a1", type=ElementType.STAMP, display_name="Paid", image_url=url)
    return make_element(element_id, ElementType.STAMP, x=100, y=200, width=120, height=120,
                        asset=asset, **kwargs)


# Planning

def test_text_baseline_is_flipped_from_top():
    [op] = plan_element(text_element(), PAGE_HEIGHT, no_images, EditorSettings())
    assert isinstance(op, DrawText)
    assert op.text == "Hello world"
    assert op.baseline.x == 50
    assert op.baseline.y == pytest.approx(PAGE_HEIGHT - 50 - 12)
    assert op.color == (0.0, 0.0, 0.0)


def test_text_lines_step_down_by_line_height():
    element = text_element(text="first\nsecond\n\nfourth")
    ops = plan_element(element, PAGE_HEIGHT, no_images, EditorSettings())
    assert [op.text for op in ops] == ["first", "second", "fourth"]
    top = PAGE_HEIGHT - 50 - 12
    assert [op.baseline.y for op in ops] == pytest.approx([top, top - 14.4, top - 3 * 14.4])


def test_highlight_is_translucent_rect_from_bottom():
    element = make_element("h1", ElementType.HIGHLIGHT, x=60, y=200, width=40, height=14,
                           highlight_color="#ff9999")
    [op] = plan_element(element, PAGE_HEIGHT, no_images, EditorSettings())
    assert isinstance(op, DrawRect)
    assert (op.origin.x, op.origin.y) == (60, PAGE_HEIGHT - 200 - 14)
    assert op.opacity == 0.3
    assert op.fill == pytest.approx((1.0, 0x99 / 255, 0x99 / 255))


def test_image_is_fetched_and_detected(png_bytes):
    [op] = plan_element(stamp_element(), PAGE_HEIGHT, lambda url: png_bytes, EditorSettings())
    assert isinstance(op, DrawImage)
    assert op.image_format == "png"
    assert (op.origin.y, op.width, op.height) == (PAGE_HEIGHT - 200 - 120, 120, 120)


def test_unknown_image_format_fails_the_element():
    with pytest.raises(ElementBakeError):
        plan_element(stamp_element(), PAGE_HEIGHT, lambda url: b"GIF89a...", EditorSettings())


def test_stamp_without_asset_fails_the_element():
    element = make_element("s1", ElementType.STAMP)
    with pytest.raises(ElementBakeError):
        plan_element(element, PAGE_HEIGHT, no_images, EditorSettings())


def test_parse_hex_color():
    assert parse_hex_color("#ffff00") == (1.0, 1.0, 0.0)
    assert parse_hex_color("0f0") == (0.0, 1.0, 0.0)
    with pytest.raises(ValueError):
        parse_hex_color("#12")


# Baking

def test_zero_elements_keeps_pages_and_adds_nothing(three_page_pdf):
    result = bake_document(three_page_pdf, [], no_images)
    assert result.failures == []
    assert result.page_count == 3

    doc = fitz.open(stream=result.data, filetype="pdf")
    assert doc.page_count == 3
    for page in doc:
        assert page.get_text().strip() == ""
        assert page.get_images() == []
        assert page.get_drawings() == []


def test_text_is_written_into_the_page(pdf_bytes):
    data = bake(pdf_bytes, [text_element()], no_images)
    page = fitz.open(stream=data, filetype="pdf")[0]
    assert "Hello world" in page.get_text()

    spans = [span for block in page.get_text("dict")["blocks"]
             for line in block.get("lines", []) for span in line["spans"]]
    assert spans[0]["origin"][1] == pytest.approx(50 + 12, abs=0.5)
    assert spans[0]["size"] == pytest.approx(12)


def test_highlight_is_drawn(pdf_bytes):
    element = make_element("h1", ElementType.HIGHLIGHT, x=60, y=200, width=40, height=14,
                           highlight_color="#ffff00")
    data = bake(pdf_bytes, [element], no_images)
    [drawing] = fitz.open(stream=data, filetype="pdf")[0].get_drawings()
    assert tuple(drawing["rect"]) == pytest.approx((60, 200, 100, 214), abs=0.01)
    assert drawing["fill"] == pytest.approx((1.0, 1.0, 0.0))
    assert drawing["fill_opacity"] == pytest.approx(0.3, abs=0.01)


def test_stamp_image_is_embedded(pdf_bytes, png_bytes):
    data = bake(pdf_bytes, [stamp_element()], lambda url: png_bytes)
    page = fitz.open(stream=data, filetype="pdf")[0]
    assert len(page.get_images()) == 1
    [info] = page.get_image_info()
    assert tuple(info["bbox"]) == pytest.approx((100, 200, 220, 320), abs=0.01)


def test_elements_go_to_their_own_pages(three_page_pdf):
    elements = [text_element(element_id="a", page=1, text="first page"),
                text_element(element_id="b", page=3, text="third page")]
    doc = fitz.open(stream=bake(three_page_pdf, elements, no_images), filetype="pdf")
    assert "first page" in doc[0].get_text()
    assert doc[1].get_text().strip() == ""
    assert "third page" in doc[2].get_text()


def test_failing_element_does_not_abort_bake(pdf_bytes):
    def broken_fetch(url):
        raise OSError("connection refused")

    elements = [stamp_element(), text_element()]
    result = bake_document(pdf_bytes, elements, broken_fetch)

    assert [f.element_id for f in result.failures] == ["s1"]
    page = fitz.open(stream=result.data, filetype="pdf")[0]
    assert "Hello world" in page.get_text()
    assert page.get_images() == []


def test_element_on_missing_page_is_reported(pdf_bytes):
    result = bake_document(pdf_bytes, [text_element(page=2)], no_images)
    assert [f.element_id for f in result.failures] == ["t1"]
    assert result.page_count == 1


def test_original_bytes_are_untouched(pdf_bytes):
    original = bytearray(pdf_bytes)
    bake(original, [text_element()], no_images)
    assert bytes(original) == pdf_bytes


def test_unreadable_document_raises_load_error():
    with pytest.raises(LoadError):
        bake(b"not a pdf at all", [], no_images)


def test_bake_on_custom_page_size():
    data = make_pdf(pages=1, width=300, height=400)
    page = fitz.open(stream=bake(data, [text_element(x=10, y=20)], no_images), filetype="pdf")[0]
    spans = [span for block in page.get_text("dict")["blocks"]
             for line in block.get("lines", []) for span in line["spans"]]
    assert spans[0]["origin"] == pytest.approx((10, 20 + 12), abs=0.5)


# Rotated pages

def rendered_page(data):
    return fitz.open(stream=data, filetype="pdf")[0].get_pixmap(alpha=False)


def dark_pixel_bounds(pix):
    xs, ys = [], []
    samples = pix.samples
    for y in range(pix.height):
        row = y * pix.stride
        for x in range(pix.width):
            if samples[row + x * pix.n] < 128:
                xs.append(x)
                ys.append(y)
    return min(xs), min(ys), max(xs), max(ys)


@pytest.fixture()
def rotated_pdf():
    # 600 x 800 mediabox shown as 800 x 600
    return make_pdf(pages=1, width=600, height=800, rotation=90)


def test_highlight_on_rotated_page_lands_where_it_was_drawn(rotated_pdf):
    element = make_element("h1", ElementType.HIGHLIGHT, x=0, y=0, width=100, height=20,
                           highlight_color="#ffff00")
    pix = rendered_page(bake(rotated_pdf, [element], no_images))

    assert (pix.width, pix.height) == (800, 600)
    assert pix.pixel(5, 5)[2] < 220
    assert pix.pixel(95, 15)[2] < 220
    assert pix.pixel(150, 5) == (255, 255, 255)
    assert pix.pixel(5, 40) == (255, 255, 255)


def test_image_on_rotated_page_fills_its_box(rotated_pdf, png_bytes):
    asset = Asset(id="a1", type=ElementType.STAMP, display_name="Paid",
                  image_url="https://assets.example.com/paid.png")
    element = make_element("s1", ElementType.STAMP, x=200, y=100, width=120, height=60,
                           asset=asset)
    pix = rendered_page(bake(rotated_pdf, [element], lambda url: png_bytes))

    assert pix.pixel(260, 130) == pytest.approx((200, 30, 30), abs=3)
    assert pix.pixel(205, 105) == pytest.approx((200, 30, 30), abs=3)
    assert pix.pixel(260, 200) == (255, 255, 255)
    assert pix.pixel(400, 130) == (255, 255, 255)


def test_text_on_rotated_page_reads_horizontally(rotated_pdf):
    pix = rendered_page(bake(rotated_pdf, [text_element(text="Hello world")], no_images))

    left, top, right, bottom = dark_pixel_bounds(pix)
    assert 48 <= left <= 55
    assert 48 <= top and bottom <= 68
    assert right - left > 2 * (bottom - top)
