import pytest

from inkstamp.core.text_layout import helvetica_width, line_height, text_box_height, wrap_text

from conftest import fixed_width

SAMPLES = [
    "Hello world",
    "Received in good condition, payment approved by accounting on the 3rd",
    "Short\n\nParagraphs with a blank line between them",
    "Supercalifragilisticexpialidocious is a long word indeed",
]


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("width", [40, 90, 200])
def test_lines_fit_unless_single_word(text, width):
    for line in wrap_text(text, width, 10, fixed_width):
        if " " in line:
            assert fixed_width(line, 10) <= width


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("width", [40, 90, 200])
def test_words_are_preserved_in_order(text, width):
    lines = wrap_text(text, width, 10, fixed_width)
    assert " ".join(lines).split() == text.split()


def test_explicit_newlines_break_and_blank_lines_survive():
    lines = wrap_text("one\n\ntwo", 500, 10, fixed_width)
    assert lines == ["one", "", "two"]


def test_oversized_word_sits_alone():
    lines = wrap_text("a enormousword b", 30, 10, fixed_width)
    assert lines == ["a", "enormousword", "b"]


def test_greedy_packing():
    # each character is 5 units wide at size 10
    lines = wrap_text("aa bb cc dd", 25, 10, fixed_width)
    assert lines == ["aa bb", "cc dd"]


def test_line_height_factor():
    assert line_height(10) == pytest.approx(12)
    assert line_height(10, 1.5) == pytest.approx(15)


def test_text_box_height_counts_lines():
    assert text_box_height("aa bb cc dd", 25, 10, 8, measure=fixed_width) == pytest.approx(2 * 12 + 8)
    assert text_box_height("", 25, 10, 8, measure=fixed_width) == pytest.approx(12 + 8)


def test_helvetica_width_grows_with_text_and_size():
    short = helvetica_width("Hello", 12)
    assert 0 < short < helvetica_width("Hello world", 12)
    assert helvetica_width("Hello", 24) == pytest.approx(short * 2)


def test_hello_world_fits_on_one_line_in_default_box():
    assert wrap_text("Hello world", 200, 12) == ["Hello world"]
