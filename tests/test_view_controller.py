import pytest

from inkstamp.controllers.view_controller import ViewController


@pytest.fixture()
def view():
    view = ViewController()
    view.set_document_info(3)
    return view


def test_zoom_steps_by_quarter(view):
    assert view.zoom_in() == 1.25
    assert view.zoom_out() == 1.0
    assert view.get_zoom_percent() == 100


def test_zoom_is_bounded(view):
    for _ in range(20):
        view.zoom_in()
    assert view.zoom_level == 3.0
    assert not view.can_zoom_in()

    for _ in range(20):
        view.zoom_out()
    assert view.zoom_level == 0.5
    assert not view.can_zoom_out()


def test_set_zoom_snaps_and_clamps(view):
    assert view.set_zoom(1.3) == 1.25
    assert view.set_zoom(10) == 3.0
    assert view.set_zoom(0.1) == 0.5


def test_zoom_changed_emitted_only_on_change(view):
    seen = []
    view.zoom_changed.connect(seen.append)
    view.set_zoom(1.0)
    view.zoom_in()
    assert seen == [1.25]


def test_page_navigation_is_bounded(view):
    pages = []
    view.page_changed.connect(pages.append)

    assert view.prev_page() is False
    assert view.next_page() is True
    assert view.next_page() is True
    assert view.next_page() is False
    assert view.jump_to_page(1) is True
    assert view.jump_to_page(0) is False
    assert pages == [2, 3, 1]


def test_new_document_resets_view(view):
    view.next_page()
    view.zoom_in()
    view.set_document_info(5)
    assert (view.current_page, view.page_count, view.zoom_level) == (1, 5, 1.0)
