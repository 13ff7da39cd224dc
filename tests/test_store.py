import pytest

from inkstamp.core.annotations import AnnotationStore, ElementType, PlacedElement

from conftest import make_element


def test_add_and_list_by_page(store):
    store.add(make_element("a", page=1))
    store.add(make_element("b", page=2))
    store.add(make_element("c", page=1))

    assert [e.id for e in store.list()] == ["a", "b", "c"]
    assert [e.id for e in store.list(page=1)] == ["a", "c"]
    assert store.count_by_page() == {1: 2, 2: 1}


def test_add_rejects_duplicate_id(store):
    store.add(make_element("a"))
    with pytest.raises(ValueError):
        store.add(make_element("a"))


def test_add_rejects_missing_page(store):
    with pytest.raises(ValueError):
        store.add(make_element("a", page=4))
    with pytest.raises(ValueError):
        store.add(make_element("b", page=0))


def test_update_replaces_fields(store):
    store.add(make_element("a"))
    updated = store.update("a", x=30.0, width=80.0)
    assert (updated.x, updated.width) == (30.0, 80.0)
    assert store.get("a").x == 30.0


def test_update_unknown_id_raises(store):
    with pytest.raises(KeyError):
        store.update("missing", x=1.0)


def test_remove_clears_selection(store):
    store.add(make_element("a"))
    store.select("a")
    assert store.remove("a") is True
    assert store.selected_id is None
    assert store.remove("a") is False


def test_select_unknown_id_raises(store):
    with pytest.raises(KeyError):
        store.select("missing")


def test_replace_all_clears_selection(store):
    store.add(make_element("a"))
    store.select("a")
    store.replace_all([make_element("b")])
    assert store.selected_id is None
    assert [e.id for e in store.list()] == ["b"]


def test_listeners_run_on_change(store):
    calls = []
    store.add_listener(lambda: calls.append(len(store)))
    store.add(make_element("a"))
    store.select("a")
    store.remove("a")
    assert calls == [1, 1, 0]


def test_element_dict_round_trip_keeps_type_fields():
    element = PlacedElement(id="t1", type=ElementType.TEXT, page=2, x=5, y=6,
                            width=200, height=22.4, text="Paid", font_size=12, color="#000000")
    data = element.to_dict()
    assert data["fontSize"] == 12
    assert "asset" not in data
    assert PlacedElement.from_dict(data) == element


def test_snapshot_is_independent_of_the_store(store):
    store.add(make_element("a", x=10))
    snapshot = store.snapshot()

    snapshot[0].x = 99
    store.update("a", x=20)
    store.add(make_element("b"))

    assert [(e.id, e.x) for e in snapshot] == [("a", 99)]
    assert store.get("a").x == 20


def test_snapshot_restores_through_replace_all(store):
    store.add(make_element("a"))
    snapshot = store.snapshot()
    store.remove("a")
    store.replace_all(snapshot)
    assert [e.id for e in store.list()] == ["a"]
