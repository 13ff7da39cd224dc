import json

from inkstamp.utils.config_service import EditorSettings, load_settings, settings_from_dict


def test_defaults():
    settings = EditorSettings()
    assert settings.history_capacity == 5
    assert (settings.min_zoom, settings.max_zoom, settings.zoom_step) == (0.5, 3.0, 0.25)
    assert settings.font_sizes == (8, 10, 12, 14, 16, 18, 24)
    assert settings.highlight_colors[0] == settings.default_highlight_color == "#ffff00"


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "settings.json") == EditorSettings()


def test_overrides_are_applied(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"history_capacity": 10, "stamp_size": [80, 80]}))
    settings = load_settings(path)
    assert settings.history_capacity == 10
    assert settings.stamp_size == (80, 80)


def test_unknown_and_invalid_values_are_ignored():
    settings = settings_from_dict({"no_such_key": 1, "max_zoom": "lots", "min_zoom": 0.25})
    assert settings.max_zoom == 3.0
    assert settings.min_zoom == 0.25


def test_malformed_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert load_settings(path) == EditorSettings()


def test_default_location_is_read_without_creating_directories(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))

    assert load_settings() == EditorSettings()
    assert list(tmp_path.iterdir()) == []
