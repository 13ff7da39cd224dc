"""
Editor settings.

Defaults live on the ``EditorSettings`` dataclass. An optional
``settings.json`` in the user config directory may override any of them;
the file is only read, never written.
"""
import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .logging_service import get_logger
from .resource_loader import get_config_dir

logger = get_logger(__name__)

SETTINGS_FILE_NAME = "settings.json"


@dataclass(frozen=True)
class EditorSettings:
    """Tunable constants for the annotation editor."""
    # Undo
    history_capacity: int = 5

    # Viewport
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_step: float = 0.25
    default_zoom: float = 1.0

    # Geometry limits, in document units
    min_element_size: float = 20.0
    highlight_min_width: float = 10.0
    highlight_min_height: float = 5.0
    highlight_draw_min_height: float = 14.0
    highlight_opacity: float = 0.3

    # Text boxes
    text_box_width: float = 200.0
    text_padding: float = 8.0
    line_height_factor: float = 1.2
    default_font_size: int = 12
    font_sizes: Tuple[int, ...] = (8, 10, 12, 14, 16, 18, 24)
    text_color: str = "#000000"

    # Highlights
    highlight_colors: Tuple[str, ...] = ("#ffff00", "#00ff00", "#ff9999", "#99ccff")
    default_highlight_color: str = "#ffff00"

    # Stamps and signatures
    asset_origin: Tuple[float, float] = (50.0, 50.0)
    stamp_size: Tuple[float, float] = (120.0, 120.0)
    signature_size: Tuple[float, float] = (100.0, 50.0)

    # Screen-space sizes, in pixels
    handle_size: int = 12
    drag_threshold: int = 3

    # Network
    image_fetch_timeout: float = 15.0

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(current: Any, value: Any) -> Any:
    """Shape a JSON value like the default it replaces."""
    if isinstance(current, tuple):
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"expected a list, got {value!r}")
        return tuple(value)
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int) and not isinstance(value, bool):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, str):
        return str(value)
    return value


def settings_from_dict(data: Dict[str, Any], base: Optional[EditorSettings] = None) -> EditorSettings:
    """
    Overlay a mapping onto the defaults.

    Unknown keys and values that do not fit the default's type are logged
    and skipped.

    Args:
        data: Mapping of setting name to value
        base: Settings to start from, defaults to ``EditorSettings()``

    Returns:
        New settings instance
    """
    base = base or EditorSettings()
    known = {f.name for f in fields(base)}
    overrides = {}

    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}'")
            continue
        try:
            overrides[key] = _coerce(getattr(base, key), value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid value for '{key}': {e}")

    return replace(base, **overrides)


def load_settings(path: Optional[Path] = None) -> EditorSettings:
    """
    Load editor settings, falling back to defaults.

    Args:
        path: Settings file, defaults to <config dir>/settings.json

    Returns:
        EditorSettings instance
    """
    if path is None:
        path = get_config_dir() / SETTINGS_FILE_NAME

    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return EditorSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read settings file {path}: {e}. Using defaults.")
        return EditorSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} does not hold a JSON object. Using defaults.")
        return EditorSettings()

    logger.info(f"Settings loaded from {path}")
    return settings_from_dict(data)
