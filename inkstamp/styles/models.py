from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeColors:
    """Palette for the editor chrome and the page overlay."""
    # Chrome
    bg_primary: str
    bg_secondary: str
    bg_tertiary: str
    text_primary: str
    text_muted: str
    border: str

    # Accent
    accent_primary: str
    accent_hover: str

    # Page area
    canvas_bg: str
    selection_ring: str
    handle_fill: str
    handle_border: str
    element_outline: str

    # Status
    error: str
    success: str
