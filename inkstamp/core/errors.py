"""
Error taxonomy for the editor.

Each error carries a category that decides how the UI surfaces it:

- ``load``: blocking message over the whole editor
- ``render``: inline message in the page area
- ``element``: logged and skipped while baking
- ``save``: dismissable message, the editor stays open

A superseded render is not an error and never raises.
"""
from typing import Optional

GENERIC_MESSAGE = "Something went wrong. Please try again."

USER_MESSAGES = {
    "load": "The document could not be loaded.",
    "render": "This page could not be displayed.",
    "element": "An annotation could not be added to the document.",
    "save": "The document could not be saved. Your annotations are still here, please try again.",
}


class EditorError(Exception):
    """Base class for all editor failures."""
    category = "generic"


class LoadError(EditorError):
    """The original document could not be fetched or parsed."""
    category = "load"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RenderError(EditorError):
    """A page failed to rasterise after the document loaded."""
    category = "render"


class ElementBakeError(EditorError):
    """One placed element could not be composited."""
    category = "element"

    def __init__(self, element_id: str, message: str):
        super().__init__(f"{element_id}: {message}")
        self.element_id = element_id


class SaveError(EditorError):
    """Baking or handing the result to the save callback failed."""
    category = "save"


def user_message(exc: BaseException) -> str:
    """
    Map any exception to a message fit for display.

    Args:
        exc: The exception to describe

    Returns:
        A known, human readable message
    """
    category = getattr(exc, "category", None)
    message = USER_MESSAGES.get(category, GENERIC_MESSAGE)
    if isinstance(exc, LoadError) and exc.status is not None:
        message = f"{message} (status {exc.status})"
    return message
