from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from inkstamp.core.geometry import Box


class ElementType(Enum):
    STAMP = "stamp"
    SIGNATURE = "signature"
    TEXT = "text"
    HIGHLIGHT = "highlight"

    @property
    def is_image(self) -> bool:
        return self in (ElementType.STAMP, ElementType.SIGNATURE)


class ToolType(Enum):
    SELECT = "select"
    TEXT = "text"
    HIGHLIGHT = "highlight"


class Handle(Enum):
    """Corner grips of the selected element."""
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"

    @property
    def moves_left_edge(self) -> bool:
        return self in (Handle.NW, Handle.SW)

    @property
    def moves_top_edge(self) -> bool:
        return self in (Handle.NW, Handle.NE)


@dataclass(frozen=True)
class Asset:
    """A stamp or signature image provided by the host."""
    id: str
    type: ElementType
    display_name: str
    image_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value,
            'displayName': self.display_name,
            'imageUrl': self.image_url,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Asset':
        """Create an asset from a dictionary, accepting the hosting service's key names too."""
        asset_type = ElementType(data['type'])
        if not asset_type.is_image:
            raise ValueError(f"Asset type must be stamp or signature, got '{asset_type.value}'")

        return Asset(
            id=str(data['id']),
            type=asset_type,
            display_name=data.get('displayName') or data.get('display_name') or data.get('name', ''),
            image_url=data.get('imageUrl') or data.get('image_url') or data['cloudinary_url'],
        )


@dataclass
class PlacedElement:
    """
    A user-added annotation on one page.

    Geometry is in unscaled document units with a top-left origin.
    ``page`` is 1-based.
    """
    id: str
    type: ElementType
    page: int
    x: float
    y: float
    width: float
    height: float

    # Stamp / signature
    asset: Optional[Asset] = None

    # Text
    text: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None

    # Highlight
    highlight_color: Optional[str] = None

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    def with_box(self, box: Box) -> 'PlacedElement':
        return replace(self, x=box.x, y=box.y, width=box.width, height=box.height)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the element to a JSON-compatible dictionary."""
        data = {
            'id': self.id,
            'type': self.type.value,
            'page': self.page,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }

        if self.asset is not None:
            data['asset'] = self.asset.to_dict()
        if self.text is not None:
            data['text'] = self.text
        if self.font_size is not None:
            data['fontSize'] = self.font_size
        if self.color is not None:
            data['color'] = self.color
        if self.highlight_color is not None:
            data['highlightColor'] = self.highlight_color

        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'PlacedElement':
        asset_data = data.get('asset')
        return PlacedElement(
            id=data['id'],
            type=ElementType(data['type']),
            page=int(data['page']),
            x=float(data['x']),
            y=float(data['y']),
            width=float(data['width']),
            height=float(data['height']),
            asset=Asset.from_dict(asset_data) if asset_data else None,
            text=data.get('text'),
            font_size=data.get('fontSize'),
            color=data.get('color'),
            highlight_color=data.get('highlightColor'),
        )


def new_element_id(element_type: ElementType) -> str:
    """Generate a session-unique element id such as ``stamp-3f2a9c1b07de``."""
    return f"{element_type.value}-{uuid.uuid4().hex[:12]}"
