"""
Catalog of stamps and signatures offered in the sidebar.
"""
import json
from pathlib import Path
from typing import Iterable, List, Union

from inkstamp.core.annotations.models import Asset, ElementType
from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)


class AssetCatalog:
    """An ordered, read-only collection of assets."""

    def __init__(self, assets: Iterable[Asset] = ()):
        self._assets: List[Asset] = list(assets)

    def __iter__(self):
        return iter(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    @property
    def stamps(self) -> List[Asset]:
        return [a for a in self._assets if a.type == ElementType.STAMP]

    @property
    def signatures(self) -> List[Asset]:
        return [a for a in self._assets if a.type == ElementType.SIGNATURE]

    def get(self, asset_id: str):
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    @classmethod
    def from_list(cls, items: list) -> 'AssetCatalog':
        """
        Build a catalog from decoded JSON, skipping malformed entries.

        Args:
            items: List of asset dictionaries
        """
        assets = []
        for item in items:
            try:
                assets.append(Asset.from_dict(item))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid asset entry {item!r}: {e}")
        return cls(assets)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'AssetCatalog':
        """
        Load a catalog from a JSON file holding a list of assets.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON list
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Asset catalog {path} must contain a JSON list")
        catalog = cls.from_list(data)
        logger.info(f"Loaded {len(catalog)} assets from {path}")
        return catalog
