import json

import pytest

from inkstamp.core.annotations import Asset, ElementType
from inkstamp.core.assets import AssetCatalog
from inkstamp.core.document.images import ImageLoader, detect_image_format


def test_detect_png_and_jpeg(png_bytes):
    assert detect_image_format(png_bytes) == "png"
    assert detect_image_format(b"\xff\xd8\xff\xe0" + b"\0" * 16) == "jpeg"
    assert detect_image_format(b"GIF89a") is None
    assert detect_image_format(b"") is None


def test_loader_reads_local_paths_and_caches(tmp_path, png_bytes):
    path = tmp_path / "stamp.png"
    path.write_bytes(png_bytes)
    loader = ImageLoader()

    assert loader(str(path)) == png_bytes
    path.unlink()
    assert loader.fetch(str(path)) == png_bytes


def test_loader_reads_file_urls(tmp_path, png_bytes):
    path = tmp_path / "sig.png"
    path.write_bytes(png_bytes)
    assert ImageLoader().fetch(path.as_uri()) == png_bytes


def test_loader_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        ImageLoader().fetch(str(tmp_path / "missing.png"))


def test_asset_accepts_service_key_names():
    asset = Asset.from_dict({"id": 7, "type": "signature", "name": "Director",
                             "cloudinary_url": "https://cdn.example.com/d.png"})
    assert asset == Asset("7", ElementType.SIGNATURE, "Director", "https://cdn.example.com/d.png")
    assert Asset.from_dict(asset.to_dict()) == asset


def test_asset_must_be_an_image_type():
    with pytest.raises(ValueError):
        Asset.from_dict({"id": "1", "type": "text", "name": "x", "imageUrl": "y"})


def test_catalog_splits_stamps_and_signatures(tmp_path):
    path = tmp_path / "assets.json"
    path.write_text(json.dumps([
        {"id": "1", "type": "stamp", "displayName": "Paid", "imageUrl": "paid.png"},
        {"id": "2", "type": "signature", "displayName": "CFO", "imageUrl": "cfo.png"},
        {"id": "3", "type": "stamp", "displayName": "Received", "imageUrl": "rec.png"},
        {"id": "4", "type": "bogus"},
    ]))
    catalog = AssetCatalog.load(path)

    assert len(catalog) == 3
    assert [a.display_name for a in catalog.stamps] == ["Paid", "Received"]
    assert [a.display_name for a in catalog.signatures] == ["CFO"]
    assert catalog.get("2").display_name == "CFO"


def test_catalog_must_be_a_list(tmp_path):
    path = tmp_path / "assets.json"
    path.write_text("{}")
    with pytest.raises(ValueError):
        AssetCatalog.load(path)
