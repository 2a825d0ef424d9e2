"""Unit tests for core/assets.py"""

import pytest

from notecheck.core.assets import DirectoryAssetStore, StaticAssetStore, asset_name


@pytest.mark.parametrize("source,expected", [
    ("WWDC24-10123-diagram",            "WWDC24-10123-diagram"),
    ("WWDC24-10123-diagram.png",        "WWDC24-10123-diagram"),
    ("images/WWDC24-10123-diagram.PNG", "WWDC24-10123-diagram"),
    ("fig~dark.png",                    "fig"),
    ("fig@2x.jpg",                      "fig"),
    ("fig~dark@3x.png",                 "fig"),
    ("v1.2-chart",                      "v1.2-chart"),
    ("<spaced name.png>",               "spaced name"),
])
def test_asset_name(source, expected):
    """asset_name drops directories, image extensions and variant suffixes."""
    assert asset_name(source) == expected


def test_static_store_normalizes_names():
    """StaticAssetStore stores normalized names."""
    store = StaticAssetStore(["a.png", "b~dark@2x.png"])
    assert "a" in store
    assert "b" in store
    assert "c" not in store
    assert len(store) == 2


def test_directory_store(tmp_path):
    """DirectoryAssetStore finds image files recursively and ignores other files."""
    (tmp_path / "Resources").mkdir()
    (tmp_path / "Resources" / "WWDC24-1-fig@2x.png").write_bytes(b"")
    (tmp_path / "Resources" / "WWDC24-1-fig~dark@2x.png").write_bytes(b"")
    (tmp_path / "notes.md").write_text("# x")
    store = DirectoryAssetStore(tmp_path)
    assert "WWDC24-1-fig" in store
    assert "notes" not in store
    assert len(store) == 1


def test_directory_store_missing_root(tmp_path):
    """A missing asset directory yields an empty store."""
    assert len(DirectoryAssetStore(tmp_path / "nope")) == 0
