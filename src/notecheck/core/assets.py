"""Image asset collaborators: name normalization and lookup stores"""

import logging
import re
from pathlib import Path
from typing import Iterable, Protocol


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.svg', '.heic', '.webp')
VARIANT_RE = re.compile(r'(~dark)?(@[1-3]x)?$')


def asset_name(source: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> str:
    """Normalize an image source or file name to its asset name.

    'img/Foo~dark@2x.png' -> 'Foo'. Directory, known image extension and
    appearance/scale variant suffixes are dropped; case is preserved.
    """
    name = source.strip().strip('<>')
    name = name.split('?', 1)[0].split('#', 1)[0].rsplit('/', 1)[-1]
    stem, dot, ext = name.rpartition('.')
    if dot and stem and f".{ext.lower()}" in set(extensions):
        name = stem
    return VARIANT_RE.sub('', name) or name


class AssetStore(Protocol):
    """Anything that can answer whether an asset name exists."""

    def __contains__(self, name: object) -> bool: ...


class StaticAssetStore:
    """A fixed set of asset names."""

    def __init__(self, names: Iterable[str] = ()):
        self._names = frozenset(asset_name(n) for n in names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)


class DirectoryAssetStore(StaticAssetStore):
    """Asset names of every image file found recursively under root."""

    def __init__(self, root: Path, extensions: Iterable[str] = IMAGE_EXTENSIONS):
        self.root = Path(root)
        exts = {e.lower() for e in extensions}
        files = sorted(p for p in self.root.rglob('*') if p.is_file() and p.suffix.lower() in exts) \
            if self.root.is_dir() else []
        self._names = frozenset(asset_name(p.name, exts) for p in files)
        logger.debug("Found %d image asset(s) under %s", len(self._names), self.root)
