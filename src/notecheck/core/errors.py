"""Fatal validation errors: raised, not accumulated"""

from pathlib import Path
from typing import Iterable, Optional


class NotecheckError(Exception):
    """Base class for errors that abort a corpus check."""


class MalformedMetadata(NotecheckError, ValueError):
    """A note's metadata block is absent, duplicated, unparsable or incomplete."""

    def __init__(self, reason: str, path: Optional[Path] = None):
        self.reason = reason
        self.path = path
        super().__init__(f"{path}: {reason}" if path else reason)

    def with_path(self, path: Path) -> "MalformedMetadata":
        """Return a copy of this error attributed to path."""
        return MalformedMetadata(self.reason, path)


class DuplicateSlug(NotecheckError, ValueError):
    """Two notes in the corpus resolve to the same slug."""

    def __init__(self, slug: str, paths: Iterable[Path] = ()):
        self.slug = slug
        self.paths = tuple(paths)
        msg = f"duplicate slug '{slug}'"
        if self.paths:
            msg += " (" + ", ".join(str(p) for p in self.paths) + ")"
        super().__init__(msg)
