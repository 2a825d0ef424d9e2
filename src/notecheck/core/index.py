"""Corpus index: slug -> Document lookup over an immutable corpus"""

from pathlib import Path
from typing import Iterable, Iterator, Optional

from notecheck.core.errors import DuplicateSlug
from notecheck.core.models import Document
from notecheck.core.utils.slug import target_slug


class CorpusIndex:
    """Maps slugs to Documents, preserving corpus order.

    Construction raises DuplicateSlug on the first slug shared by two documents.
    """

    def __init__(self, documents: Iterable[Document]):
        self._docs: list[Document] = []
        self._by_slug: dict[str, Document] = {}
        for doc in documents:
            if (seen := self._by_slug.get(doc.slug)) is not None:
                raise DuplicateSlug(doc.slug, (Path(seen.path), Path(doc.path)))
            self._by_slug[doc.slug] = doc
            self._docs.append(doc)

    def lookup(self, slug: str) -> Optional[Document]:
        """Return the Document with the given slug, or None if not found."""
        return self._by_slug.get(slug)

    def resolve(self, target: str) -> Optional[Document]:
        """Normalize a raw doc-link target, then look it up."""
        return self.lookup(target_slug(target))

    def documents(self) -> list[Document]:
        """All documents in corpus order."""
        return list(self._docs)

    def slugs(self) -> list[str]:
        """Slugs of all documents in corpus order."""
        return [d.slug for d in self._docs]

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def __iter__(self) -> Iterator[Document]:
        return iter(self._docs)

    def __len__(self) -> int:
        return len(self._docs)
