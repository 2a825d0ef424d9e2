"""Reference and code-fence checks producing accumulated Defects"""

from typing import Iterable

from notecheck.core.assets import AssetStore
from notecheck.core.index import CorpusIndex
from notecheck.core.models import CrossReference, Defect, DefectKind, Document, ImageReference


def _reference_defect(doc: Document, ref) -> Defect:
    """Build the defect for one unresolved reference."""
    if isinstance(ref, CrossReference):
        return Defect(
            slug=doc.slug, kind=DefectKind.dangling_cross_reference, target=ref.slug,
            path=doc.path, line=ref.line, heading=ref.heading,
            message=f"no note with slug '{ref.slug}'",
        )
    return Defect(
        slug=doc.slug, kind=DefectKind.missing_image_asset, target=ref.asset,
        path=doc.path, line=ref.line, heading=ref.heading,
        message=f"no image asset named '{ref.asset}'",
    )


def check_document(doc: Document, index: CorpusIndex, assets: AssetStore) -> list[Defect]:
    """Unresolved references of one document, in occurrence order."""
    defects = []
    for ref in doc.references():
        if isinstance(ref, CrossReference) and ref.slug in index:
            continue
        if isinstance(ref, ImageReference) and ref.asset in assets:
            continue
        defects.append(_reference_defect(doc, ref))
    return defects


def check_references(documents: Iterable[Document], index: CorpusIndex, assets: AssetStore) -> list[Defect]:
    """Check every cross-reference and image reference.

    Defects follow document order, then in-document occurrence order
    (line, then column), with both kinds interleaved. Input is not mutated.
    """
    return [d for doc in documents for d in check_document(doc, index, assets)]


def check_code_fences(documents: Iterable[Document], require_language: bool = False) -> list[Defect]:
    """Report fences left open at end of file and, optionally, fences without a language tag."""
    defects = []
    for doc in documents:
        for snippet in doc.snippets:
            if not snippet.closed:
                defects.append(Defect(
                    slug=doc.slug, kind=DefectKind.unterminated_code_fence, target=snippet.language,
                    path=doc.path, line=snippet.line, heading=snippet.heading,
                    message="code fence is never closed",
                ))
            if require_language and not snippet.language:
                defects.append(Defect(
                    slug=doc.slug, kind=DefectKind.untagged_code_fence,
                    path=doc.path, line=snippet.line, heading=snippet.heading,
                    message="code fence has no language tag",
                ))
    return defects
