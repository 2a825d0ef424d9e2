"""Pipeline step functions: load, index, and check orchestration"""

import logging
from pathlib import Path
from typing import Optional

from notecheck.config import Settings
from notecheck.core.assets import AssetStore, DirectoryAssetStore
from notecheck.core.check import check_code_fences, check_references
from notecheck.core.index import CorpusIndex
from notecheck.core.parse import parse_corpus
from notecheck.core.report import Report


logger = logging.getLogger(__name__)


def run_load(settings: Settings) -> CorpusIndex:
    """Parse the corpus and build its index.

    Raises MalformedMetadata or DuplicateSlug (fail fast) and RuntimeError for
    unreadable files or a missing corpus root.
    """
    root = Path(settings.corpus_root)
    if not root.exists():
        raise RuntimeError(f"Corpus root not found: {root}")
    return CorpusIndex(parse_corpus(root, settings))


def run_check(settings: Settings, assets: Optional[AssetStore] = None) -> Report:
    """Load the corpus, then accumulate reference and code-fence defects.

    Reference checking only runs once every note parsed and every slug is
    unique. Defects are grouped by corpus order, then by line.
    """
    index = run_load(settings)
    docs = index.documents()
    if assets is None:
        assets = DirectoryAssetStore(settings.assets_root, settings.asset_extensions)

    defects = check_references(docs, index, assets)
    defects += check_code_fences(docs, settings.require_fence_language)
    order = {d.slug: i for i, d in enumerate(docs)}
    defects.sort(key=lambda d: (order[d.slug], d.line or 0))

    logger.info("Checked %d note(s): %d defect(s)", len(docs), len(defects))
    return Report(root=settings.corpus_root, documents=len(docs), defects=defects)
