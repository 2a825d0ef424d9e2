"""Validation report model and its text/JSON renderings"""

import json
from collections import Counter

from pydantic import BaseModel, Field

from notecheck.core.errors import DuplicateSlug, MalformedMetadata
from notecheck.core.models import Defect, DefectKind, Document
from notecheck.core.utils.slug import slugify


class Report(BaseModel):
    """Outcome of one corpus check."""
    root:      str
    documents: int = 0
    defects:   list[Defect] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.defects

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def counts(self) -> dict[str, int]:
        """Defect counts per kind, in first-seen order."""
        return dict(Counter(d.kind.value for d in self.defects))


def fatal_report(root: str, error: Exception) -> Report:
    """A report holding the single defect that aborted the check."""
    if isinstance(error, DuplicateSlug):
        path = error.paths[-1] if error.paths else None
        defect = Defect(
            slug=error.slug, kind=DefectKind.duplicate_slug, path=str(path) if path else None,
            message=str(error),
        )
    elif isinstance(error, MalformedMetadata):
        defect = Defect(
            slug=slugify(error.path.stem) if error.path else "", kind=DefectKind.malformed_metadata,
            path=str(error.path) if error.path else None, message=error.reason,
        )
    else:
        raise TypeError(f"Not a fatal corpus error: {error!r}")
    return Report(root=root, defects=[defect])


def render_lines(report: Report) -> list[str]:
    """One line per defect, in report order."""
    return [str(d) for d in report.defects]


def render_summary(report: Report) -> str:
    if report.ok:
        return f"OK: {report.documents} note(s) checked, no defects"
    kinds = ", ".join(f"{n} {k}" for k, n in report.counts().items())
    return f"FAILED: {report.documents} note(s) checked, {len(report.defects)} defect(s) ({kinds})"


def render_json(report: Report) -> str:
    """The report as indented JSON, including derived ok/exit_code."""
    data = report.model_dump(mode="json")
    data["ok"] = report.ok
    data["exit_code"] = report.exit_code
    return json.dumps(data, indent=2, ensure_ascii=False)


def document_record(doc: Document) -> str:
    """A document's structured record as indented JSON."""
    return doc.model_dump_json(indent=2)
