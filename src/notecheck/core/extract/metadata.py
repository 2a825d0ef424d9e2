"""Build and validate a note's Metadata from a directive block or YAML frontmatter"""

import re
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from notecheck.core.errors import MalformedMetadata
from notecheck.core.extract.directives import Directive
from notecheck.core.models import CallToAction, Metadata


CONFERENCE_RE = re.compile(r"^(?P<name>[A-Za-z][A-Za-z ]*?)\s*'?(?P<year>\d{4}|\d{2})$")
SESSION_URL_RE = re.compile(r"/(?P<event>[a-z][\w-]*)/(?P<session>\d+)/?$", re.IGNORECASE)
FILENAME_RE = re.compile(r"^(?P<event>[A-Za-z]+(?P<year>\d{2}|\d{4}))-(?P<session>\d+)(?:-|$)")
EVENT_YEAR_RE = re.compile(r"(\d{4}|\d{2})$")

FRONTMATTER_KEYS = {"title_heading", "page_kind", "call_to_action", "contributors", "slug"}


def _full_year(digits: str) -> int:
    year = int(digits)
    return year + 2000 if year < 100 else year


def _derive(title_heading: Optional[str], cta: Optional[CallToAction], stem: str) -> dict[str, Any]:
    """Derive conference, year and session from the title heading, CTA url, then file name."""
    conference = year = session = None
    if title_heading:
        conference = title_heading.strip()
        if m := CONFERENCE_RE.match(conference):
            year = _full_year(m.group('year'))
    if cta and (m := SESSION_URL_RE.search(cta.url)):
        session = m.group('session')
        if year is None and (ym := EVENT_YEAR_RE.search(m.group('event'))):
            year = _full_year(ym.group(1))
    if m := FILENAME_RE.match(stem):
        session = session or m.group('session')
        year = year or _full_year(m.group('year'))
        conference = conference or m.group('event')
    return {"conference": conference, "year": year, "session": session}


def _directive_extra(d: Directive) -> Any:
    if d.children:
        return [_directive_extra(c) for c in d.children]
    if d.kwargs:
        return dict(d.kwargs)
    if len(d.args) == 1:
        return d.args[0]
    return list(d.args) or True


def _call_to_action(raw: Any) -> Optional[CallToAction]:
    if raw is None:
        return None
    try:
        if isinstance(raw, str):
            return CallToAction(url=raw)
        if isinstance(raw, dict):
            return CallToAction(**raw)
    except ValidationError as e:
        raise MalformedMetadata(f"invalid call-to-action: {e.errors()[0]['msg']}") from e
    raise MalformedMetadata(f"invalid call-to-action: expected a url or mapping, got {type(raw).__name__}")


def from_directive(block: Directive, stem: str) -> tuple[Metadata, list[Directive]]:
    """Map `@Metadata` children to Metadata; also return `@PageImage` directives (image references)."""
    fields: dict[str, Any] = {"contributors": [], "extra": {}}
    page_images: list[Directive] = []

    for child in block.children:
        if child.name == "TitleHeading":
            fields["title_heading"] = child.value
        elif child.name == "PageKind":
            fields["page_kind"] = child.value
        elif child.name == "CallToAction":
            fields["call_to_action"] = _call_to_action(dict(child.kwargs) if child.kwargs else child.value)
        elif child.name == "Contributors":
            fields["contributors"].extend(c.value for c in child.children if c.value)
        elif child.name == "PageImage":
            page_images.append(child)
        else:
            fields["extra"][child.name] = _directive_extra(child)

    fields.update(_derive(fields.get("title_heading"), fields.get("call_to_action"), stem))
    return Metadata(**fields), page_images


def from_frontmatter(fm: dict[str, Any], stem: str) -> Metadata:
    """Map a YAML frontmatter mapping to Metadata; unknown keys go to extra."""
    contributors = fm.get("contributors") or []
    if isinstance(contributors, str):
        contributors = [contributors]
    if not isinstance(contributors, list):
        raise MalformedMetadata(f"contributors must be a list, got {type(contributors).__name__}")

    title_heading = fm.get("title_heading")
    cta = _call_to_action(fm.get("call_to_action"))
    slug = fm.get("slug")
    try:
        return Metadata(
            title_heading=str(title_heading) if title_heading is not None else None,
            page_kind=fm.get("page_kind"),
            call_to_action=cta,
            contributors=[str(c) for c in contributors],
            slug=str(slug) if slug is not None else None,
            extra={k: v for k, v in fm.items() if k not in FRONTMATTER_KEYS},
            **_derive(title_heading and str(title_heading), cta, stem),
        )
    except ValidationError as e:
        err = e.errors()[0]
        raise MalformedMetadata(f"invalid field '{err['loc'][0]}': {err['msg']}") from e


def require_fields(metadata: Metadata, required: Iterable[str], page_kinds: Iterable[str] = ()) -> None:
    """Raise MalformedMetadata for the first missing required field or unknown page kind."""
    for name in required:
        if name not in Metadata.model_fields:
            raise ValueError(f"Unknown required metadata field: {name}")
        if getattr(metadata, name) in (None, "", []):
            raise MalformedMetadata(f"missing required field '{name}'")

    kinds = list(page_kinds)
    if kinds and metadata.page_kind is not None and metadata.page_kind not in kinds:
        raise MalformedMetadata(
            f"unknown page kind '{metadata.page_kind}' (expected one of: {', '.join(kinds)})"
        )
