"""Structured records for parsed notes and validation findings"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class DefectKind(str, Enum):
    """Restrict validation findings to a predefined set of kinds"""
    malformed_metadata = "MalformedMetadata"
    duplicate_slug = "DuplicateSlug"
    dangling_cross_reference = "DanglingCrossReference"
    missing_image_asset = "MissingImageAsset"
    unterminated_code_fence = "UnterminatedCodeFence"
    untagged_code_fence = "UntaggedCodeFence"


class CallToAction(BaseModel):
    """The session's watch/download link from the metadata block."""
    model_config = {"frozen": True}

    url: str
    purpose: Optional[str] = None
    label: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"call-to-action url must be http(s), got '{v}'")
        return v


class Metadata(BaseModel):
    """Metadata block fields plus the conference/session values derived from them."""
    model_config = {"frozen": True}

    title_heading:  Optional[str] = None
    page_kind:      Optional[str] = None
    call_to_action: Optional[CallToAction] = None
    contributors:   list[str] = Field(default_factory=list)   # free-form, duplicates allowed
    slug:           Optional[str] = None                      # explicit override of the file-name slug
    conference:     Optional[str] = None
    year:           Optional[int] = None
    session:        Optional[str] = None
    extra:          dict[str, Any] = Field(default_factory=dict)


class Located(BaseModel):
    """Source position of a finding inside a note: 1-based line, 0-based column."""
    model_config = {"frozen": True}

    line:    int
    column:  int = 0
    heading: Optional[str] = None   # nearest preceding heading text


class Section(Located):
    """A body heading, in document order."""
    title: str
    level: int


class CodeSnippet(Located):
    """A fenced code block, kept verbatim and never executed."""
    language: Optional[str] = None
    code:     str
    closed:   bool = True


class ImageReference(Located):
    """A reference from a note to an image asset."""
    source: str     # as written
    asset:  str     # normalized asset name
    alt:    Optional[str] = None


class CrossReference(Located):
    """A doc link from a note to another note's slug."""
    target: str     # as written
    slug:   str     # normalized target


class Document(BaseModel):
    """One note file as a structured record; immutable once parsed."""
    model_config = {"frozen": True}

    slug:     str
    path:     str
    title:    str
    hash:     str
    metadata: Metadata
    sections: list[Section] = Field(default_factory=list)
    snippets: list[CodeSnippet] = Field(default_factory=list)
    images:   list[ImageReference] = Field(default_factory=list)
    links:    list[CrossReference] = Field(default_factory=list)

    def references(self) -> list[Located]:
        """Cross-references and image references merged in occurrence order."""
        return sorted([*self.links, *self.images], key=lambda r: (r.line, r.column))


class Defect(BaseModel):
    """A single validation finding with a location hint."""
    model_config = {"frozen": True}

    slug:    str
    kind:    DefectKind
    target:  Optional[str] = None
    path:    Optional[str] = None
    line:    Optional[int] = None
    heading: Optional[str] = None
    message: str = ""

    def __str__(self) -> str:
        where = f"{self.path}:{self.line}" if self.line else (self.path or self.slug)
        text = f"{where}: {self.kind.value}: {self.slug}"
        if self.target:
            text += f" -> {self.target}"
        if self.heading:
            text += f' (under "{self.heading}")'
        if self.message:
            text += f" [{self.message}]"
        return text
