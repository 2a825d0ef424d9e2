"""File discovery, metadata extraction, and markdown-it tokenization of notes"""

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from markdown_it import MarkdownIt

from notecheck.config import Settings
from notecheck.core.errors import MalformedMetadata
from notecheck.core.extract.blocks import collect_sections, collect_snippets, find_title
from notecheck.core.extract.directives import dedent_directive_bodies, find_metadata_block, unclosed_fence_line
from notecheck.core.extract.metadata import from_directive, from_frontmatter, require_fields
from notecheck.core.extract.references import collect_references, page_image_references
from notecheck.core.models import Document
from notecheck.core.utils.hashing import sha256
from notecheck.core.utils.slug import slugify


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'\A---[ \t]*\n(.*?)^---[ \t]*$\n?', re.DOTALL | re.MULTILINE)
MD_EXTENSIONS = ('.md',)


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance with indented code off; directive bodies are indented."""
    return MarkdownIt(preset, options_update={"linkify": False}).disable("code")


def _frontmatter(text: str) -> tuple[Optional[dict[str, Any]], int]:
    """Return (frontmatter_dict or None, number of lines it spans)."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return None, 0
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise MalformedMetadata(f"invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise MalformedMetadata(f"invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, len(m.group(0).splitlines())


def _blank(lines: list[str], start: int, end: int) -> list[str]:
    """Replace lines[start:end] with empty lines so body line numbers match the source."""
    return lines[:start] + ['\n'] * (end - start) + lines[end:]


def discover_files(path: Path, extensions: Iterable[str] = MD_EXTENSIONS) -> list[Path]:
    """Return sorted note files under path, or [path] if a single file."""
    exts = {e.lower() for e in extensions}
    if path.is_file():
        return [path] if path.suffix.lower() in exts else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in exts)


def parse_document(text: str, path: Path, settings: Settings = None) -> Document:
    """Parse raw note text into a Document.

    Pure: the result depends only on text, path and settings. Raises
    MalformedMetadata (with path attached) when the metadata block or the title
    heading is absent, duplicated, unparsable, or missing a required field.
    """
    settings = settings or Settings()
    path = Path(path)
    try:
        return _parse(text, path, settings)
    except MalformedMetadata as e:
        raise e.with_path(path) from e


def _parse(text: str, path: Path, settings: Settings) -> Document:
    lines = text.splitlines(keepends=True)
    frontmatter, fm_lines = _frontmatter(text)
    block = find_metadata_block(lines)

    if frontmatter is not None and block is not None:
        raise MalformedMetadata("both YAML frontmatter and an @Metadata block; use exactly one")
    if frontmatter is None and block is None:
        reason = "missing metadata block"
        if (fence_line := unclosed_fence_line(lines)) is not None:
            reason += f" (code fence opened on line {fence_line} is never closed)"
        raise MalformedMetadata(reason)

    if block is not None:
        metadata, page_images = from_directive(block.directive, path.stem)
        lines = _blank(lines, block.start, block.end)
    else:
        metadata, page_images = from_frontmatter(frontmatter, path.stem), []
        lines = _blank(lines, 0, fm_lines)
    require_fields(metadata, settings.required_fields, settings.page_kinds)
    lines = dedent_directive_bodies(lines)

    tokens = _make_parser(settings.parser_config).parse(''.join(lines))
    title = find_title(tokens)
    if title is None:
        raise MalformedMetadata("missing title heading")

    links, images = collect_references(tokens, settings.asset_extensions)
    images = page_image_references(page_images, settings.asset_extensions) + images

    return Document(
        slug=slugify(metadata.slug or path.stem),
        path=str(path),
        title=title,
        hash=sha256(text),
        metadata=metadata,
        sections=collect_sections(tokens),
        snippets=collect_snippets(tokens, lines),
        images=images,
        links=links,
    )


def parse_file(path: Path, settings: Settings = None) -> Document:
    """Read and parse a single note file."""
    try:
        raw = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Failed to read {path}: {e}") from e
    logger.debug("Parsing %s", path)
    return parse_document(raw, path, settings)


def parse_corpus(root: Path, settings: Settings = None) -> list[Document]:
    """Parse every note under root in sorted (corpus) order; fails fast on the first malformed note."""
    settings = settings or Settings()
    docs = [parse_file(p, settings) for p in discover_files(Path(root), settings.extensions)]
    logger.info("Parsed %d note(s) under %s", len(docs), root)
    return docs
