"""Cross-document links and image references found in inline text"""

import re
from typing import Iterable, Optional

from notecheck.core.assets import IMAGE_EXTENSIONS, asset_name
from notecheck.core.extract.directives import Directive, parse_args
from notecheck.core.models import CrossReference, ImageReference
from notecheck.core.utils.slug import target_slug
from notecheck.core.utils.tokens import iter_with_heading


CODE_SPAN_RE = re.compile(r'(`+)(.+?)\1', re.DOTALL)
DOC_LINK_RE = re.compile(r'<doc:(?P<auto>[^>\s]+)>|(?<!!)\[[^\]]*\]\(doc:(?P<md>[^)\s]+)\)')
IMAGE_DIRECTIVE_RE = re.compile(r'@Image\((?P<args>(?:"(?:[^"\\]|\\.)*"|[^)"])*)\)')
MD_IMAGE_RE = re.compile(r'!\[(?P<alt>[^\]]*)\]\((?P<src><[^>]*>|[^)\s]+)(?:\s+"[^"]*")?\)')
REMOTE_PREFIXES = ('http://', 'https://', 'data:', '//')


def _mask_code_spans(text: str) -> str:
    """Blank out inline code spans, keeping offsets and newlines intact."""
    return CODE_SPAN_RE.sub(lambda m: re.sub(r'[^\n]', ' ', m.group(0)), text)


def _position(content: str, offset: int, first_line: int) -> tuple[int, int]:
    """Map an offset in inline content to (1-based line, column)."""
    line = first_line + content.count('\n', 0, offset)
    column = offset - (content.rfind('\n', 0, offset) + 1)
    return line, column


def scan_inline(
    content: str,
    first_line: int,
    heading: Optional[str],
    extensions: Iterable[str] = IMAGE_EXTENSIONS,
    ) -> tuple[list[CrossReference], list[ImageReference]]:
    """Find doc links, `@Image` directives and local markdown images in one inline run."""
    text = _mask_code_spans(content)
    links, images = [], []

    for m in DOC_LINK_RE.finditer(text):
        target = m.group('auto') or m.group('md')
        line, column = _position(text, m.start(), first_line)
        links.append(CrossReference(
            line=line, column=column, heading=heading, target=target, slug=target_slug(target),
        ))

    for m in IMAGE_DIRECTIVE_RE.finditer(text):
        _, kwargs = parse_args(m.group('args'))
        source = kwargs.get('source')
        if not source:
            continue
        line, column = _position(text, m.start(), first_line)
        images.append(ImageReference(
            line=line, column=column, heading=heading,
            source=source, asset=asset_name(source, extensions), alt=kwargs.get('alt'),
        ))

    for m in MD_IMAGE_RE.finditer(text):
        source = m.group('src').strip('<>')
        if source.startswith(REMOTE_PREFIXES):
            continue
        line, column = _position(text, m.start(), first_line)
        images.append(ImageReference(
            line=line, column=column, heading=heading,
            source=source, asset=asset_name(source, extensions), alt=m.group('alt') or None,
        ))

    return links, images


def collect_references(
    tokens: list,
    extensions: Iterable[str] = IMAGE_EXTENSIONS,
    ) -> tuple[list[CrossReference], list[ImageReference]]:
    """Scan every inline token outside code for references, in occurrence order."""
    links: list[CrossReference] = []
    images: list[ImageReference] = []
    last_line = 1
    for _, tok, heading in iter_with_heading(tokens):
        if tok.map:
            last_line = tok.map[0] + 1
        if tok.type != 'inline':
            continue
        found_links, found_images = scan_inline(tok.content, last_line, heading, extensions)
        links.extend(found_links)
        images.extend(found_images)

    links.sort(key=lambda r: (r.line, r.column))
    images.sort(key=lambda r: (r.line, r.column))
    return links, images


def page_image_references(
    directives: list[Directive],
    extensions: Iterable[str] = IMAGE_EXTENSIONS,
    ) -> list[ImageReference]:
    """Image references declared by `@PageImage` inside the metadata block."""
    images = []
    for d in directives:
        source = d.kwargs.get('source')
        if source:
            images.append(ImageReference(
                line=d.line, source=source, asset=asset_name(source, extensions), alt=d.kwargs.get('alt'),
            ))
    return images
