"""Headings and fenced code snippets from a markdown-it token stream"""

import re

from notecheck.core.models import CodeSnippet, Section
from notecheck.core.utils.tokens import heading_level, iter_with_heading


QUOTE_PREFIX_RE = re.compile(r'^[\s>]*')


def _fence_closed(token, source_lines: list[str]) -> bool:
    """True when the last line of a fence token's range is its closing marker."""
    start, end = token.map
    if end - start < 2 or end > len(source_lines):
        return False
    last = QUOTE_PREFIX_RE.sub('', source_lines[end - 1]).rstrip()
    marker = token.markup[0]
    return len(last) >= len(token.markup) and not last.strip(marker)


def collect_sections(tokens: list) -> list[Section]:
    """Return one Section per heading, in document order."""
    sections = []
    for i, tok in enumerate(tokens):
        level = heading_level(tok)
        if level is None or not tok.map:
            continue
        sections.append(Section(
            line=tok.map[0] + 1,
            title=tokens[i + 1].content.strip(),
            level=level,
        ))
    return sections


def collect_snippets(tokens: list, source_lines: list[str]) -> list[CodeSnippet]:
    """Return fenced code blocks verbatim with language tag and closed state."""
    snippets = []
    for _, tok, heading in iter_with_heading(tokens):
        if tok.type != 'fence':
            continue
        info = tok.info.strip()
        snippets.append(CodeSnippet(
            line=tok.map[0] + 1 if tok.map else 0,
            heading=heading,
            language=info.split()[0] if info else None,
            code=tok.content,
            closed=_fence_closed(tok, source_lines) if tok.map else True,
        ))
    return snippets


def find_title(tokens: list) -> str | None:
    """Return the text of the first level-1 heading, else None."""
    for i, tok in enumerate(tokens):
        if heading_level(tok) == 1:
            return tokens[i + 1].content.strip() or None
    return None
