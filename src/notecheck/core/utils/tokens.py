"""Shared markdown-it token utilities"""

from typing import Iterator, Optional


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def iter_with_heading(tokens: list) -> Iterator[tuple[int, object, Optional[str]]]:
    """Yield (index, token, nearest heading text) in stream order.

    A heading's own inline token is yielded with that heading as context.
    """
    current = None
    for i, tok in enumerate(tokens):
        if heading_level(tok) is not None and i + 1 < len(tokens):
            current = tokens[i + 1].content.strip()
        yield i, tok, current
