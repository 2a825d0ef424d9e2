"""Unit tests for core/extract/blocks.py"""

import pytest
from markdown_it import MarkdownIt

from notecheck.core.extract.blocks import collect_sections, collect_snippets, find_title


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False}).disable("code")


def _snippets(parser, md: str):
    return collect_snippets(parser.parse(md), md.splitlines(keepends=True))


def test_find_title(parser):
    """The first h1 is the title, even after other headings."""
    assert find_title(parser.parse("## Pre\n\n# Real\n\n# Later\n")) == "Real"
    assert find_title(parser.parse("Just prose.\n")) is None


def test_collect_sections(parser):
    """Every heading becomes a Section with 1-based line and level."""
    sections = collect_sections(parser.parse("# A\n\ntext\n\n### B\n"))
    assert [(s.title, s.level, s.line) for s in sections] == [("A", 1, 1), ("B", 3, 5)]


def test_snippet_closed_with_language(parser):
    """A closed fence keeps its language tag and heading."""
    snippets = _snippets(parser, "# H\n\n```swift title\nlet x = 1\n```\n")
    assert len(snippets) == 1
    assert (snippets[0].language, snippets[0].closed, snippets[0].heading) == ("swift", True, "H")


def test_snippet_unterminated(parser):
    """A fence running to end of file is not closed."""
    snippets = _snippets(parser, "# H\n\n```swift\nlet x = 1\nlet y = 2\n")
    assert snippets[0].closed is False


@pytest.mark.parametrize("md", [
    "~~~\ncode\n~~~\n",
    "````\ncode\n```\n````\n",
    "> ```\n> quoted\n> ```\n",
])
def test_snippet_closed_variants(parser, md):
    """Tilde fences, longer fences and fences in blockquotes close correctly."""
    assert all(s.closed for s in _snippets(parser, md))


def test_snippet_shorter_closing_marker(parser):
    """A shorter marker does not close a longer fence."""
    snippets = _snippets(parser, "````\ncode\n```\n")
    assert snippets[0].closed is False


def test_snippet_without_language(parser):
    """An untagged fence has language None."""
    assert _snippets(parser, "```\nplain\n```\n")[0].language is None
