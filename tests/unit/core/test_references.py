"""Unit tests for core/extract/references.py"""

import pytest
from markdown_it import MarkdownIt

from notecheck.core.extract.directives import Directive
from notecheck.core.extract.references import collect_references, page_image_references, scan_inline


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False}).disable("code")


def test_scan_inline_autolink_and_markdown_link():
    """Both <doc:...> and [text](doc:...) forms are cross-references."""
    links, _ = scan_inline("See <doc:One> and [two](doc:Two#anchor).", 3, "Intro")
    assert [(l.target, l.slug) for l in links] == [("One", "one"), ("Two#anchor", "two")]
    assert all(l.line == 3 and l.heading == "Intro" for l in links)


def test_scan_inline_positions_multiline():
    """Offsets in multi-line inline content map to source line and column."""
    links, _ = scan_inline("first line\nsecond <doc:x>", 10, None)
    assert (links[0].line, links[0].column) == (11, 7)


def test_scan_inline_skips_code_spans():
    """Doc links inside inline code are not references."""
    links, images = scan_inline("`<doc:a>` and ``@Image(source: \"b\")``", 1, None)
    assert links == []
    assert images == []


def test_scan_inline_image_directive():
    """@Image directives yield image references with normalized asset names."""
    _, images = scan_inline('@Image(source: "WWDC24-1-fig~dark@2x.png", alt: "Fig (1)")', 1, None)
    assert [(i.source, i.asset, i.alt) for i in images] == [("WWDC24-1-fig~dark@2x.png", "WWDC24-1-fig", "Fig (1)")]


def test_scan_inline_markdown_images_local_only():
    """Local markdown images are references; remote and data URLs are not."""
    text = "![a](images/local.png) ![b](https://x.test/r.png) ![c](data:image/png;base64,AA)"
    _, images = scan_inline(text, 1, None)
    assert [i.asset for i in images] == ["local"]


def test_scan_inline_image_is_not_a_doc_link():
    """An image whose target uses the doc: scheme is not a cross-reference."""
    links, _ = scan_inline("![x](doc:thing)", 1, None)
    assert links == []


def test_collect_references_order_and_heading(parser):
    """References are returned in occurrence order with their section heading."""
    md = "# Top\n\n<doc:b>\n\n## Sub\n\n@Image(source: \"i\")\n<doc:a>\n"
    links, images = collect_references(parser.parse(md))
    assert [(l.slug, l.line, l.heading) for l in links] == [("b", 3, "Top"), ("a", 8, "Sub")]
    assert [(i.asset, i.line, i.heading) for i in images] == [("i", 7, "Sub")]


def test_collect_references_skips_fences(parser):
    """Fenced code never contributes references."""
    md = "# T\n\n```\n<doc:hidden>\n@Image(source: \"hidden\")\n```\n"
    assert collect_references(parser.parse(md)) == ([], [])


def test_page_image_references():
    """@PageImage directives become image references at their own line."""
    d = Directive(name="PageImage", line=5, kwargs={"source": "card.png", "purpose": "card"})
    refs = page_image_references([d, Directive(name="PageImage", line=6)])
    assert [(r.asset, r.line) for r in refs] == [("card", 5)]
