"""Line-oriented parsing of `@Directive(args) { ... }` blocks in note sources"""

import re
from dataclasses import dataclass, field
from typing import Optional

from notecheck.core.errors import MalformedMetadata


DIRECTIVE_RE = re.compile(r'^\s*@(?P<name>\w+)\s*(?:\((?P<args>.*)\))?\s*(?P<open>\{)?\s*(?P<close>\})?\s*$')
CLOSE_RE = re.compile(r'^\s*\}\s*$')
FENCE_RE = re.compile(r'^\s{0,3}(?P<marker>`{3,}|~{3,})')
ARG_RE = re.compile(r'\s*(?:(?P<key>\w+)\s*:\s*)?(?P<value>"(?:[^"\\]|\\.)*"|[^,]*)\s*(?:,|$)')

METADATA = "Metadata"


@dataclass
class Directive:
    """A parsed directive with its 1-based source line and nested children."""
    name:     str
    line:     int
    args:     list[str] = field(default_factory=list)
    kwargs:   dict[str, str] = field(default_factory=dict)
    children: list["Directive"] = field(default_factory=list)

    @property
    def value(self) -> Optional[str]:
        """First positional argument, if any."""
        return self.args[0] if self.args else None


@dataclass
class MetadataBlock:
    """The `@Metadata` directive and the half-open 0-based line range it spans."""
    directive: Directive
    start:     int
    end:       int


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r'\\(.)', r'\1', value[1:-1])
    return value


def parse_args(text: str) -> tuple[list[str], dict[str, str]]:
    """Split a directive argument list into positional and named values."""
    args: list[str] = []
    kwargs: dict[str, str] = {}
    for m in ARG_RE.finditer(text or ''):
        key, value = m.group('key'), m.group('value').strip()
        if not key and not value:
            continue
        if key:
            kwargs[key] = _unquote(value)
        else:
            args.append(_unquote(value))
    return args, kwargs


def parse_directive(line: str, lineno: int) -> Optional[tuple[Directive, bool]]:
    """Parse one directive line; returns (directive, opens_block) or None."""
    m = DIRECTIVE_RE.match(line)
    if not m:
        return None
    args, kwargs = parse_args(m.group('args'))
    opens = bool(m.group('open')) and not m.group('close')
    return Directive(name=m.group('name'), line=lineno, args=args, kwargs=kwargs), opens


def _read_block(lines: list[str], start: int, root: Directive) -> int:
    """Consume the body of root (opened on line start); return the index past its closing brace."""
    stack = [root]
    i = start + 1
    while i < len(lines):
        text = lines[i]
        if not text.strip():
            i += 1
            continue
        if CLOSE_RE.match(text):
            stack.pop()
            if not stack:
                return i + 1
            i += 1
            continue
        parsed = parse_directive(text, i + 1)
        if parsed is None:
            raise MalformedMetadata(f"line {i + 1}: cannot parse '{text.strip()}' inside @{root.name}")
        child, opens = parsed
        stack[-1].children.append(child)
        if opens:
            stack.append(child)
        i += 1
    raise MalformedMetadata(f"line {root.line}: @{root.name} block is never closed")


def _indent(text: str) -> int:
    return len(text) - len(text.lstrip(' \t'))


def _closes_fence(fence: str, text: str) -> bool:
    """True when text is a closing marker for the open fence."""
    fm = FENCE_RE.match(text)
    return bool(fm) and fm.group('marker')[0] == fence[0] and len(fm.group('marker')) >= len(fence) \
        and not text.strip().lstrip(fence[0])


def unclosed_fence_line(lines: list[str]) -> Optional[int]:
    """1-based line of a code fence still open at end of text, else None."""
    fence: Optional[str] = None
    opened = 0
    for i, text in enumerate(lines):
        if fence is not None:
            if _closes_fence(fence, text):
                fence = None
            continue
        if fm := FENCE_RE.match(text):
            fence, opened = fm.group('marker'), i + 1
    return opened if fence is not None else None


def dedent_directive_bodies(lines: list[str]) -> list[str]:
    """Strip the indentation of `@Directive { ... }` bodies, one output line per input line.

    A body's indent is that of its first non-blank line. Fences nested in
    directive bodies would otherwise sit too deep for markdown-it to see them
    as fences. Lines inside a fence are dedented but never read as directives.
    """
    out: list[str] = []
    indents: list[Optional[int]] = []
    fence: Optional[str] = None
    for text in lines:
        if indents and text.strip():
            if indents[-1] is None and not CLOSE_RE.match(text):
                indents[-1] = _indent(text)
            text = text[min(indents[-1] or 0, _indent(text)):]
        out.append(text)

        if fence is not None:
            if _closes_fence(fence, text):
                fence = None
            continue
        if fm := FENCE_RE.match(text):
            fence = fm.group('marker')
        elif CLOSE_RE.match(text):
            if indents:
                indents.pop()
        elif (parsed := parse_directive(text, 0)) and parsed[1]:
            indents.append(None)
    return out


def find_metadata_block(lines: list[str]) -> Optional[MetadataBlock]:
    """Locate the single `@Metadata { ... }` block outside code fences.

    Returns None when the note has none; raises MalformedMetadata when there is
    more than one, or when the block is unterminated or unparsable.
    """
    found: Optional[MetadataBlock] = None
    fence: Optional[str] = None
    i = 0
    while i < len(lines):
        text = lines[i]
        fm = FENCE_RE.match(text)
        if fence is not None:
            if _closes_fence(fence, text):
                fence = None
            i += 1
            continue
        if fm:
            fence = fm.group('marker')
            i += 1
            continue

        parsed = parse_directive(text, i + 1)
        if parsed is None or parsed[0].name != METADATA:
            i += 1
            continue
        directive, opens = parsed
        if found is not None:
            raise MalformedMetadata(
                f"line {i + 1}: second @{METADATA} block (first on line {found.directive.line})"
            )
        if opens:
            end = _read_block(lines, i, directive)
        elif '{' in text:
            end = i + 1     # empty one-line block
        else:
            raise MalformedMetadata(f"line {i + 1}: @{METADATA} must open a block with '{{'")
        found = MetadataBlock(directive=directive, start=i, end=end)
        i = end
    return found
