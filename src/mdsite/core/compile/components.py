"""JSX-style component tags: tag scanning, attribute parsing, and block-level segmentation"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Union

from mdsite.core.errors import CompileError


COMPONENT_NAME_RE = re.compile(r'[A-Z][\w.]*')
ATTR_NAME_RE = re.compile(r'[A-Za-z_$][\w:.$-]*')
FENCE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})')


@dataclass
class TagMatch:
    name:         str
    props:        dict[str, Any]
    closing:      bool     # </Name>
    self_closing: bool     # <Name />
    end:          int      # index just past '>'


@dataclass
class MarkdownSegment:
    text:   str
    line:   int            # 1-based body line of the first line in text
    inline: bool = False   # phrasing content from a one-line component


@dataclass
class ComponentSegment:
    name:     str
    props:    dict[str, Any]
    line:     int
    end_line: int = 0
    children: list[Union["ComponentSegment", MarkdownSegment]] = field(default_factory=list)


Segment = Union[ComponentSegment, MarkdownSegment]


class UnterminatedTag(CompileError):
    """The input ended inside a component tag."""


def _skip_ws(src: str, i: int) -> int:
    while i < len(src) and src[i].isspace():
        i += 1
    return i


def _read_quoted(src: str, i: int, line: int) -> tuple[str, int]:
    """Read a '…' or "…" string starting at src[i]; return (value, index past closing quote)."""
    quote = src[i]
    end = src.find(quote, i + 1)
    if end == -1:
        raise UnterminatedTag("Unterminated attribute string", line)
    return src[i + 1:end], end + 1


def _read_braced(src: str, i: int, line: int) -> tuple[str, int]:
    """Read a balanced {…} expression starting at src[i]; return (inner text, index past '}')."""
    depth = 0
    j = i
    while j < len(src):
        ch = src[j]
        if ch in '"\'':
            _, j = _read_quoted(src, j, line)
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return src[i + 1:j], j + 1
        j += 1
    raise UnterminatedTag("Unbalanced braces in attribute expression", line)


def _literal(expr: str, name: str, line: int) -> Any:
    try:
        return json.loads(expr)
    except ValueError as e:
        raise CompileError(f"Attribute '{name}' expression is not a literal: {{{expr}}}", line) from e


def scan_tag(src: str, line: int = 0) -> TagMatch | None:
    """Scan a component tag at the start of src. Returns None when src does not start with one.

    Lowercase tags are HTML and are left alone. A capitalized tag that is
    malformed raises CompileError.
    """
    closing = src.startswith('</')
    start = 2 if closing else 1
    if not src.startswith('<'):
        return None
    m = COMPONENT_NAME_RE.match(src, start)
    if not m:
        return None
    name = m.group(0)
    i = m.end()
    props: dict[str, Any] = {}

    while True:
        i = _skip_ws(src, i)
        if i >= len(src):
            raise UnterminatedTag(f"Unterminated tag <{'/' if closing else ''}{name}", line)
        if src.startswith('/>', i):
            if closing:
                raise CompileError(f"Closing tag </{name}> cannot be self-closing", line)
            return TagMatch(name, props, closing=False, self_closing=True, end=i + 2)
        if src[i] == '>':
            return TagMatch(name, props, closing=closing, self_closing=False, end=i + 1)
        if closing:
            raise CompileError(f"Closing tag </{name}> cannot have attributes", line)

        am = ATTR_NAME_RE.match(src, i)
        if not am:
            raise CompileError(f"Invalid attribute syntax in <{name}> near {src[i:i + 10]!r}", line)
        attr = am.group(0)
        i = _skip_ws(src, am.end())
        if i < len(src) and src[i] == '=':
            i = _skip_ws(src, i + 1)
            if i < len(src) and src[i] in '"\'':
                props[attr], i = _read_quoted(src, i, line)
            elif i < len(src) and src[i] == '{':
                expr, i = _read_braced(src, i, line)
                props[attr] = _literal(expr.strip(), attr, line)
            else:
                raise CompileError(f"Expected a value for attribute '{attr}' in <{name}>", line)
        else:
            props[attr] = True


def split_components(body: str) -> list[Segment]:
    """Split a body into markdown runs and block-level component elements.

    A component line is one that starts (after up to three spaces) with a
    capitalized tag: ``<Name …>`` opens, ``</Name>`` closes, ``<Name … />``
    stands alone, and ``<Name>text</Name>`` holds inline markdown. An opening
    tag may wrap its attributes onto following lines. Lines inside fenced code
    are never components.
    """
    root = ComponentSegment(name='', props={}, line=0)
    stack: list[ComponentSegment] = [root]
    pending: list[str] = []
    pending_start = 1
    fence: str | None = None

    def _flush() -> None:
        if pending:
            stack[-1].children.append(MarkdownSegment(''.join(pending), pending_start))
            pending.clear()

    lines = body.splitlines(keepends=True)
    i = 0
    while i < len(lines):
        raw = lines[i]
        lineno = i + 1
        i += 1
        stripped = raw.strip()

        m = FENCE_RE.match(raw)
        if fence is None:
            if m:
                fence = m.group(1)
        elif m and stripped.startswith(fence) and not stripped.lstrip(fence[0]):
            fence = None

        tag = None
        chunk = [raw]
        if m is None and fence is None and len(raw) - len(raw.lstrip(' ')) < 4 and stripped.startswith('<'):
            # An opening tag may wrap its attributes over several lines.
            while True:
                try:
                    tag = scan_tag(stripped, lineno)
                    break
                except UnterminatedTag:
                    if i >= len(lines):
                        raise
                    chunk.append(lines[i])
                    stripped = f"{stripped}\n{lines[i].strip()}"
                    i += 1
        last = i

        if tag is None:
            if not pending:
                pending_start = lineno
            pending.append(raw)
            continue

        rest = stripped[tag.end:].strip()
        if tag.closing:
            if rest:
                raise CompileError(f"Unexpected content after </{tag.name}>", lineno)
            _flush()
            current = stack[-1]
            if current is root:
                raise CompileError(f"Unexpected closing tag </{tag.name}>", lineno)
            if current.name != tag.name:
                raise CompileError(f"Expected closing tag </{current.name}>, found </{tag.name}>", lineno)
            current.end_line = last
            stack.pop()
            continue

        if tag.self_closing and not rest:
            _flush()
            stack[-1].children.append(ComponentSegment(tag.name, tag.props, lineno, last))
            continue

        if not tag.self_closing and not rest:
            _flush()
            opened = ComponentSegment(tag.name, tag.props, lineno)
            stack[-1].children.append(opened)
            stack.append(opened)
            continue

        closer = f'</{tag.name}>'
        if not tag.self_closing and rest.endswith(closer):
            _flush()
            inner = rest[:-len(closer)]
            stack[-1].children.append(ComponentSegment(
                tag.name, tag.props, lineno, last,
                children=[MarkdownSegment(inner, last, inline=True)] if inner.strip() else [],
            ))
            continue

        # Component followed by other text: leave it to the inline pass.
        if not pending:
            pending_start = lineno
        pending.extend(chunk)

    _flush()
    if len(stack) > 1:
        unclosed = stack[-1]
        raise CompileError(f"Unclosed component <{unclosed.name}>", unclosed.line)
    return root.children
