"""markdown-it token stream to IR node conversion"""

import re

from markdown_it import MarkdownIt

from mdsite.core.compile.components import scan_tag
from mdsite.core.errors import CompileError
from mdsite.core.models import Node, NodeKind


TAG_START_RE = re.compile(r'</?[A-Z]')


def make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _element(tag: str, props: dict | None = None, children: list[Node] | None = None) -> Node:
    return Node(kind=NodeKind.element, tag=tag, props=props or {}, children=children or [])


def _text(text: str) -> Node:
    return Node(kind=NodeKind.text, text=text)


def _code_block(token) -> Node:
    info = token.info.strip().split(maxsplit=1)[0] if token.info and token.info.strip() else ''
    props = {"className": f"language-{info}"} if info else {}
    return _element('pre', children=[_element('code', props, [_text(token.content)])])


def _component_tag(content: str, line: int):
    """Return a TagMatch when an html_inline token is exactly one component tag."""
    tag = scan_tag(content.strip(), line)
    if tag is not None and tag.end != len(content.strip()):
        raise CompileError(f"Malformed component tag {content.strip()!r}", line)
    return tag


def _split_text(content: str, line: int) -> list:
    """Split a text token into plain strings and component TagMatches.

    markdown-it only emits html_inline for tags its HTML grammar accepts, so
    tags with `{…}` props or dotted names arrive here as text.
    """
    parts: list = []
    pos = 0
    while m := TAG_START_RE.search(content, pos):
        tag = scan_tag(content[m.start():], line)
        if m.start() > pos:
            parts.append(content[pos:m.start()])
        parts.append(tag)
        pos = m.start() + tag.end
    if pos < len(content):
        parts.append(content[pos:])
    return parts


def _push_tag(stack: list[Node], tag, line: int) -> None:
    top = stack[-1]
    if tag.closing:
        if top.kind != NodeKind.component or top.tag != tag.name:
            raise CompileError(f"Unexpected closing tag </{tag.name}>", line)
        stack.pop()
        return
    node = Node(kind=NodeKind.component, tag=tag.name, props=tag.props)
    top.children.append(node)
    if not tag.self_closing:
        stack.append(node)


def inline_to_nodes(children: list, line: int) -> list[Node]:
    """Convert the children of an `inline` token, nesting inline components and emphasis."""
    root = _element('')
    stack: list[Node] = [root]

    for tok in children:
        top = stack[-1]
        if tok.type == 'text':
            for part in _split_text(tok.content, line):
                if isinstance(part, str):
                    stack[-1].children.append(_text(part))
                else:
                    _push_tag(stack, part, line)
        elif tok.type == 'softbreak':
            top.children.append(_text('\n'))
        elif tok.type == 'hardbreak':
            top.children.append(_element('br'))
        elif tok.type == 'code_inline':
            top.children.append(_element('code', children=[_text(tok.content)]))
        elif tok.type == 'image':
            props = {"src": tok.attrGet('src') or '', "alt": tok.content}
            if tok.attrGet('title'):
                props["title"] = tok.attrGet('title')
            top.children.append(_element('img', props))
        elif tok.type == 'html_inline':
            tag = _component_tag(tok.content, line)
            if tag is None:
                top.children.append(Node(kind=NodeKind.raw, text=tok.content))
            else:
                _push_tag(stack, tag, line)
        elif tok.nesting == 1:
            node = _element(tok.tag, dict(tok.attrs))
            top.children.append(node)
            stack.append(node)
        elif tok.nesting == -1:
            if top.kind == NodeKind.component:
                raise CompileError(f"Unclosed component <{top.tag}>", line)
            stack.pop()

    if len(stack) > 1:
        raise CompileError(f"Unclosed component <{stack[-1].tag}>", line)
    return root.children


def tokens_to_nodes(tokens: list, offset: int = 0, development: bool = False) -> list[Node]:
    """Convert a block token stream into IR nodes.

    offset shifts token line maps so that development-mode spans are relative
    to the whole body, not the markdown run they were parsed from.
    """
    root = _element('')
    stack: list[Node] = [root]

    def _span(tok, node: Node) -> Node:
        if development and tok.map:
            node.lines = (offset + tok.map[0] + 1, offset + tok.map[1])
        return node

    for tok in tokens:
        top = stack[-1]
        line = offset + (tok.map[0] + 1 if tok.map else 1)

        if tok.hidden:
            continue
        if tok.type == 'inline':
            top.children.extend(inline_to_nodes(tok.children or [], line))
        elif tok.type in ('fence', 'code_block'):
            top.children.append(_span(tok, _code_block(tok)))
        elif tok.type == 'html_block':
            top.children.append(_span(tok, Node(kind=NodeKind.raw, text=tok.content)))
        elif tok.type == 'hr':
            top.children.append(_span(tok, _element('hr')))
        elif tok.nesting == 1:
            node = _span(tok, _element(tok.tag, dict(tok.attrs)))
            top.children.append(node)
            stack.append(node)
        elif tok.nesting == -1:
            stack.pop()

    return root.children
