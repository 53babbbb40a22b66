"""Execute a compiled document into HTML

Element nodes are rendered through ELEMENT_RENDERERS, a closed table keyed by
tag. Component nodes are looked up in the caller's component mapping, the
way an MDX runtime receives its `components` prop.
"""

from html import escape
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from mdsite.core.errors import RenderError
from mdsite.core.models import CompiledDocument, Node, NodeKind


Component = Callable[[dict[str, Any], str], str]     # (props, rendered children) -> html
ElementRenderer = Callable[[Node, str], str]         # (node, rendered children) -> html

PROP_ALIASES = {"className": "class", "htmlFor": "for"}


def render_attrs(props: Mapping[str, Any]) -> str:
    """Serialize props as HTML attributes; True is a bare flag, None/False are dropped."""
    parts = []
    for key, value in props.items():
        name = PROP_ALIASES.get(key, key)
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(str(value), quote=True)}"')
    return "".join(parts)


def _container(tag: str) -> ElementRenderer:
    return lambda node, inner: f"<{tag}{render_attrs(node.props)}>{inner}</{tag}>"


def _void(tag: str) -> ElementRenderer:
    return lambda node, inner: f"<{tag}{render_attrs(node.props)} />"


ELEMENT_RENDERERS: dict[str, ElementRenderer] = {
    **{tag: _container(tag) for tag in (
        'p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'ul', 'ol', 'li',
        'pre', 'code', 'strong', 'em', 's', 'a',
        'table', 'thead', 'tbody', 'tr', 'th', 'td',
    )},
    'hr':  _void('hr'),
    'br':  _void('br'),
    'img': _void('img'),
}


def _where(doc: CompiledDocument, node: Node) -> str:
    """Diagnostic location: unit name, plus the source span in development builds."""
    if doc.development and node.lines:
        return f"{doc.unit}:{node.lines[0]}-{node.lines[1]}"
    return doc.unit


def load_document(compiled: str) -> CompiledDocument:
    """Deserialize compiled content, raising RenderError on anything that is not IR."""
    try:
        return CompiledDocument.model_validate_json(compiled)
    except ValidationError as e:
        raise RenderError(f"Invalid compiled content: {e.error_count()} validation error(s)") from e


class Runtime:
    """Walks a CompiledDocument, dispatching each node by kind."""

    def __init__(self, doc: CompiledDocument, components: Mapping[str, Component] | None = None):
        self.doc = doc
        self.components = dict(components or {})

    def render(self) -> str:
        return self._children(self.doc.children)

    def _children(self, nodes: list[Node]) -> str:
        return "".join(self._node(n) for n in nodes)

    def _node(self, node: Node) -> str:
        if node.kind == NodeKind.text:
            return escape(node.text or "", quote=False)
        if node.kind == NodeKind.raw:
            return node.text or ""
        inner = self._children(node.children)
        if node.kind == NodeKind.element:
            renderer = ELEMENT_RENDERERS.get(node.tag or "")
            if renderer is None:
                raise RenderError(f"Unsupported element <{node.tag}> in {_where(self.doc, node)}")
            return renderer(node, inner)

        component = self.components.get(node.tag or "")
        if component is None:
            raise RenderError(
                f"Expected component `{node.tag}` to be defined: you likely forgot to pass it "
                f"({_where(self.doc, node)})"
            )
        try:
            return component(dict(node.props), inner)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Component `{node.tag}` failed in {_where(self.doc, node)}: {e}") from e


def run(compiled: str, components: Mapping[str, Component] | None = None) -> str:
    """Execute serialized IR and return HTML. All failures surface as RenderError."""
    return Runtime(load_document(compiled), components).render()
