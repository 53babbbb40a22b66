"""Compile an MDX body into a serialized CompiledDocument"""

from markdown_it import MarkdownIt

from mdsite.core.compile.blocks import inline_to_nodes, make_parser, tokens_to_nodes
from mdsite.core.compile.components import MarkdownSegment, Segment, split_components
from mdsite.core.errors import CompileError
from mdsite.core.models import CompiledDocument, CompileResult, Node, NodeKind


def _segments_to_nodes(segments: list[Segment], md: MarkdownIt, development: bool) -> list[Node]:
    nodes: list[Node] = []
    for seg in segments:
        if isinstance(seg, MarkdownSegment):
            if seg.inline:
                for tok in md.parseInline(seg.text):
                    nodes.extend(inline_to_nodes(tok.children or [], seg.line))
            else:
                nodes.extend(tokens_to_nodes(md.parse(seg.text), seg.line - 1, development))
            continue

        node = Node(
            kind=NodeKind.component,
            tag=seg.name,
            props=seg.props,
            children=_segments_to_nodes(seg.children, md, development),
        )
        if development:
            node.lines = (seg.line, seg.end_line or seg.line)
        nodes.append(node)
    return nodes


def build_document(body: str, unit: str, development: bool = False, parser_config: str = 'gfm-like') -> CompiledDocument:
    """Compile body into a CompiledDocument. Raises CompileError on invalid component markup."""
    md = make_parser(parser_config)
    segments = split_components(body)
    return CompiledDocument(
        unit=unit,
        development=development,
        children=_segments_to_nodes(segments, md, development),
    )


def compile_document(
    body: str,
    unit: str,
    development: bool = False,
    parser_config: str = 'gfm-like',
    ) -> CompileResult:
    """Compile body to serialized IR. Failures come back as CompileResult.error, never raised.

    unit names the compilation unit (e.g. 'quick-start/setup.mdx') and is
    embedded in the output and in every error message.
    """
    try:
        doc = build_document(body, unit, development, parser_config)
    except CompileError as e:
        return CompileResult(error=f"{unit}: {e}")
    except Exception as e:
        return CompileResult(error=f"{unit}: internal compiler error: {e!r}")
    return CompileResult(code=doc.model_dump_json(exclude_none=True))
