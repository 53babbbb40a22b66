"""Content renderer state machine: idle -> loading -> ready | errored, with raw-text fallback"""

import logging
from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Mapping, Optional

from mdsite.core.errors import RenderError
from mdsite.core.render.runtime import Component, run


logger = logging.getLogger(__name__)

LOADING_HTML = '<div class="animate-pulse">Loading content...</div>'
EMPTY_HTML = '<div>Content not available</div>'


class RenderState(str, Enum):
    idle = "idle"
    loading = "loading"
    ready = "ready"
    errored = "errored"


class ViewKind(str, Enum):
    """What a consumer should display"""
    loading = "loading"
    rendered = "rendered"
    error = "error"
    raw = "raw"
    empty = "empty"


@dataclass(frozen=True)
class RenderView:
    kind: ViewKind
    html: str
    text: str = ""      # rendered html, raw source, or error message depending on kind


class ContentRenderer:
    """Renders one content item from its compiled IR, falling back to the raw body.

    update() is the only input transition. Supplying non-empty compiled
    content that differs from the active one moves to LOADING; settle()
    executes it and lands in READY or ERRORED. A failed execution is kept
    until new compiled content arrives; it is never retried on its own.
    Whenever no compiled content is active the view is the raw body as
    preformatted text, or the empty state if there is no body either.
    """

    def __init__(self, components: Mapping[str, Component] | None = None):
        self.components = components
        self.state = RenderState.idle
        self.compiled_content: Optional[str] = None
        self.raw_content: Optional[str] = None
        self.error: Optional[str] = None
        self._output: Optional[str] = None

    def update(self, compiled_content: str | None = None, raw_content: str | None = None) -> RenderView:
        self.raw_content = raw_content
        if not compiled_content or not compiled_content.strip():
            self.compiled_content = None
            self.state = RenderState.idle
            self.error = self._output = None
        elif compiled_content != self.compiled_content:
            self.compiled_content = compiled_content
            self.state = RenderState.loading
            self.error = self._output = None
        return self.view()

    def settle(self) -> RenderView:
        """Execute pending compiled content, if any."""
        if self.state == RenderState.loading:
            try:
                self._output = run(self.compiled_content, self.components)
            except RenderError as e:
                logger.error("Error rendering compiled content: %s", e)
                self.error = str(e)
                self.state = RenderState.errored
            else:
                self.state = RenderState.ready
        return self.view()

    def view(self) -> RenderView:
        if self.compiled_content is None:
            if self.raw_content:
                return RenderView(
                    ViewKind.raw,
                    f'<pre class="whitespace-pre-wrap">{escape(self.raw_content, quote=False)}</pre>',
                    self.raw_content,
                )
            return RenderView(ViewKind.empty, EMPTY_HTML)
        if self.state == RenderState.ready:
            return RenderView(ViewKind.rendered, self._output, self._output)
        if self.state == RenderState.errored:
            return RenderView(
                ViewKind.error,
                f'<div class="render-error"><p>Error rendering content: {escape(self.error)}</p></div>',
                self.error,
            )
        return RenderView(ViewKind.loading, LOADING_HTML)


def render_content(
    compiled_content: str | None,
    raw_content: str | None = None,
    components: Mapping[str, Component] | None = None,
    ) -> RenderView:
    """One-shot render: update with the inputs and settle."""
    renderer = ContentRenderer(components)
    renderer.update(compiled_content, raw_content)
    return renderer.settle()
