"""Static export: rendered HTML pages, sidecar JSON, and the docs navigation file"""

import json
from html import escape
from pathlib import Path

from mdsite.core.models import ContentItem, NavSection
from mdsite.core.render.renderer import RenderView, render_content
from mdsite.core.render.runtime import Component


def build_page(item: ContentItem, view: RenderView) -> str:
    """Wrap a rendered view in a minimal HTML document titled from frontmatter."""
    title = escape(item.frontmatter.title)
    description = item.frontmatter.description
    meta = f'\n<meta name="description" content="{escape(description)}">' if description else ''
    return (
        f"<!doctype html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n<title>{title}</title>{meta}\n</head>\n"
        f"<body>\n<article data-slug=\"{escape(item.slug)}\" data-view=\"{view.kind.value}\">\n"
        f"<h1>{title}</h1>\n{view.html}\n</article>\n</body>\n</html>\n"
    )


def build_sidecar(item: ContentItem, view: RenderView) -> dict:
    """Build the sidecar JSON dict: slug, category, source path, frontmatter, reading time, render outcome."""
    return {
        "slug": item.slug,
        "category": item.category.value,
        "path": item.path,
        "frontmatter": item.frontmatter.model_dump(mode="json", by_alias=True, exclude_none=True),
        "reading_time": item.reading_time.model_dump(),
        "compiled": bool(item.compiled_content),
        "view": view.kind.value,
    }


def write_item(
    item: ContentItem,
    output_dir: Path,
    components: dict[str, Component] | None = None,
    ) -> tuple[Path, Path]:
    """Render and write HTML + sidecar JSON for a single item.

    Output path follows the slug:
      output_dir / category / slug.{html|json}

    Returns (html_path, json_path).
    """
    view = render_content(item.compiled_content, item.content, components)
    base = output_dir / item.category.value / item.slug
    base.parent.mkdir(parents=True, exist_ok=True)

    html_path = base.with_name(f"{base.name}.html")
    json_path = base.with_name(f"{base.name}.json")
    html_path.write_text(build_page(item, view), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(item, view), indent=2), encoding='utf-8')
    return html_path, json_path


def write_navigation(navigation: list[NavSection], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / "navigation.json"
    path.write_text(
        json.dumps([s.model_dump(mode="json") for s in navigation], indent=2),
        encoding='utf-8',
    )
    return path
