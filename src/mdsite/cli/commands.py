"""CLI command implementations"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.collection import ContentCollection
from mdsite.core.export import write_item, write_navigation
from mdsite.core.models import Category
from mdsite.core.render.renderer import ViewKind, render_content


ModeOption = Annotated[Optional[str], typer.Option("--mode", help="development or production")]
CategoryOption = Annotated[Category, typer.Option("--category", "-c", help="Content collection")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def list_cmd(
    category: Annotated[Category, typer.Argument(help="Content collection to list")],
    mode: ModeOption = None,
    ):
    """List a collection in display order: slug, title, reading time."""
    settings = _settings(overrides={"mode": mode})
    items = asyncio.run(ContentCollection(settings).list_all(category))
    if not items:
        typer.echo(f"No {category.value} content found.")
        raise typer.Exit(1)
    for item in items:
        draft = " [draft]" if item.frontmatter.draft else ""
        typer.echo(f"{item.slug}\t{item.frontmatter.title}\t{item.reading_time.text}{draft}")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of the item to show")],
    category: CategoryOption = Category.docs,
    mode: ModeOption = None,
    ):
    """Print an item's metadata, reading time, and compile status as JSON."""
    settings = _settings(overrides={"mode": mode})
    item = asyncio.run(ContentCollection(settings).get_by_slug(slug, category))
    if item is None:
        _fail(f"No {category.value} content with slug '{slug}'")
    typer.echo(json.dumps({
        "slug": item.slug,
        "path": item.path,
        "frontmatter": item.frontmatter.model_dump(mode="json", by_alias=True, exclude_none=True),
        "reading_time": item.reading_time.model_dump(),
        "compiled": bool(item.compiled_content),
    }, indent=2, ensure_ascii=False))


def nav_cmd(mode: ModeOption = None):
    """Print the docs navigation tree as JSON."""
    settings = _settings(overrides={"mode": mode})
    navigation = asyncio.run(ContentCollection(settings).build_navigation())
    typer.echo(json.dumps([s.model_dump(mode="json") for s in navigation], indent=2, ensure_ascii=False))


def render_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of the item to render")],
    category: CategoryOption = Category.docs,
    mode: ModeOption = None,
    ):
    """Render an item to HTML on stdout. Exits 1 when rendering ends in the error state."""
    settings = _settings(overrides={"mode": mode})
    item = asyncio.run(ContentCollection(settings).get_by_slug(slug, category))
    if item is None:
        _fail(f"No {category.value} content with slug '{slug}'")
    view = render_content(item.compiled_content, item.content)
    if view.kind == ViewKind.error:
        _fail(f"Rendering '{slug}' failed", RuntimeError(view.text))
    typer.echo(view.html)


def build_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    docs: Annotated[Optional[str], typer.Option("--docs-dir", help="Docs collection root")] = None,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Parent directory of other collections")] = None,
    mode: ModeOption = None,
    ):
    """Render every collection to HTML + sidecar JSON and write navigation.json."""
    settings = _settings(overrides={"output_dir": out, "docs_dir": docs, "content_dir": content, "mode": mode})
    collection = ContentCollection(settings)
    output_dir = Path(settings.output_dir)

    async def _load():
        return (
            await collection.list_all(Category.docs),
            await collection.list_all(Category.blog),
            await collection.build_navigation(),
        )

    try:
        docs_items, blog_items, navigation = asyncio.run(_load())
        written = [write_item(item, output_dir) for item in docs_items + blog_items]
        nav_path = write_navigation(navigation, output_dir)
    except OSError as e:
        _fail("Build failed", e)

    for html_path, _ in written:
        typer.echo(f"  {html_path}")
    typer.echo(f"  {nav_path}")
    typer.echo(f"Built {len(docs_items)} doc(s) and {len(blog_items)} post(s) to {output_dir}/")
