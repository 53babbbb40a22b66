"""Unit tests for core/pipeline.py"""

import asyncio
import json
import logging

import pytest

from mdsite.core.errors import FrontmatterError
from mdsite.core.models import Category
from mdsite.core.pipeline import assemble_item


@pytest.mark.asyncio
async def test_assemble_docs_item(settings, docs_root, write_mdx, sample_fm_mdx):
    """A docs file becomes a fully populated item with a normalized slug."""
    path = write_mdx(docs_root, "00 - Quick Start & Setup/Setup.mdx", sample_fm_mdx)
    item = await assemble_item(path, Category.docs, settings)

    assert item.slug == "quick-start/setup"
    assert item.category == Category.docs
    assert item.path == str(path)
    assert item.frontmatter.title == "Setup"
    assert item.frontmatter.order == 2
    assert item.frontmatter.date == "2024-01-15"
    assert item.frontmatter.tags == ["setup", "intro"]
    assert item.content.strip().startswith("# Setup")
    assert "title:" not in item.content
    assert item.reading_time.words == 5
    assert item.reading_time.text == "1 min read"


@pytest.mark.asyncio
async def test_compiled_content_names_unit(settings, docs_root, write_mdx, sample_fm_mdx):
    path = write_mdx(docs_root, "00 - Quick Start & Setup/Setup.mdx", sample_fm_mdx)
    item = await assemble_item(path, Category.docs, settings)
    doc = json.loads(item.compiled_content)
    assert doc["unit"] == "quick-start/setup.mdx"
    assert doc["development"] is True


@pytest.mark.asyncio
async def test_production_build_has_no_spans(prod_settings, docs_root, write_mdx, sample_fm_mdx):
    path = write_mdx(docs_root, "setup.mdx", sample_fm_mdx)
    item = await assemble_item(path, Category.docs, prod_settings)
    assert '"lines"' not in item.compiled_content


@pytest.mark.asyncio
async def test_blog_slug_is_relative_path(settings, blog_root, write_mdx):
    path = write_mdx(blog_root, "2024/Hello World.mdx", "---\ntitle: Hello\ndate: 2024-03-01\n---\nPost.\n")
    item = await assemble_item(path, Category.blog, settings)
    assert item.slug == "2024/Hello World"
    assert item.category == Category.blog


@pytest.mark.asyncio
async def test_compile_failure_keeps_item(settings, docs_root, write_mdx, caplog):
    """An item whose body fails to compile is still returned, with empty compiled content."""
    path = write_mdx(docs_root, "broken.mdx", "---\ntitle: Broken\n---\n<Callout>\nNever closed\n")
    with caplog.at_level(logging.WARNING, logger="mdsite.core.pipeline"):
        item = await assemble_item(path, Category.docs, settings)
    assert item.compiled_content == ""
    assert item.frontmatter.title == "Broken"
    assert "Never closed" in item.content
    assert "Error compiling MDX for broken" in caplog.text
    assert "Unclosed component <Callout>" in caplog.text


@pytest.mark.asyncio
async def test_missing_title_derived_from_slug(settings, docs_root, write_mdx):
    path = write_mdx(docs_root, "01 - Getting Started/first-steps.mdx", "# No header\n")
    item = await assemble_item(path, Category.docs, settings)
    assert item.slug == "getting-started/first-steps"
    assert item.frontmatter.title == "First Steps"


@pytest.mark.asyncio
async def test_extra_and_aliased_fields(settings, docs_root, write_mdx):
    text = "---\ntitle: X\nlastUpdated: 2024-02-02\nhero: /img.png\ndraft: true\n---\nBody\n"
    item = await assemble_item(write_mdx(docs_root, "x.mdx", text), Category.docs, settings)
    assert item.frontmatter.last_updated == "2024-02-02"
    assert item.frontmatter.draft is True
    assert item.frontmatter.model_extra["hero"] == "/img.png"


@pytest.mark.asyncio
async def test_invalid_yaml_names_file(settings, docs_root, write_mdx):
    path = write_mdx(docs_root, "bad.mdx", "---\ntitle: [unclosed\n---\nBody\n")
    with pytest.raises(FrontmatterError, match="bad.mdx"):
        await assemble_item(path, Category.docs, settings)


@pytest.mark.asyncio
async def test_invalid_title_type(settings, docs_root, write_mdx):
    path = write_mdx(docs_root, "bad.mdx", "---\ntitle: [a, b]\n---\nBody\n")
    with pytest.raises(FrontmatterError, match="invalid frontmatter"):
        await assemble_item(path, Category.docs, settings)


@pytest.mark.asyncio
async def test_mistyped_fields_fall_back_to_defaults(settings, blog_root, write_mdx, caplog):
    """Only title can reject a file; other fields of the wrong type are dropped with a warning."""
    text = "---\ntitle: Post\nauthor:\n  name: Jane\norder: 1.5\ntags:\n  k: v\ndraft: maybe\n---\nBody\n"
    with caplog.at_level(logging.WARNING, logger="mdsite.core.models"):
        item = await assemble_item(write_mdx(blog_root, "post.mdx", text), Category.blog, settings)
    assert item.frontmatter.title == "Post"
    assert item.frontmatter.author is None
    assert item.frontmatter.order is None
    assert item.frontmatter.tags == []
    assert item.frontmatter.draft is False
    for name in ("author", "order", "tags", "draft"):
        assert f"Ignoring frontmatter field {name}=" in caplog.text


@pytest.mark.asyncio
async def test_file_read_runs_off_the_event_loop(settings, docs_root, write_mdx, monkeypatch):
    calls = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        calls.append(func)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
    path = write_mdx(docs_root, "x.mdx", "---\ntitle: X\n---\nBody\n")
    await assemble_item(path, Category.docs, settings)
    assert calls == [path.read_text]
