"""Content item assembly: read -> frontmatter -> slug -> reading time -> compile"""

import asyncio
import logging
from pathlib import Path

from pydantic import ValidationError

from mdsite.config import Settings
from mdsite.core.compile.compile import compile_document
from mdsite.core.errors import FrontmatterError
from mdsite.core.models import Category, ContentItem, ContentMetadata
from mdsite.core.parse import category_root, split_frontmatter
from mdsite.core.utils.reading_time import estimate_reading_time
from mdsite.core.utils.slug import derive_slug, titleize


logger = logging.getLogger(__name__)


def _metadata(frontmatter: dict, slug: str, path: Path) -> ContentMetadata:
    """Validate frontmatter; a missing title falls back to one derived from the slug."""
    data = dict(frontmatter)
    if data.get('title') in (None, ''):
        data['title'] = titleize(slug)
    try:
        return ContentMetadata.model_validate(data)
    except ValidationError as e:
        raise FrontmatterError(f"{path}: invalid frontmatter: {e}") from e


async def assemble_item(
    path: Path,
    category: Category,
    settings: Settings,
    root: Path | None = None,
    ) -> ContentItem:
    """Build a ContentItem from one file.

    Compilation failures are logged and leave compiled_content empty.
    Frontmatter failures raise FrontmatterError naming the file. Nothing is
    shared between calls, so items can be assembled concurrently.
    """
    raw = await asyncio.to_thread(path.read_text, encoding='utf-8')
    try:
        frontmatter, body = split_frontmatter(raw)
    except FrontmatterError as e:
        raise FrontmatterError(f"{path}: {e}") from e

    slug = derive_slug(path, root or category_root(settings, category), category, settings.extension)
    metadata = _metadata(frontmatter, slug, path)

    result = compile_document(
        body,
        unit=f"{slug}{settings.extension}",
        development=not settings.is_production,
        parser_config=settings.parser_config,
    )
    if not result.ok:
        logger.warning("Error compiling MDX for %s: %s", slug, result.error)

    return ContentItem(
        slug=slug,
        category=category,
        path=str(path),
        frontmatter=metadata,
        content=body,
        compiled_content=result.code or '',
        reading_time=estimate_reading_time(body, settings.words_per_minute),
    )
