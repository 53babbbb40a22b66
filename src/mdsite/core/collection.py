"""Collection-level policy: listing, draft filtering, ordering, slug lookup, docs navigation"""

import asyncio
import logging
from datetime import datetime, timezone

from mdsite.config import Settings
from mdsite.core.models import Category, ContentItem, NavItem, NavSection
from mdsite.core.parse import scan_category
from mdsite.core.pipeline import assemble_item


logger = logging.getLogger(__name__)

ORDER_SENTINEL = 999
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
DEFAULT_NAV_SECTION = "General"

# Per-file failures that exclude a single item instead of failing the whole call.
ITEM_ERRORS = (OSError, ValueError)


def order_key(order: int | None) -> int:
    return ORDER_SENTINEL if order is None else order


def parse_date(value: str | None) -> datetime:
    """Parse an ISO date; missing or unparseable values sort as the epoch."""
    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def sort_items(items: list[ContentItem], category: Category) -> list[ContentItem]:
    """Docs ascend by frontmatter order; blog posts are newest first. Both sorts are stable."""
    if category == Category.docs:
        return sorted(items, key=lambda i: order_key(i.frontmatter.order))
    return sorted(items, key=lambda i: parse_date(i.frontmatter.date), reverse=True)


class ContentCollection:
    """Loads content items for the site. Every call re-scans and re-assembles from disk."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    async def list_all(self, category: Category | str) -> list[ContentItem]:
        """Assemble every file of a category, drop drafts in production, and sort.

        A file that fails to load is logged and skipped; the rest of the
        collection is still returned.
        """
        category = Category(category)
        scan = scan_category(self.settings, category)
        results = await asyncio.gather(
            *(assemble_item(p, category, self.settings, scan.root) for p in scan.files),
            return_exceptions=True,
        )

        items = []
        for path, result in zip(scan.files, results):
            if isinstance(result, ITEM_ERRORS):
                logger.warning("Skipping %s content %s: %s", category.value, path, result)
                continue
            if isinstance(result, BaseException):
                raise result
            items.append(result)

        if self.settings.is_production:
            items = [i for i in items if not i.frontmatter.draft]
        return sort_items(items, category)

    async def get_by_slug(self, slug: str, category: Category | str) -> ContentItem | None:
        """Return the first item whose derived slug matches, or None."""
        category = Category(category)
        scan = scan_category(self.settings, category)
        for path in scan.files:
            try:
                item = await assemble_item(path, category, self.settings, scan.root)
            except ITEM_ERRORS as e:
                logger.warning("Error loading %s content for slug %s from %s: %s", category.value, slug, path, e)
                continue
            if item.slug == slug:
                return item
        return None

    async def build_navigation(self) -> list[NavSection]:
        """Group docs by frontmatter category; sections keep first-seen order, items sort by order."""
        sections: dict[str, list[NavItem]] = {}
        for doc in await self.list_all(Category.docs):
            title = doc.frontmatter.category or DEFAULT_NAV_SECTION
            sections.setdefault(title, []).append(NavItem(
                title=doc.frontmatter.title,
                href=f"/docs/{doc.slug}",
                order=doc.frontmatter.order,
            ))
        return [
            NavSection(title=title, items=sorted(items, key=lambda n: order_key(n.order)))
            for title, items in sections.items()
        ]
