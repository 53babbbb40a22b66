"""File discovery and frontmatter extraction"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from mdsite.config import Settings
from mdsite.core.errors import FrontmatterError
from mdsite.core.models import Category, ScanResult


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(.*?)\r?\n?^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise FrontmatterError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def category_root(settings: Settings, category: Category) -> Path:
    """Docs live in their own top-level directory; other collections sit under content_dir."""
    if category == Category.docs:
        return Path(settings.docs_dir)
    return Path(settings.content_dir) / category.value


def discover_files(root: Path, extension: str = '.mdx') -> list[Path]:
    """Return every file under root ending in extension, or [] when root is absent."""
    if not root.is_dir():
        return []
    return [p for p in root.rglob(f'*{extension}') if p.is_file()]


def scan_category(settings: Settings, category: Category) -> ScanResult:
    """Enumerate content files for a category. Order is unspecified."""
    root = category_root(settings, category)
    if not root.is_dir():
        logger.debug("No %s collection at %s", category.value, root)
        return ScanResult(root=root, missing_root=True)
    return ScanResult(root=root, files=discover_files(root, settings.extension))
