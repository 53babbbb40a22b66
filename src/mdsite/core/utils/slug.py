"""Slug derivation from content storage paths"""

import re
from pathlib import Path

from mdsite.core.models import Category


# Historical docs directory names and the short URL segment each one is published under.
DOCS_URL_MAPPING: dict[str, str] = {
    '00 - Quick Start & Setup':               'quick-start',
    '01 - Security (Security-First Mindset)': 'security',
    '02 - Next.js App Router Mastery':        'app-router',
    '03 - Supabase Integration':              'supabase',
    '04 - Database & Drizzle ORM':            'database',
    '05 - API Design & Server Actions':       'api-design',
    '06 - Authentication & Authorization':    'authentication',
    '07 - Frontend Architecture':             'frontend',
    '08 - Styling & Design System':           'styling',
    '09 - Testing & Quality Assurance':       'testing',
    '10 - AI_Development_Tools':              'ai-tools',
    '11 - Deployment & DevOps':               'deployment',
    '12 - Common Patterns & Recipes':         'patterns',
    '13 - Troubleshooting & FAQ':             'troubleshooting',
    '99 - ADRs':                              'adrs',
}

ORDINAL_PREFIX_RE = re.compile(r'^\d+\s+-\s*')
WHITESPACE_RE = re.compile(r'\s+')


def normalize_segment(segment: str) -> str:
    """Map a docs path segment to its URL form: legacy table first, else strip ordinal + hyphenate.

    The ordinal is only stripped when whitespace precedes the hyphen
    ('07 - Guides' -> 'guides'). This departs from the older `^\\d+\\s*-\\s*`
    rule, which also turned '01-intro' into 'intro'; here '01-intro' is kept
    so that a canonical slug always maps to itself.
    """
    mapped = DOCS_URL_MAPPING.get(segment)
    if mapped:
        return mapped
    return WHITESPACE_RE.sub('-', ORDINAL_PREFIX_RE.sub('', segment).lower())


def derive_slug(path: Path, root: Path, category: Category, extension: str = '.mdx') -> str:
    """Return the forward-slash slug of path relative to its category root."""
    relative = Path(path).absolute().relative_to(Path(root).absolute()).as_posix()
    if relative.endswith(extension):
        relative = relative[:-len(extension)]
    if category != Category.docs:
        return relative
    return '/'.join(normalize_segment(part) for part in relative.split('/'))


def titleize(slug: str) -> str:
    """Human title from the last slug segment, e.g. 'quick-start/your-first-app' -> 'Your First App'."""
    last = slug.rstrip('/').rsplit('/', 1)[-1]
    return ' '.join(w.capitalize() for w in re.split(r'[-_\s]+', last) if w) or slug
