"""URL slugs for titles and category pages

Shared with the editorial and category pages; no route in this service
consumes them yet.
"""

import re
from typing import Optional

from newsroom.utils.validation import VALID_CATEGORIES

_DISALLOWED = re.compile(r"[^a-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

_CATEGORY_BY_SLUG = {name.lower(): name for name in VALID_CATEGORIES}


def generate_slug(title: str) -> str:
    """
    Turn a title into a lowercase, hyphen-separated URL slug.

    Characters outside ``a-z``, ``0-9``, whitespace, ``_`` and ``-`` are
    dropped rather than replaced, so ``"C++ Programming"`` becomes
    ``"c-programming"`` and ``"Category/Subcategory"`` becomes
    ``"categorysubcategory"``. Runs of whitespace, underscores and dashes
    collapse to a single dash. The result may be empty.
    """
    slug = title.lower().strip()
    slug = _DISALLOWED.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def category_from_slug(slug: Optional[str]) -> Optional[str]:
    """Display name for a category slug such as ``teknologi``, or None."""
    if not slug:
        return None
    return _CATEGORY_BY_SLUG.get(slug.lower())
