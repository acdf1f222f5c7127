"""Anchor id generation for HTML headings."""

from __future__ import annotations

import re
import unicodedata

_ASCII_SEPARATOR_RUN = re.compile(r"[^a-z0-9]+")
_UNICODE_SEPARATOR_RUN = re.compile(r"[\W_]+")


def generate_slug(title: str, preserve_unicode: bool = False) -> str:
    """Generate a URL-fragment-safe slug from heading text.

    Lowercases the title, strips diacritics (unless preserving Unicode),
    replaces every run of non-alphanumeric characters with a single hyphen and
    trims hyphens from both ends.

    Args:
        title: The heading text to convert into a slug.
        preserve_unicode: When True, retain Unicode letters and digits instead of
            transliterating to ASCII.

    Returns:
        str: Hyphen-separated slug. Empty when nothing alphanumeric remains;
            callers supply their own fallback.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("C++/CLI")  # "c-cli"
        generate_slug("Café", preserve_unicode=True)  # "café"
        generate_slug("???")  # ""
    """
    if preserve_unicode:
        slug = unicodedata.normalize("NFKC", title).casefold()
        slug = _UNICODE_SEPARATOR_RUN.sub("-", slug)
    else:
        normalized = unicodedata.normalize("NFKD", title)
        slug = normalized.encode("ascii", "ignore").decode("ascii").lower()
        slug = _ASCII_SEPARATOR_RUN.sub("-", slug)

    return slug.strip("-")
