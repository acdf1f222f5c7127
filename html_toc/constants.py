"""Constants used across the html-toc package."""

from __future__ import annotations

from .config import TocConfig

DEFAULT_CONFIG = TocConfig()

# Anchors
FALLBACK_ID_PREFIX = "section"

# Top-level elements that count as paragraph-like blocks when splitting content
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "figure",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    }
)
MIN_MIDDLE_BLOCKS = 3

# Files
HTML_EXTENSIONS = [".html", ".htm", ".xhtml"]
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
