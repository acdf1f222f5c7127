"""
html-toc: Table of Contents generator for HTML content.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    html-toc post.html --position middle

Library Usage:
    from html_toc import TocConfig, inject_toc

    html = inject_toc(post_body, TocConfig(position="bottom"))

    # Or step by step
    from html_toc import extract_headings, merge_toc, render_toc

    result = extract_headings(post_body)
    fragment = render_toc(result.headings, "top")
    html = merge_toc(result.content, fragment)
"""

from .config import ConfigError, TocConfig
from .extractor import extract_headings
from .models import ExtractResult, HeadingRecord, HeadingTier, Position, TocFragment
from .processor import expand_toc_marker, has_toc_marker, inject_toc, render_fragment
from .renderer import merge_toc, render_toc
from .slugify import generate_slug

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "extract_headings",
    "render_toc",
    "merge_toc",
    "generate_slug",
    # Host entry points
    "inject_toc",
    "render_fragment",
    "expand_toc_marker",
    "has_toc_marker",
    # Data models
    "ExtractResult",
    "HeadingRecord",
    "HeadingTier",
    "Position",
    "TocFragment",
    # Configuration
    "TocConfig",
    "ConfigError",
    # Version
    "__version__",
]
