"""Entry points that run the extract, render and merge pipeline for a host."""

from __future__ import annotations

import logging
import re

from .config import TocConfig, normalize_config, validate_config
from .extractor import extract_headings
from .models import TocFragment
from .renderer import merge_toc, render_toc

logger = logging.getLogger(__name__)


def has_toc_marker(content: str, config: TocConfig | None = None) -> bool:
    """Return True when the author placed the TOC marker in the content.

    Raises:
        ConfigError: If the configuration fails validation.
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)
    return bool(content) and config.marker in content


def render_fragment(content: str, config: TocConfig | None = None) -> tuple[str, TocFragment]:
    """Extract headings and render the fragment without merging it.

    For hosts that place the TOC themselves. The returned content carries the
    anchor ids the fragment links to and must replace the original content.

    Args:
        content: Raw HTML content.
        config: Per-document configuration. Defaults to a new `TocConfig`.

    Returns:
        tuple[str, TocFragment]: Annotated content and the rendered fragment.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        content, fragment = render_fragment(post_body, TocConfig(title="Contents"))
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)
    result = extract_headings(content, config)
    return result.content, render_toc(result.headings, config.position, config)


def inject_toc(content: str, config: TocConfig | None = None) -> str:
    """Annotate headings and merge a TOC into the content.

    Returns the content unchanged when the TOC is disabled, the content is
    blank, the author already placed the TOC marker, or fewer than
    ``config.min_headings`` headings are found.

    Args:
        content: Raw HTML content.
        config: Per-document configuration. Defaults to a new `TocConfig`.

    Returns:
        str: Final content.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        inject_toc("<h2>Intro</h2><p>text</p><h2>Setup</h2><p>more</p>")
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)

    if not config.enabled:
        logger.debug("TOC disabled for this document")
        return content
    if not content or not content.strip():
        return content
    if has_toc_marker(content, config):
        logger.debug("Content has a manual TOC marker, skipping automatic placement")
        return content

    annotated, fragment = render_fragment(content, config)
    if len(fragment.items) < config.min_headings:
        return content

    return merge_toc(annotated, fragment, config)


def marker_pattern(marker: str) -> re.Pattern[str]:
    """Match the marker, together with its paragraph when it is the only thing in it.

    Examples:
        marker_pattern("[toc]").sub("", "<p> [toc] </p><p>[toc] here</p>")  # "<p> here</p>"
    """
    escaped = re.escape(marker)
    return re.compile(rf"(?i:<p(?:\s[^>]*)?>)\s*{escaped}\s*(?i:</p>)|{escaped}")


def expand_toc_marker(content: str, config: TocConfig | None = None) -> str:
    """Replace the author's TOC marker with the rendered fragment.

    Only the first marker is expanded; later markers are removed. A paragraph
    holding nothing but the marker is replaced as a whole, so the ``<nav>``
    never ends up inside a ``<p>``. With fewer than ``config.min_headings``
    headings every marker is removed and the content is otherwise left as it
    was.

    Args:
        content: Raw HTML content containing the marker.
        config: Per-document configuration. Defaults to a new `TocConfig`.

    Returns:
        str: Content with the marker expanded.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        expand_toc_marker("<p>[toc]</p><h2>One</h2><h2>Two</h2>")
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)

    if not has_toc_marker(content, config):
        return content

    pattern = marker_pattern(config.marker)
    annotated, fragment = render_fragment(content, config)
    if len(fragment.items) < config.min_headings:
        return pattern.sub("", content)

    match = pattern.search(annotated)
    if match is None:
        return annotated
    before, after = annotated[: match.start()], annotated[match.end() :]
    return before + fragment.markup + pattern.sub("", after)
