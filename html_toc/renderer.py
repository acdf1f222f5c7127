"""Table of contents rendering and merging for HTML content."""

from __future__ import annotations

import logging
from html import escape

from bs4 import ParserRejectedMarkup, Tag

from .config import TocConfig, normalize_config, validate_config
from .constants import BLOCK_TAGS, MIN_MIDDLE_BLOCKS
from .extractor import line_start_offsets, parse_html, source_offset
from .models import HeadingRecord, HeadingTier, Position, TocFragment

logger = logging.getLogger(__name__)


def render_toc(
    headings: list[HeadingRecord],
    position: Position | str | None = None,
    config: TocConfig | None = None,
) -> TocFragment:
    """Render the TOC fragment for a list of headings.

    Produces a ``<nav>`` block holding a title and a flat list of links.
    Secondary headings carry a ``--child`` class so the stylesheet can indent
    them. Floating positions add a ``--float-left``/``--float-right`` modifier
    to the ``<nav>``.

    Args:
        headings: Heading records in display order.
        position: Merge position; defaults to the configured position. Unknown
            values resolve to top.
        config: Configuration for the title and CSS classes. Defaults to a new
            `TocConfig` when omitted.

    Returns:
        TocFragment: The fragment; its markup is empty when `headings` is empty.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        fragment = render_toc(result.headings, "float_right")
        fragment.markup  # '<nav class="toc toc--float-right">...'
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)
    position = config.position if position is None else Position.resolve(position)

    if not headings:
        return TocFragment(items=[], position=position, markup="")

    prefix = escape(config.class_prefix)
    nav_classes = prefix
    if position.is_floating:
        nav_classes += f" {prefix}--{position.value.replace('_', '-')}"

    parts = [
        f'<nav class="{nav_classes}">',
        f'<div class="{prefix}-title">{escape(config.title)}</div>',
        f'<ul class="{prefix}-list">',
    ]
    for heading in headings:
        item_classes = f"{prefix}-item"
        if heading.tier is HeadingTier.SECONDARY:
            item_classes += f" {prefix}-item--child"
        parts.append(
            f'<li class="{item_classes}">'
            f'<a href="#{escape(heading.anchor_id)}">{escape(heading.text)}</a>'
            "</li>"
        )
    parts.append("</ul>")
    parts.append("</nav>")

    return TocFragment(items=list(headings), position=position, markup="".join(parts))


def merge_toc(content: str, fragment: TocFragment, config: TocConfig | None = None) -> str:
    """Merge a rendered fragment into content at the fragment's position.

    The content comes back unchanged when the fragment links fewer than
    ``config.min_headings`` headings or has no markup.

    Middle placement splits at the top-level block whose start is closest to
    the middle of the content, and falls back to top placement when the
    content has fewer than three top-level blocks.

    Args:
        content: Annotated content the fragment links into.
        fragment: Fragment returned by `render_toc`.
        config: Configuration holding the minimum heading count.

    Returns:
        str: Content with the fragment merged in.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        merge_toc(result.content, render_toc(result.headings, "bottom"))
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)

    if not fragment.markup or len(fragment.items) < config.min_headings:
        logger.debug(
            "Skipping TOC merge: %d heading(s), minimum is %d",
            len(fragment.items),
            config.min_headings,
        )
        return content

    if fragment.position is Position.BOTTOM:
        return content + fragment.markup

    if fragment.position is Position.MIDDLE:
        split_at = find_middle_split(content)
        if split_at is not None:
            return content[:split_at] + fragment.markup + content[split_at:]
        logger.debug("Too few blocks for middle placement, merging at top")

    return fragment.markup + content


def find_middle_split(content: str) -> int | None:
    """Find the block boundary closest to the middle of the content.

    Args:
        content: HTML content to split.

    Returns:
        int | None: Character offset of the start of a top-level block (never
            the first one), or None when the content has fewer than three
            top-level blocks or cannot be parsed.

    Examples:
        find_middle_split("<p>a</p><p>b</p><p>c</p>")  # 8
    """
    try:
        soup = parse_html(content)
    except ParserRejectedMarkup as error:
        logger.warning("Could not parse content for middle placement: %s", error)
        return None

    blocks = [
        child for child in soup.children if isinstance(child, Tag) and child.name in BLOCK_TAGS
    ]
    if len(blocks) < MIN_MIDDLE_BLOCKS:
        return None

    line_starts = line_start_offsets(content)
    boundaries = [source_offset(block, line_starts) for block in blocks[1:]]
    boundaries = [offset for offset in boundaries if offset is not None]
    if not boundaries:
        return None

    midpoint = len(content) // 2
    return min(boundaries, key=lambda offset: abs(offset - midpoint))

