"""Heading extraction and anchor assignment for HTML content."""

from __future__ import annotations

import logging
import re
from html import escape

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from .config import TocConfig, normalize_config, validate_config
from .constants import FALLBACK_ID_PREFIX
from .models import ExtractResult, HeadingRecord, HeadingTier
from .slugify import generate_slug

logger = logging.getLogger(__name__)


def parse_html(content: str) -> BeautifulSoup:
    """Parse an HTML fragment into a tree without adding document wrappers.

    Raises:
        ParserRejectedMarkup: If the parser gives up on the markup.
    """
    return BeautifulSoup(content, "html.parser")


def heading_tiers(config: TocConfig) -> dict[str, HeadingTier]:
    """Map heading tag names to their tier.

    Examples:
        heading_tiers(TocConfig())  # {"h2": PRIMARY, "h3": SECONDARY}
    """
    return {
        f"h{config.primary_level}": HeadingTier.PRIMARY,
        f"h{config.primary_level + 1}": HeadingTier.SECONDARY,
    }


def heading_text(tag) -> str:
    """Return the plain text of a heading with whitespace collapsed."""
    return " ".join(tag.get_text().split())


def extract_headings(content: str, config: TocConfig | None = None) -> ExtractResult:
    """Find primary and secondary headings and give each a unique anchor id.

    Headings whose text is empty are skipped. A heading that already carries
    an ``id`` keeps it verbatim; every other heading gets a slug of its text,
    a positional ``section-<n>`` fallback when the slug is empty, and a
    ``-<n>`` suffix when the id is already taken anywhere in the document.

    Args:
        content: HTML markup, possibly partial or malformed.
        config: Configuration controlling heading levels and id generation.
            Defaults to a new `TocConfig` when omitted.

    Returns:
        ExtractResult: Headings in document order and the content with new ids
            spliced into the headings' start tags. Everything else in the
            content is kept byte for byte, and the content is returned
            untouched when every heading already had an id or the markup could
            not be parsed.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        result = extract_headings("<h2>Intro</h2><p>text</p><h2>Setup</h2>")
        [h.anchor_id for h in result.headings]  # ["intro", "setup"]
    """
    config = normalize_config(config or TocConfig())
    validate_config(config)

    if not content or not content.strip():
        return ExtractResult(headings=[], content=content)

    try:
        soup = parse_html(content)
    except ParserRejectedMarkup as error:
        logger.warning("Could not parse content, leaving it unchanged: %s", error)
        return ExtractResult(headings=[], content=content)

    tiers = heading_tiers(config)
    used_ids = {tag["id"] for tag in soup.find_all(id=True) if _has_id(tag)}
    slug_counters: dict[str, int] = {}
    headings: list[HeadingRecord] = []
    new_ids: list[tuple[Tag, str]] = []

    for tag in soup.find_all(list(tiers)):
        text = heading_text(tag)
        if not text:
            continue

        if _has_id(tag):
            anchor_id = tag["id"]
        else:
            base_id = generate_slug(text, preserve_unicode=config.preserve_unicode)
            if base_id:
                base_id = f"{config.id_prefix}{base_id}"
            else:
                base_id = f"{config.id_prefix}{FALLBACK_ID_PREFIX}-{len(headings) + 1}"
            anchor_id = unique_id(base_id, slug_counters, used_ids)
            new_ids.append((tag, anchor_id))

        used_ids.add(anchor_id)
        headings.append(HeadingRecord(tier=tiers[tag.name], text=text, anchor_id=anchor_id))

    logger.debug("Extracted %d heading(s), %d new id(s)", len(headings), len(new_ids))
    return ExtractResult(headings=headings, content=write_ids(content, new_ids))


# One attribute inside a start tag: name, then an optional quoted or bare value.
ATTRIBUTE_PATTERN = re.compile(
    r"""\s*(?P<name>[^\s"'>/=]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""
)


def write_ids(content: str, new_ids: list[tuple[Tag, str]]) -> str:
    """Splice ``id`` attributes into the start tags of the given headings.

    Edits run from the last heading to the first so earlier source offsets
    stay valid. A blank ``id`` attribute already on the tag is replaced rather
    than duplicated.

    Args:
        content: Source the tags were parsed from.
        new_ids: Parsed heading tags paired with the id to give each one.

    Returns:
        str: `content` with the ids written in.

    Examples:
        write_ids("<h2 class='x'>A</h2>", [(tag, "a")])  # "<h2 class='x' id=\"a\">A</h2>"
    """
    if not new_ids:
        return content

    line_starts = line_start_offsets(content)
    edits: list[tuple[int, int, str]] = []

    for tag, anchor_id in new_ids:
        start = source_offset(tag, line_starts)
        span = _start_tag_span(content, start) if start is not None else None
        if span is None:
            logger.debug("Could not locate the start tag of <%s>, id not written", tag.name)
            continue
        tag_end, id_span = span
        attribute = f'id="{escape(anchor_id)}"'
        if id_span is not None:
            edits.append((id_span[0], id_span[1], attribute))
        else:
            edits.append((tag_end, tag_end, f" {attribute}"))

    for begin, end, text in sorted(edits, reverse=True):
        content = content[:begin] + text + content[end:]
    return content


def _start_tag_span(content: str, start: int) -> tuple[int, tuple[int, int] | None] | None:
    # Returns the offset where the start tag closes (its ">" or "/>") and the
    # span of an existing id attribute, or None when no start tag is found.
    if not content.startswith("<", start):
        return None

    position = start + 1
    while position < len(content):
        if content[position].isspace() or content[position] in "/>":
            break
        position += 1

    id_span = None
    while position < len(content):
        if content.startswith("/>", position) or content[position] == ">":
            return position, id_span
        match = ATTRIBUTE_PATTERN.match(content, position)
        if match is None:
            position += 1
            continue
        if match.group("name").lower() == "id":
            id_span = (match.start("name"), match.end())
        position = match.end()

    return None


def line_start_offsets(content: str) -> list[int]:
    """Return the offset of the first character of every line."""
    # The parser counts lines on "\n" only.
    offsets = [0]
    position = content.find("\n")
    while position != -1:
        offsets.append(position + 1)
        position = content.find("\n", position + 1)
    return offsets


def source_offset(tag: Tag, line_starts: list[int]) -> int | None:
    """Return the offset where `tag`'s start tag begins in the parsed source."""
    if tag.sourceline is None or tag.sourcepos is None:
        return None
    return line_starts[tag.sourceline - 1] + tag.sourcepos


def unique_id(base_id: str, slug_counters: dict[str, int], used_ids: set[str]) -> str:
    """Return `base_id`, or the first ``base_id-<n>`` not yet in `used_ids`.

    Counting follows GitHub's convention: the first occurrence has no suffix,
    later ones get ``-1``, ``-2`` and so on. `slug_counters` remembers the next
    counter per base id; `used_ids` catches cascading collisions such as
    ``"Header"``, ``"Header"``, ``"Header 1"``.

    Examples:
        counters, used = {}, set()
        unique_id("intro", counters, used)  # "intro"
        used.add("intro")
        unique_id("intro", counters, used)  # "intro-1"
    """
    count = slug_counters.get(base_id, 0)
    anchor_id = base_id if count == 0 else f"{base_id}-{count}"

    while anchor_id in used_ids:
        count += 1
        anchor_id = f"{base_id}-{count}"

    slug_counters[base_id] = count + 1
    return anchor_id


def _has_id(tag) -> bool:
    value = tag.get("id")
    return isinstance(value, str) and bool(value.strip())
