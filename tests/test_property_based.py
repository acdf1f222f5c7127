from __future__ import annotations

import re
import string

from hypothesis import given
from hypothesis import strategies as st

from html_toc.extractor import extract_headings
from html_toc.processor import inject_toc
from html_toc.renderer import merge_toc, render_toc
from html_toc.slugify import generate_slug

title_strategy = st.text(
    alphabet=string.ascii_letters + string.digits + " _-.!?",
    min_size=1,
    max_size=32,
)
headings_strategy = st.lists(
    st.tuples(st.integers(min_value=2, max_value=3), title_strategy), min_size=0, max_size=20
)


def _build_content(data) -> str:
    return "".join(f"<h{level}>{title}</h{level}><p>body</p>" for level, title in data)


@given(st.text())
def test_generate_slug_is_url_fragment_safe(title: str):
    slug = generate_slug(title)
    assert slug == slug.lower()
    slug.encode("ascii")
    assert not slug.startswith("-")
    assert not slug.endswith("-")
    assert "--" not in slug
    assert all(char.isalnum() or char == "-" for char in slug)


@given(st.text())
def test_generate_slug_is_idempotent(title: str):
    slug = generate_slug(title)
    assert generate_slug(slug) == slug


@given(headings_strategy)
def test_anchor_ids_are_unique_and_non_empty(data):
    """Property: every kept heading gets a distinct, non-empty anchor id."""
    headings = extract_headings(_build_content(data)).headings

    anchor_ids = [heading.anchor_id for heading in headings]
    assert all(anchor_ids)
    assert len(anchor_ids) == len(set(anchor_ids)), f"Found duplicate ids: {anchor_ids}"
    assert len(headings) == sum(1 for _, title in data if title.strip())


@given(headings_strategy)
def test_extraction_is_idempotent(data):
    first = extract_headings(_build_content(data))
    second = extract_headings(first.content)

    assert second.headings == first.headings
    assert second.content == first.content


@given(headings_strategy, st.sampled_from(["", "\n", "\n\n  ", "&nbsp;<br>"]))
def test_annotation_only_adds_id_attributes(data, separator: str):
    content = separator.join(f"<h{level}>{title}</h{level}>" for level, title in data)

    annotated = extract_headings(content).content

    assert re.sub(r' id="[^"]*"', "", annotated) == content


@given(headings_strategy, st.sampled_from(["top", "float_left", "float_right"]))
def test_top_merge_prepends_fragment(data, position: str):
    result = extract_headings(_build_content(data))
    fragment = render_toc(result.headings, position)

    merged = merge_toc(result.content, fragment)

    if len(result.headings) >= 2:
        assert merged == fragment.markup + result.content
    else:
        assert merged == result.content


@given(headings_strategy)
def test_bottom_merge_appends_fragment(data):
    result = extract_headings(_build_content(data))
    fragment = render_toc(result.headings, "bottom")

    merged = merge_toc(result.content, fragment)

    if len(result.headings) >= 2:
        assert merged == result.content + fragment.markup
    else:
        assert merged == result.content


@given(headings_strategy)
def test_middle_merge_keeps_content_intact(data):
    result = extract_headings(_build_content(data))
    fragment = render_toc(result.headings, "middle")

    merged = merge_toc(result.content, fragment)

    if len(result.headings) >= 2:
        assert merged.replace(fragment.markup, "", 1) == result.content
    else:
        assert merged == result.content


@given(headings_strategy)
def test_inject_toc_is_deterministic(data):
    content = _build_content(data)

    assert inject_toc(content) == inject_toc(content)
