from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from html_toc.config import (
    ConfigError,
    TocConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)
from html_toc.models import Position


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".html-toc.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        enabled = false
        position = "middle"
        title = "Contents"
        class_prefix = "post-toc"
        marker = "<!-- toc -->"
        min_headings = 3
        primary_level = 1
        id_prefix = "sec-"
        preserve_unicode = true
        max_file_size = 1
        """,
    )

    config = load_config(tmp_path)

    assert config == TocConfig(
        enabled=False,
        position=Position.MIDDLE,
        title="Contents",
        class_prefix="post-toc",
        marker="<!-- toc -->",
        min_headings=3,
        primary_level=1,
        id_prefix="sec-",
        preserve_unicode=True,
        max_file_size=1,
    )
    assert config.position is Position.MIDDLE


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [html-toc]
        position = "bottom"
        title = "On this page"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.position is Position.BOTTOM
    assert config.title == "On this page"


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        marker = "[contents]"
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.marker == "[contents]"


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        title = "Root"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.html-toc]
        """,
    )

    config = load_config(child)

    assert config.title == TocConfig().title


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == TocConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        title = "From Parent"
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.title == "From Parent"


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        title = "Contents"
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        html-toc = "top"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_position_falls_back_to_top(tmp_path: Path, caplog):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        position = "sideways"
        """,
    )

    with caplog.at_level(logging.WARNING, logger="html_toc.config"):
        config = load_config(tmp_path)

    assert config.position is Position.TOP
    assert "sideways" in caplog.text


def test_normalize_config_accepts_mixed_case_position():
    assert normalize_config(TocConfig(position="Float_Right")).position is Position.FLOAT_RIGHT


def test_normalize_config_defaults_missing_position():
    assert normalize_config(TocConfig(position=None)).position is Position.TOP  # type: ignore[arg-type]


def test_apply_overrides_ignores_none():
    config = TocConfig(title="Contents")

    assert apply_overrides(config, title=None, marker=None) is config
    assert apply_overrides(config, marker="[x]").marker == "[x]"


def test_build_config_applies_overrides_over_file(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.html-toc]
        position = "bottom"
        title = "File Title"
        """,
    )

    config = build_config(tmp_path, position="middle", title=None)

    assert config.position is Position.MIDDLE
    assert config.title == "File Title"


def test_build_config_validates(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, min_headings=0)


@pytest.mark.parametrize(
    "config",
    [
        TocConfig(title=""),
        TocConfig(class_prefix=""),
        TocConfig(marker=""),
        TocConfig(min_headings=0),
        TocConfig(primary_level=0),
        TocConfig(primary_level=6),
        TocConfig(max_file_size=0),
        TocConfig(min_headings="2"),  # type: ignore[arg-type]
        TocConfig(primary_level=True),  # type: ignore[arg-type]
        TocConfig(enabled="yes"),  # type: ignore[arg-type]
        TocConfig(preserve_unicode=1),  # type: ignore[arg-type]
        TocConfig(id_prefix=None),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_invalid_values(config: TocConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(TocConfig())
    validate_config(TocConfig(position="not-a-position"))
