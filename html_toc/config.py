"""Configuration loading and management."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .models import Position

logger = logging.getLogger(__name__)


@dataclass
class TocConfig:
    """Configuration for generating HTML tables of contents.

    Hosts build one of these per document (or load it from a config file) and
    pass it explicitly to the extraction, rendering and merge functions.

    Attributes:
        enabled: Whether automatic TOC injection runs for the document.
        position: Where the TOC is merged (``"top"``, ``"middle"``,
            ``"bottom"``, ``"float_left"`` or ``"float_right"``). Invalid
            values fall back to ``"top"``.
        title: Label rendered above the TOC list.
        class_prefix: CSS class prefix used for every element of the fragment.
        marker: Token an author places in content to position the TOC manually.
        min_headings: Minimum number of headings required to emit a TOC.
        primary_level: Heading level of the primary tier; the secondary tier is
            the next level down.
        id_prefix: Prefix prepended to generated anchor ids.
        preserve_unicode: Whether to keep Unicode characters in generated ids.
        max_file_size: Maximum file size in bytes the CLI will process.

    Examples:
        TocConfig(position="bottom", title="On this page")
    """

    # Placement
    enabled: bool = True
    position: str | Position = Position.TOP

    # Fragment
    title: str = "Table of Contents"
    class_prefix: str = "toc"
    marker: str = "[toc]"
    min_headings: int = 2

    # Headings and anchors
    primary_level: int = 2
    id_prefix: str = ""
    preserve_unicode: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`min_headings` must be a positive integer")
    """


def load_config(search_path: Path) -> TocConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.html-toc]`` table from `pyproject.toml` and the ``[html-toc]``
    or ``[tool.html-toc]`` table from `.html-toc.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TocConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("site/posts"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "html-toc")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".html-toc.toml",
            table_paths=[("html-toc",), ("tool", "html-toc")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TocConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TocConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.debug("Skipping unreadable config file %s: %s", config_file, error)
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TocConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return TocConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return TocConfig()

    try:
        return TocConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: TocConfig) -> TocConfig:
    """Resolve the position option to a `Position`, defaulting to top."""
    position = Position.resolve(config.position)
    if config.position is not None and not Position.is_known(config.position):
        logger.warning("Unknown TOC position %r, using %r", config.position, position.value)
    return replace(config, position=position)


def validate_config(config: TocConfig) -> None:
    """Validate a `TocConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If text fields are empty, flags are not booleans, or
            numeric fields are non-integers or out of range.

    Examples:
        validate_config(TocConfig(primary_level=1))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "min_headings": config.min_headings,
            "primary_level": config.primary_level,
            "max_file_size": config.max_file_size,
        }
    )

    if not 1 <= config.primary_level <= 5:
        raise ConfigError("`primary_level` must be between 1 and 5")

    if not config.title:
        raise ConfigError("`title` must not be empty")
    if not config.class_prefix:
        raise ConfigError("`class_prefix` must not be empty")
    if not config.marker:
        raise ConfigError("`marker` must not be empty")
    if not isinstance(config.id_prefix, str):
        raise ConfigError("`id_prefix` must be a string")

    for flag in ("enabled", "preserve_unicode"):
        if not isinstance(getattr(config, flag), bool):
            raise ConfigError(f"`{flag}` must be a boolean")

    _ensure_positive(
        {
            "min_headings": config.min_headings,
            "max_file_size": config.max_file_size,
        }
    )


def apply_overrides(config: TocConfig, **overrides: object) -> TocConfig:
    """Apply override values to a `TocConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TocConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TocConfig`.

    Examples:
        updated = apply_overrides(config, title="Contents", position="bottom")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TocConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TocConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), position="middle")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
