"""Reading and rewriting HTML files for the command line."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, HTML_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "HTML_TOC_MAX_FILE_SIZE"


def max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit from ``HTML_TOC_MAX_FILE_SIZE``, or `default` when unset.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw!r}") from error
    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw!r}")
    return limit


def resolve_html_path(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied HTML path that must live under `base_dir`.

    Args:
        raw_path: Path to an HTML file, absolute or relative, ``~`` allowed.
        base_dir: Directory the file must be inside of.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path goes through a symlink, does not exist, is not a
            regular file, lies outside `base_dir`, or lacks an HTML extension.

    Examples:
        resolve_html_path("posts/intro.html", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if any(candidate.is_symlink() for candidate in (path, *path.parents)):
        raise ValueError(f"Symlinks are not supported: {path}")

    try:
        resolved = path.resolve(strict=True)
    except OSError as error:
        raise ValueError(f"{path} does not exist or cannot be resolved: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in HTML_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not an HTML file (expected one of: {', '.join(HTML_EXTENSIONS)})"
        )

    return resolved


def read_html(filepath: Path, max_size: int) -> tuple[str, os.stat_result]:
    """Read an HTML file after checking it is a small enough regular file.

    The stat of the open handle must match the stat taken before opening, so a
    file swapped in between is refused. Line endings are kept as they are.

    Args:
        filepath: File to read.
        max_size: Largest accepted size in bytes.

    Returns:
        tuple[str, os.stat_result]: The decoded content and the stat snapshot to
            hand to `write_content`.

    Raises:
        IOError: If the file is missing, not a regular file, too large, changed
            while being opened, or not valid UTF-8.

    Examples:
        content, snapshot = read_html(Path("post.html"), 1024 * 1024)
    """
    try:
        before = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if not stat.S_ISREG(before.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    if before.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as handle:
            content = handle.read()
            opened = os.fstat(handle.fileno())
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error reading {filepath}: {error}") from error

    if _fingerprint(opened) != _fingerprint(before):
        raise IOError(f"{filepath} changed while it was being read.")

    return content, opened


def write_content(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Atomically replace a file's content, keeping its mode and, when allowed, owner.

    Args:
        filepath: File to rewrite.
        content: New content.
        expected_stat: Snapshot returned by `read_html`.
        warn: Optional callback for non-fatal warnings.

    Raises:
        IOError: If the file changed since it was read.

    Examples:
        write_content(Path("post.html"), new_html, snapshot)
    """
    try:
        current = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error
    if _fingerprint(current) != _fingerprint(expected_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        os.chmod(temp_path, stat.S_IMODE(expected_stat.st_mode))
        if hasattr(os, "chown"):
            try:
                os.chown(temp_path, expected_stat.st_uid, expected_stat.st_gid)
            except PermissionError:
                if warn is not None:
                    warn(f"Warning: Could not preserve file ownership for {filepath.name}")

        os.replace(temp_path, filepath)
        temp_path = None
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)


def _fingerprint(stat_result: os.stat_result) -> tuple[int, int, int, int]:
    return (
        stat_result.st_ino,
        stat_result.st_dev,
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )
