"""
Generates a table of contents for an HTML file.
Headings get anchor ids and the TOC is merged in at the configured position;
the result is printed to stdout or written back to the file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .filesystem import max_file_size, read_html, resolve_html_path, write_content
from .models import Position
from .processor import expand_toc_marker, has_toc_marker, inject_toc, render_fragment

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option(
    "--position",
    type=click.Choice([position.value for position in Position], case_sensitive=False),
    help="Where to merge the TOC",
)
@click.option("--title", help="TOC title")
@click.option("--class-prefix", help="CSS class prefix for the TOC markup")
@click.option("--marker", help="Manual TOC marker token")
@click.option("--min-headings", type=int, help="Minimum number of headings for a TOC")
@click.option("--id-prefix", help="Prefix for generated anchor ids")
@click.option("--fragment-only", is_flag=True, help="Print only the TOC fragment")
@click.option("--in-place", is_flag=True, help="Rewrite the file instead of printing it")
@click.option("-v", "--verbose", is_flag=True, help="Log processing details to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    position: str | None = None,
    title: str | None = None,
    class_prefix: str | None = None,
    marker: str | None = None,
    min_headings: int | None = None,
    id_prefix: str | None = None,
    fragment_only: bool = False,
    in_place: bool = False,
    verbose: bool = False,
):
    """
    Entry point for adding a table of contents to an HTML file.

    Args:
        filepath: Path to the HTML file to process.
        position: Override for the merge position.
        title: Replacement text for the TOC title.
        class_prefix: Override for the CSS class prefix.
        marker: Override for the manual TOC marker.
        min_headings: Minimum number of headings required for a TOC.
        id_prefix: Prefix for generated anchor ids.
        fragment_only: Print the fragment instead of the merged content.
        in_place: Write the merged content back to `filepath`.
        verbose: Enable debug logging on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths or contain
            invalid configuration values.
        click.UsageError: If `--fragment-only` and `--in-place` are combined.
        click.ClickException: If the file cannot be read, decoded or safely
            rewritten.

    Examples:
        html-toc post.html --position middle --in-place
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    if fragment_only and in_place:
        raise click.UsageError("--fragment-only cannot be combined with --in-place")

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_html_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            position=position,
            title=title,
            class_prefix=class_prefix,
            marker=marker,
            min_headings=min_headings,
            id_prefix=id_prefix,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        size_limit = max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        content, snapshot = read_html(filepath, size_limit)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    if fragment_only:
        _, fragment = render_fragment(content, config)
        if len(fragment.items) >= config.min_headings:
            click.echo(fragment.markup)
        return

    if has_toc_marker(content, config):
        output = expand_toc_marker(content, config)
    else:
        output = inject_toc(content, config)

    if not in_place:
        click.echo(output, nl=False)
        return

    if output == content:
        return
    try:
        write_content(
            filepath,
            output,
            snapshot,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
