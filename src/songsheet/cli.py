import json
import logging
import sys
from pathlib import Path

import click

from .chords import is_legacy_offset, key_index, semitones_between
from .exceptions import SongSheetError
from .formatter import format_sections
from .lines import parse_song
from .models import Category
from .sections import parse_tagged_text, sections_from_json, sections_to_json
from .transpose import transpose_song

logger = logging.getLogger(__name__)

_INPUT = click.argument("source", type=click.File("r", encoding="utf-8"), default="-")


def _fail(exc: SongSheetError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug messages to stderr.")
def main(verbose: bool) -> None:
    """Transpose chord sheets and structure tagged lyrics.

    \b
    SOURCE is a text file, or - (the default) for stdin.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")


@main.command()
@_INPUT
@click.option("-s", "--semitones", type=int, default=None, help="Signed number of semitones to shift.")
@click.option("--from-key", "from_key", default=None, metavar="KEY", help="Key the sheet is written in.")
@click.option("--to-key", "to_key", default=None, metavar="KEY", help="Key to transpose to.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write to PATH instead of stdout.")
def transpose(source, semitones: int | None, from_key: str | None, to_key: str | None,
              output_path: str | None) -> None:
    """Transpose every chord line of a song sheet."""
    # --- Resolve offset ---
    if semitones is None:
        if not (from_key and to_key):
            raise click.UsageError("Give --semitones, or both --from-key and --to-key.")
        if is_legacy_offset(to_key):
            # Old service keys stored a semitone offset; those reset to the original key
            logger.debug("Legacy key offset %r, keeping %s", to_key, from_key)
            to_key = from_key
        try:
            key_index(from_key, strict=True)
            key_index(to_key, strict=True)
        except SongSheetError as exc:
            _fail(exc)
        semitones = semitones_between(from_key, to_key)
    elif from_key or to_key:
        raise click.UsageError("--semitones cannot be combined with --from-key/--to-key.")

    result = transpose_song(source.read(), semitones)

    # --- Output ---
    if output_path:
        Path(output_path).write_text(result + "\n", encoding="utf-8")
        click.echo(f"Written to {output_path}")
        return
    click.echo(result)


@main.command()
@_INPUT
def classify(source) -> None:
    """Print the kind of every line (empty, header, chords, lyrics)."""
    for line in parse_song(source.read()):
        click.echo(f"{line.kind.value}\t{line.content}")


@main.command()
@_INPUT
@click.option("-c", "--category", type=click.Choice([c.value for c in Category]), default="general",
              show_default=True, help="Song category; hymnal groups verses under one chorus.")
def sections(source, category: str) -> None:
    """Parse tagged lyrics ([Verso], [Coro], [Ponte]) into JSON sections."""
    parsed = parse_tagged_text(source.read(), Category(category))
    if parsed is None:
        click.echo("Error: no lyrics content", err=True)
        sys.exit(1)
    click.echo(json.dumps(sections_to_json(parsed), ensure_ascii=False, indent=2))


@main.command(name="format")
@_INPUT
def format_command(source) -> None:
    """Render JSON sections back to tagged display text."""
    try:
        parsed = sections_from_json(source.read())
    except SongSheetError as exc:
        _fail(exc)
    click.echo(format_sections(parsed))
