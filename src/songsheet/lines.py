"""Line classification for plain-text chord sheets.

Song sheets are stored as chords written on their own line above the lyric
they belong to, space-aligned::

    [Verso 1]
    D              A/C#        Bm7
    Deus é tão bom, tão bom pra mim

Every line is classified on its own, with no look-behind or look-ahead:

  1. EMPTY   - blank or whitespace only
  2. HEADER  - ``[anything]`` once trimmed
  3. CHORDS  - at least half of the whitespace-separated tokens are chords
  4. LYRICS  - everything else

The CHORDS rule is a heuristic. A short lyric made of chord-looking words
(a lone "A", "E") is classified as chords.
"""

import re

from .chords import is_chord_token
from .models import LineKind, SheetLine

CHORD_LINE_THRESHOLD = 0.5

LINE_SPLIT_RE = re.compile(r"\r?\n")


def _is_header(stripped: str) -> bool:
    return stripped.startswith("[") and stripped.endswith("]")


def is_chord_line(line: str) -> bool:
    """Return True if *line* reads as a line of chords."""
    stripped = line.strip()
    if not stripped or _is_header(stripped):
        return False

    tokens = stripped.split()
    chord_count = sum(1 for t in tokens if is_chord_token(t))
    return chord_count / len(tokens) >= CHORD_LINE_THRESHOLD


def classify_line(line: str) -> LineKind:
    stripped = line.strip()
    if not stripped:
        return LineKind.EMPTY
    if _is_header(stripped):
        return LineKind.HEADER
    if is_chord_line(line):
        return LineKind.CHORDS
    return LineKind.LYRICS


def split_lines(text: str) -> list[str]:
    """Split song text on ``\\n`` or ``\\r\\n``."""
    return LINE_SPLIT_RE.split(text)


def parse_song(text: str | None) -> list[SheetLine]:
    """Classify every line of *text*, keeping each line's original content."""
    if not text:
        return []
    return [SheetLine(kind=classify_line(line), content=line) for line in split_lines(text)]
