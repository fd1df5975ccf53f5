"""Transpose chord sheets while keeping their layout byte-for-byte.

Only lines that classify as CHORDS are touched, and on those lines only the
chord at the start of each token is rewritten (``A7(9)`` becomes ``B7(9)``,
``Intro:`` and ``(2x)`` stay as they are). Whitespace between tokens
is never changed, so a chord keeps its column even when its name gets
longer or shorter::

    transpose_line("D      A/C#   Bm", 2) == "E      B/D#   C#m"
"""

import logging

from .chords import CHORD_IN_TOKEN_RE, semitones_between, transpose_chord
from .lines import classify_line, split_lines
from .models import LineKind

logger = logging.getLogger(__name__)


def transpose_line(line: str, semitones: int) -> str:
    """Transpose the chords of a single line by *semitones*.

    Headers, lyrics and blank lines come back unchanged, as does every line
    when *semitones* is 0.
    """
    if semitones == 0:
        return line
    if classify_line(line) is not LineKind.CHORDS:
        return line
    return CHORD_IN_TOKEN_RE.sub(lambda m: transpose_chord(m.group(), semitones), line)


def transpose_song(text: str | None, semitones: int) -> str:
    """Transpose every chord line of *text*.

    Lines are split on ``\\n`` or ``\\r\\n`` and joined back with ``\\n``;
    the line count never changes.
    """
    if not text:
        return ""
    if semitones == 0:
        return text
    return "\n".join(transpose_line(line, semitones) for line in split_lines(text))


def transpose_to_key(text: str | None, original_key: str | None, target_key: str | None) -> str:
    """Transpose *text* from *original_key* to *target_key*."""
    semitones = semitones_between(original_key, target_key)
    logger.debug("Transposing %s -> %s (%+d semitones)", original_key, target_key, semitones)
    return transpose_song(text, semitones)
