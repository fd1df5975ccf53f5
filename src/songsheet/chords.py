"""Note and chord-symbol arithmetic.

All pitch arithmetic happens on the twelve sharp-spelled pitch classes.
Flat and enharmonic spellings (``Bb``, ``Cb``, ``E#``...) are normalized
through :data:`ENHARMONICS` first, so a transposed chord always comes back
sharp-spelled: ``transpose_chord("Bb", 2) == "C"`` but
``transpose_chord("Bb", 1) == "B"`` and ``transpose_chord("Eb", 1) == "E"``.

Anything that is not a recognized note is passed through untouched.
"""

import logging
import re

from .exceptions import UnknownKeyError

logger = logging.getLogger(__name__)

NOTES_SHARP = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

ENHARMONICS = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
    "B#": "C",
    "E#": "F",
}

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

_NOTE_PAT = r"[A-G][b#]?"
_QUALITY_PAT = r"(?:m|M|maj|min|dim|aug|sus|add|\d)*"

# A whole chord token: C, Cm, C#m7, G7M, Dsus4, Bbadd9, D/F#
CHORD_TOKEN_RE = re.compile(rf"^{_NOTE_PAT}{_QUALITY_PAT}(?:/{_NOTE_PAT})?$")

# The chord part at the start of a token, e.g. "A7" in "A7(9)" or "G7M" in "G7M(9)".
# It must not run into a letter, so words like "Coda" or "Bis" never match.
CHORD_IN_TOKEN_RE = re.compile(rf"(?<!\S){_NOTE_PAT}{_QUALITY_PAT}(?:/{_NOTE_PAT})?(?![\w#])")

# Leading note of a chord's root part, and whatever follows it
_ROOT_RE = re.compile(rf"^({_NOTE_PAT})(.*)$", re.DOTALL)


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def normalize_note(note: str) -> str:
    """Return the sharp spelling of *note*, or *note* itself if it is not a note."""
    return ENHARMONICS.get(note, note)


def transpose_note(note: str, semitones: int) -> str:
    """Shift a bare note name by *semitones*, wrapping around the octave.

    Unrecognized names are returned unchanged.
    """
    normalized = normalize_note(note)
    if normalized not in NOTES_SHARP:
        logger.debug("Not a note, leaving as is: %r", note)
        return note
    # Python's % already lands in [0, 11] for negative offsets
    return NOTES_SHARP[(NOTES_SHARP.index(normalized) + semitones) % 12]


# ---------------------------------------------------------------------------
# Chords
# ---------------------------------------------------------------------------


def is_chord_token(token: str) -> bool:
    return CHORD_TOKEN_RE.match(token) is not None


def transpose_chord(chord: str, semitones: int) -> str:
    """Transpose the root and bass of a chord symbol, keeping its suffix verbatim.

    Examples::

        transpose_chord("D/F#", 2)  == "E/G#"
        transpose_chord("C#m7", 1)  == "Dm7"
        transpose_chord("N.C.", 3)  == "N.C."
    """
    root, sep, bass = chord.partition("/")

    m = _ROOT_RE.match(root)
    if not m:
        return chord

    note, suffix = m.groups()
    new_root = transpose_note(note, semitones) + suffix

    if bass:
        return f"{new_root}/{transpose_note(bass, semitones)}"
    return new_root + sep


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def normalize_key(key: str | None) -> str:
    """Reduce a song key to its sharp-spelled root ("Bbm" -> "A#").

    Minor/major markers are dropped: keys are compared by root only. An
    empty key defaults to C.
    """
    if not key:
        return "C"
    root = re.sub(r"m$", "", key)
    root = re.sub(r"M$", "", root)
    return normalize_note(root)


_LEGACY_OFFSET_RE = re.compile(r"^[+-]?\d+$")


def is_legacy_offset(value: str | None) -> bool:
    """True if a stored service key is an old-style semitone offset ("+2", "-1")."""
    return bool(value) and _LEGACY_OFFSET_RE.match(value) is not None


def key_index(key: str | None, strict: bool = False) -> int | None:
    """Position of *key*'s root in :data:`NOTES_SHARP`.

    Returns ``None`` for an unrecognized key, or raises
    :class:`~songsheet.exceptions.UnknownKeyError` when *strict* is set.
    """
    root = normalize_key(key)
    if root in NOTES_SHARP:
        return NOTES_SHARP.index(root)
    if strict:
        raise UnknownKeyError(key or "")
    return None


def semitones_between(original_key: str | None, target_key: str | None) -> int:
    """Signed semitone offset that takes *original_key* to *target_key*.

    The raw difference of the two roots is returned, not the shortest path:
    ``semitones_between("B", "C") == -11``. Returns 0 if either key is not
    recognized.
    """
    original = key_index(original_key)
    target = key_index(target_key)
    if original is None or target is None:
        logger.debug("Cannot compute offset between %r and %r", original_key, target_key)
        return 0
    return target - original
