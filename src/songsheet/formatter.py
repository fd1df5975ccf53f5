"""Render song sections back to readable tagged text.

Grouped (hymnal) layout
-----------------------

Verses are emitted in verse order, the chorus last::

    [Verso 1]
    ...

    [Verso 2]
    ...

    [Coro]
    ...

Numeric verse keys sort by value ("2" before "10"); any other key (bridge
labels) sorts as plain text.

Linear layout
-------------

Every section is emitted in stored order under its own label, or under the
plain section word (``[Coro]``) when it has none. Parsing the output again
as a general song gives back the same sections.

Usage::

    from songsheet.formatter import SectionsFormatter
    text = SectionsFormatter().render(sections)
"""

import functools
import re

from .conf import DEFAULT_VOCABULARY, SectionVocabulary
from .models import GroupedSections, LinearSections, SectionKind, SongSections
from .sections import sections_from_json

_NUMERIC_RE = re.compile(r"^\d+$")

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


class SectionsFormatter:
    """Render :data:`~songsheet.models.SongSections` to tagged text."""

    def __init__(self, vocabulary: SectionVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def render(self, sections: SongSections) -> str:
        """Return display text for *sections*, without trailing whitespace."""
        if isinstance(sections, GroupedSections):
            blocks = self._grouped_blocks(sections)
        else:
            blocks = self._linear_blocks(sections)
        return "\n".join(blocks).rstrip()

    def _grouped_blocks(self, sections: GroupedSections) -> list[str]:
        blocks = [
            f"[{self.vocabulary.verse_label} {key}]\n{sections.verses[key]}\n"
            for key in sorted(sections.verses, key=functools.cmp_to_key(_compare_verse_keys))
        ]
        if sections.coro:
            blocks.append(f"[{self.vocabulary.chorus_label}]\n{sections.coro}\n")
        return blocks

    def _linear_blocks(self, sections: LinearSections) -> list[str]:
        return [
            f"[{section.label or self._kind_word(section.kind)}]\n{section.content}\n"
            for section in sections.sections
        ]

    def _kind_word(self, kind: SectionKind) -> str:
        return {
            SectionKind.VERSE: self.vocabulary.verse_label,
            SectionKind.CHORUS: self.vocabulary.chorus_label,
            SectionKind.BRIDGE: self.vocabulary.bridge_label,
        }[kind]


def _compare_verse_keys(a: str, b: str) -> int:
    if _NUMERIC_RE.match(a) and _NUMERIC_RE.match(b):
        return int(a) - int(b)
    return (a > b) - (a < b)


def format_sections(sections: SongSections, vocabulary: SectionVocabulary = DEFAULT_VOCABULARY) -> str:
    return SectionsFormatter(vocabulary).render(sections)


# ---------------------------------------------------------------------------
# Stored content -> plain song text
# ---------------------------------------------------------------------------


def _br_to_newline(text: str) -> str:
    return _BR_RE.sub("\n", text)


def render_song_text(content: "str | dict | list | SongSections | None") -> str:
    """Flatten stored lyrics content into the plain text shown in the song viewer.

    Plain text is returned unchanged. For hymns the chorus is shown first,
    then each verse under its stored key; ``<br>`` tags left over from the
    hymnal import become line breaks. Linear sections are shown one after
    another, separated by a blank line.

    Raises SectionsFormatError for a ``dict``/``list`` in neither layout.
    """
    if not content:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, (dict, list)):
        content = sections_from_json(content)

    if isinstance(content, GroupedSections):
        blocks = []
        if content.coro:
            blocks.append(f"[{DEFAULT_VOCABULARY.chorus_label}]\n{_br_to_newline(content.coro)}")
        blocks.extend(f"[{key}]\n{_br_to_newline(text)}" for key, text in content.verses.items())
        return "\n\n".join(blocks)

    return "\n\n".join(section.content for section in content.sections)
