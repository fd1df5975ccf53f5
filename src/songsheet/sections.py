"""Tagged lyrics text -> structured song sections.

Lyrics are typed in as free text with a tag line before each section::

    [Verso]
    Primeira estrofe...

    [Coro]
    Refrão...

    [Ponte]
    ...

Tags are matched case-insensitively and must be the whole line, bare or in
square brackets, optionally followed by a number (``[Verse 2]``, ``CORO``,
``estrofes``). The number is ignored; sections are renumbered in order.

The caller's song category picks the output layout:

  * general  -> :class:`~songsheet.models.LinearSections`, every section in
    the order it was typed. Verses are labeled "Verso 1", "Verso 2"...,
    bridges "Ponte", "Ponte 2"..., choruses carry no label.
  * hymnal   -> :class:`~songsheet.models.GroupedSections`, verses keyed by
    number, bridges by their label, and the first chorus as ``coro``. Later
    choruses are dropped: a hymn repeats the same chorus after each verse.

Content that is already structured (a ``dict``/``list`` in either layout,
or JSON text encoding one) is decoded and returned as is.
"""

import json
import logging
import re

from .conf import DEFAULT_VOCABULARY, SectionVocabulary
from .exceptions import SectionsFormatError
from .lines import split_lines
from .models import Category, GroupedSections, LinearSections, Section, SectionKind, SongSections

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tag detection
# ---------------------------------------------------------------------------


def _tag_re(words: tuple[str, ...], plural: bool = False) -> re.Pattern:
    body = "(?:" + "|".join(re.escape(w) for w in words) + ")"
    if plural:
        body += "s?"
    body += r"(?:\s*\d+)?"
    return re.compile(rf"^(?:\[\s*{body}\s*\]|{body})$", re.IGNORECASE)


class SectionTagger:
    """Recognizes section tag lines for a given vocabulary."""

    def __init__(self, vocabulary: SectionVocabulary = DEFAULT_VOCABULARY):
        self._patterns = [
            (SectionKind.VERSE, _tag_re(vocabulary.verse_tags, plural=True)),
            (SectionKind.CHORUS, _tag_re(vocabulary.chorus_tags)),
            (SectionKind.BRIDGE, _tag_re(vocabulary.bridge_tags)),
        ]

    def match(self, line: str) -> SectionKind | None:
        """Return the section kind *line* opens, or None if it is not a tag."""
        stripped = line.strip()
        for kind, pattern in self._patterns:
            if pattern.match(stripped):
                return kind
        return None


# ---------------------------------------------------------------------------
# Section collectors
# ---------------------------------------------------------------------------


class _Collector:
    def __init__(self, vocabulary: SectionVocabulary):
        self.vocabulary = vocabulary
        self.verse_count = 0
        self.bridge_count = 0

    def flush(self, kind: SectionKind, lines: list[str]) -> None:
        content = "\n".join(lines).strip()
        if not content:
            logger.debug("Skipping empty %s section", kind.value)
            return

        if kind is SectionKind.VERSE:
            self.verse_count += 1
        elif kind is SectionKind.BRIDGE:
            self.bridge_count += 1
        self.add(kind, content)

    def bridge_label(self) -> str:
        if self.bridge_count == 1:
            return self.vocabulary.bridge_label
        return f"{self.vocabulary.bridge_label} {self.bridge_count}"

    def add(self, kind: SectionKind, content: str) -> None:
        raise NotImplementedError

    def result(self) -> SongSections:
        raise NotImplementedError


class _LinearCollector(_Collector):
    def __init__(self, vocabulary: SectionVocabulary):
        super().__init__(vocabulary)
        self.sections: list[Section] = []

    def add(self, kind: SectionKind, content: str) -> None:
        if kind is SectionKind.VERSE:
            label = f"{self.vocabulary.verse_label} {self.verse_count}"
        elif kind is SectionKind.BRIDGE:
            label = self.bridge_label()
        else:
            label = None
        self.sections.append(Section(kind=kind, content=content, label=label))

    def result(self) -> LinearSections:
        return LinearSections(sections=self.sections)


class _GroupedCollector(_Collector):
    def __init__(self, vocabulary: SectionVocabulary):
        super().__init__(vocabulary)
        self.grouped = GroupedSections()

    def add(self, kind: SectionKind, content: str) -> None:
        if kind is SectionKind.VERSE:
            self.grouped.verses[str(self.verse_count)] = content
        elif kind is SectionKind.BRIDGE:
            self.grouped.verses[self.bridge_label()] = content
        elif self.grouped.coro is None:
            self.grouped.coro = content
        else:
            logger.debug("Dropping repeated chorus: %.40r", content)

    def result(self) -> GroupedSections:
        return self.grouped


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse_tagged_text(
    value: "str | dict | list | SongSections | None",
    category: Category | str | None = Category.GENERAL,
    vocabulary: SectionVocabulary = DEFAULT_VOCABULARY,
) -> SongSections | None:
    """Parse tagged lyrics into song sections.

    Args:
        value:      Tagged lyrics text, or already-structured content.
        category:   Song category; selects the output layout.
        vocabulary: Tag words and labels to use.

    Returns:
        :class:`LinearSections` or :class:`GroupedSections`, or ``None``
        when there is no content at all. Never raises.
    """
    if isinstance(value, (LinearSections, GroupedSections)):
        return value
    if value is None:
        return None
    if not isinstance(value, str):
        try:
            return sections_from_json(value)
        except SectionsFormatError as exc:
            logger.debug("Ignoring unusable structured content: %s", exc.reason)
            return None

    structured = _decode_structured(value)
    if structured is not None:
        return structured

    if not value.strip():
        return None

    hymnal = Category.from_value(category) is Category.HYMNAL
    lines = split_lines(value)
    tagger = SectionTagger(vocabulary)

    if not any(tagger.match(line) for line in lines):
        content = value.strip()
        if hymnal:
            return GroupedSections(verses={"1": content})
        return LinearSections(sections=[Section(kind=SectionKind.VERSE, content=content)])

    collector = _GroupedCollector(vocabulary) if hymnal else _LinearCollector(vocabulary)
    active = SectionKind.VERSE
    buffer: list[str] = []

    for line in lines:
        kind = tagger.match(line)
        if kind is None:
            buffer.append(line)
            continue
        collector.flush(active, buffer)
        active = kind
        buffer = []

    collector.flush(active, buffer)
    return collector.result()


def _decode_structured(text: str) -> SongSections | None:
    """Decode *text* if it is JSON for either section layout."""
    if not text.lstrip().startswith(("{", "[")):
        return None
    try:
        return sections_from_json(text)
    except SectionsFormatError as exc:
        logger.debug("Not structured content, parsing as tagged text: %s", exc.reason)
        return None


# ---------------------------------------------------------------------------
# JSON boundary
# ---------------------------------------------------------------------------


def sections_from_json(value: "str | dict | list") -> SongSections:
    """Build song sections from their stored JSON form.

    A ``dict`` with a ``verses`` mapping is the grouped layout; a ``list`` of
    ``{"type", "label", "content"}`` records is the linear layout.

    Raises SectionsFormatError if *value* is neither.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise SectionsFormatError(f"invalid JSON ({exc.msg})") from exc

    if isinstance(value, dict):
        return _grouped_from_json(value)
    if isinstance(value, list):
        return _linear_from_json(value)
    raise SectionsFormatError(f"expected an object or a list, got {type(value).__name__}")


def _grouped_from_json(value: dict) -> GroupedSections:
    verses = value.get("verses")
    if not isinstance(verses, dict):
        raise SectionsFormatError("'verses' must be an object")
    for key, text in verses.items():
        if not isinstance(text, str):
            raise SectionsFormatError(f"verse {key!r} is not text")

    coro = value.get("coro")
    if coro is not None and not isinstance(coro, str):
        raise SectionsFormatError("'coro' is not text")

    return GroupedSections(verses={str(k): v for k, v in verses.items()}, coro=coro or None)


def _linear_from_json(value: list) -> LinearSections:
    sections = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise SectionsFormatError(f"section {i} is not an object")
        try:
            kind = SectionKind(item.get("type"))
        except ValueError:
            raise SectionsFormatError(f"section {i} has unknown type {item.get('type')!r}") from None
        content = item.get("content")
        if not isinstance(content, str):
            raise SectionsFormatError(f"section {i} has no text content")
        label = item.get("label")
        if label is not None and not isinstance(label, str):
            raise SectionsFormatError(f"section {i} label is not text")
        sections.append(Section(kind=kind, content=content, label=label))
    return LinearSections(sections=sections)


def sections_to_json(sections: SongSections) -> dict | list:
    """Return the JSON-serializable stored form of *sections*."""
    if isinstance(sections, GroupedSections):
        data: dict = {"verses": dict(sections.verses)}
        if sections.coro is not None:
            data["coro"] = sections.coro
        return data

    out = []
    for section in sections.sections:
        item = {"type": section.kind.value}
        if section.label is not None:
            item["label"] = section.label
        item["content"] = section.content
        out.append(item)
    return out
