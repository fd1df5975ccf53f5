from dataclasses import dataclass, field
from enum import Enum


class LineKind(Enum):
    EMPTY = "empty"  # whitespace only
    HEADER = "header"  # [Chorus], [Verso 2]
    CHORDS = "chords"  # D        A/C#     Bm7
    LYRICS = "lyrics"  # everything else


@dataclass
class SheetLine:
    """A single classified line of a song sheet.

    ``content`` is always the original, untrimmed line so that chord columns
    line up with the lyric underneath when rendered.
    """

    kind: LineKind
    content: str


class SectionKind(Enum):
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"


@dataclass
class Section:
    """One lyric section of a general-repertoire song."""

    kind: SectionKind
    content: str
    label: str | None = None  # e.g. "Verso 2", "Ponte"; None for choruses


@dataclass
class LinearSections:
    """Ordered sections, in the order they appear in the source text."""

    sections: list[Section] = field(default_factory=list)


@dataclass
class GroupedSections:
    """Hymnal layout: numbered verses plus one shared chorus.

    Keys of ``verses`` are verse numbers as strings ("1", "2", ...) or bridge
    labels ("Ponte", "Ponte 2").
    """

    verses: dict[str, str] = field(default_factory=dict)
    coro: str | None = None


SongSections = LinearSections | GroupedSections


class Category(Enum):
    GENERAL = "general"
    HYMNAL = "hymnal"

    @classmethod
    def from_value(cls, value: "Category | str | None") -> "Category":
        """Resolve a stored song category to the section layout it uses.

        Hymns imported from the Harpa Cristã hymnal are stored with the book
        name as their category; they use the grouped layout too.
        """
        if isinstance(value, Category):
            return value
        if value and value.strip().lower() in ("hymnal", "harpa cristã", "harpa crista"):
            return cls.HYMNAL
        return cls.GENERAL
