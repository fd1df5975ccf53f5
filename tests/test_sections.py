import json

import pytest

from songsheet.conf import SectionVocabulary
from songsheet.exceptions import SectionsFormatError
from songsheet.models import Category, GroupedSections, LinearSections, Section, SectionKind
from songsheet.sections import SectionTagger, parse_tagged_text, sections_from_json, sections_to_json

TAGGED = "[Verse]\nLine A\n[Chorus]\nLine B\n[Verse]\nLine C"

HYMN = (
    "[Verso 1]\n"
    "Mil vezes bendito\n"
    "[Coro]\n"
    "Aleluia, aleluia\n"
    "[Verso 2]\n"
    "Ó vinde, pecadores\n"
    "[Coro]\n"
    "Glória, glória\n"
    "[Ponte]\n"
    "Santo, santo\n"
)

# ---------------------------------------------------------------------------
# SectionTagger
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "line, kind",
    [
        ("[Verse]", SectionKind.VERSE),
        ("[Verse 1]", SectionKind.VERSE),
        ("  verso  ", SectionKind.VERSE),
        ("ESTROFES", SectionKind.VERSE),
        ("[Chorus]", SectionKind.CHORUS),
        ("[Refrão]", SectionKind.CHORUS),
        ("refrao", SectionKind.CHORUS),
        ("[CORO]", SectionKind.CHORUS),
        ("[Bridge]", SectionKind.BRIDGE),
        ("Ponte 2", SectionKind.BRIDGE),
    ],
)
def test_tagger_recognizes_tags(line, kind):
    assert SectionTagger().match(line) is kind


@pytest.mark.parametrize("line", ["Coro de anjos", "[Intro]", "Verso:", "", "[Verse", "[D]"])
def test_tagger_rejects_non_tags(line):
    assert SectionTagger().match(line) is None


# ---------------------------------------------------------------------------
# No tags
# ---------------------------------------------------------------------------


def test_no_tags_general_is_single_verse():
    assert parse_tagged_text("Hello world", Category.GENERAL) == LinearSections(
        sections=[Section(kind=SectionKind.VERSE, content="Hello world", label=None)]
    )


def test_no_tags_hymnal_is_verse_one():
    assert parse_tagged_text("Hello world", Category.HYMNAL) == GroupedSections(verses={"1": "Hello world"})


def test_no_tags_content_is_trimmed():
    parsed = parse_tagged_text("\n  Coro de anjos\ncantando  \n\n", "general")
    assert parsed.sections[0].content == "Coro de anjos\ncantando"


# ---------------------------------------------------------------------------
# Linear layout
# ---------------------------------------------------------------------------


def test_linear_sections_in_order():
    parsed = parse_tagged_text(TAGGED, Category.GENERAL)
    assert parsed.sections == [
        Section(kind=SectionKind.VERSE, content="Line A", label="Verso 1"),
        Section(kind=SectionKind.CHORUS, content="Line B", label=None),
        Section(kind=SectionKind.VERSE, content="Line C", label="Verso 2"),
    ]


def test_content_before_first_tag_is_first_verse():
    parsed = parse_tagged_text("Intro line\n[Coro]\nRefrão aqui", Category.GENERAL)
    assert parsed.sections == [
        Section(kind=SectionKind.VERSE, content="Intro line", label="Verso 1"),
        Section(kind=SectionKind.CHORUS, content="Refrão aqui"),
    ]


def test_empty_sections_are_skipped_and_not_counted():
    parsed = parse_tagged_text("[Verso]\n[Coro]\nX\n[Verso]\n   \n[Verso]\nY", Category.GENERAL)
    assert parsed.sections == [
        Section(kind=SectionKind.CHORUS, content="X"),
        Section(kind=SectionKind.VERSE, content="Y", label="Verso 1"),
    ]


def test_bridge_labels():
    parsed = parse_tagged_text("[Ponte]\nP1\n[Coro]\nC\n[Bridge]\nP2\n[ponte]\nP3", Category.GENERAL)
    assert [s.label for s in parsed.sections] == ["Ponte", None, "Ponte 2", "Ponte 3"]
    assert parsed.sections[2].kind is SectionKind.BRIDGE


def test_multiline_content_kept_and_trimmed():
    parsed = parse_tagged_text("[Verso]\n\nL1\n  L2\n\n[Coro]\n", Category.GENERAL)
    assert parsed.sections == [Section(kind=SectionKind.VERSE, content="L1\n  L2", label="Verso 1")]


def test_tag_numbers_are_ignored():
    parsed = parse_tagged_text("[Verse 3]\nA\n[Verse 7]\nB", Category.GENERAL)
    assert [s.label for s in parsed.sections] == ["Verso 1", "Verso 2"]


def test_crlf_input():
    parsed = parse_tagged_text("[Verso]\r\nA\r\nB\r\n[Coro]\r\nC", Category.GENERAL)
    assert parsed.sections[0].content == "A\nB"
    assert parsed.sections[1].content == "C"


# ---------------------------------------------------------------------------
# Grouped layout
# ---------------------------------------------------------------------------


def test_grouped_hymn():
    assert parse_tagged_text(HYMN, Category.HYMNAL) == GroupedSections(
        verses={"1": "Mil vezes bendito", "2": "Ó vinde, pecadores", "Ponte": "Santo, santo"},
        coro="Aleluia, aleluia",
    )


def test_grouped_keeps_only_first_chorus():
    parsed = parse_tagged_text("[Coro]\n\n[Coro]\nSecond\n[Coro]\nThird", Category.HYMNAL)
    assert parsed.coro == "Second"
    assert parsed.verses == {}


def test_grouped_from_category_name():
    parsed = parse_tagged_text(HYMN, "Harpa Cristã")
    assert isinstance(parsed, GroupedSections)


def test_category_never_inferred_from_content():
    assert isinstance(parse_tagged_text(HYMN, Category.GENERAL), LinearSections)
    assert isinstance(parse_tagged_text(TAGGED, Category.HYMNAL), GroupedSections)


# ---------------------------------------------------------------------------
# Empty and structured input
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("value", [None, "", "   \n\n  "])
def test_no_content_is_none(value):
    assert parse_tagged_text(value, Category.HYMNAL) is None


def test_structured_value_returned_as_is():
    grouped = GroupedSections(verses={"1": "a"}, coro="b")
    assert parse_tagged_text(grouped, Category.GENERAL) is grouped


def test_structured_dict_decoded():
    parsed = parse_tagged_text({"verses": {"1": "a<br>b"}, "coro": "c"}, Category.GENERAL)
    assert parsed == GroupedSections(verses={"1": "a<br>b"}, coro="c")


def test_structured_json_text_decoded():
    text = json.dumps([{"type": "chorus", "content": "Aleluia"}])
    assert parse_tagged_text(text, Category.HYMNAL) == LinearSections(
        sections=[Section(kind=SectionKind.CHORUS, content="Aleluia")]
    )


def test_unusable_structure_is_none():
    assert parse_tagged_text({"foo": 1}, Category.GENERAL) is None


def test_bracket_text_that_is_not_json_is_parsed_as_tags():
    parsed = parse_tagged_text("[Coro]\nAleluia", Category.GENERAL)
    assert parsed.sections == [Section(kind=SectionKind.CHORUS, content="Aleluia")]


# ---------------------------------------------------------------------------
# Custom vocabulary
# ---------------------------------------------------------------------------


def test_custom_vocabulary():
    vocab = SectionVocabulary(verse_tags=("stanza",), chorus_tags=("refrain",), verse_label="Stanza")
    parsed = parse_tagged_text("[Stanza]\nA\n[Refrain]\nB\n[Verse]\nC", Category.GENERAL, vocab)
    assert parsed.sections == [
        Section(kind=SectionKind.VERSE, content="A", label="Stanza 1"),
        Section(kind=SectionKind.CHORUS, content="B\n[Verse]\nC"),
    ]


# ---------------------------------------------------------------------------
# JSON boundary
# ---------------------------------------------------------------------------


def test_sections_to_json_linear_omits_missing_label():
    parsed = parse_tagged_text(TAGGED, Category.GENERAL)
    assert sections_to_json(parsed) == [
        {"type": "verse", "label": "Verso 1", "content": "Line A"},
        {"type": "chorus", "content": "Line B"},
        {"type": "verse", "label": "Verso 2", "content": "Line C"},
    ]


def test_sections_to_json_grouped():
    assert sections_to_json(GroupedSections(verses={"1": "a"})) == {"verses": {"1": "a"}}
    assert sections_to_json(GroupedSections(verses={}, coro="c")) == {"verses": {}, "coro": "c"}


def test_sections_json_round_trip():
    parsed = parse_tagged_text(HYMN, Category.HYMNAL)
    assert sections_from_json(json.dumps(sections_to_json(parsed))) == parsed


@pytest.mark.parametrize(
    "value",
    [
        42,
        "not json",
        {"verses": ["a"]},
        {"verses": {"1": 2}},
        {"verses": {}, "coro": 5},
        [{"type": "intro", "content": "x"}],
        [{"type": "verse"}],
        [{"type": "verse", "content": "x", "label": 3}],
        ["verse"],
    ],
)
def test_sections_from_json_rejects_bad_shapes(value):
    with pytest.raises(SectionsFormatError):
        sections_from_json(value)
