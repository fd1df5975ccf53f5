from dataclasses import dataclass


@dataclass
class SectionVocabulary:
    """Tag words recognized as section markers, and the words used to label sections."""

    # Matched case-insensitively; verse tags may also take a plural "s".
    verse_tags: tuple[str, ...] = ("verse", "verso", "estrofe")
    chorus_tags: tuple[str, ...] = ("chorus", "coro", "refrão", "refrao")
    bridge_tags: tuple[str, ...] = ("bridge", "ponte")

    # Display words
    verse_label: str = "Verso"
    chorus_label: str = "Coro"
    bridge_label: str = "Ponte"


DEFAULT_VOCABULARY = SectionVocabulary()
