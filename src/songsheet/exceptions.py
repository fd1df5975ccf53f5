class SongSheetError(Exception):
    """Base exception for songsheet."""


class SectionsFormatError(SongSheetError):
    """Raised when structured lyrics content matches neither section layout."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid song sections: {reason}")


class UnknownKeyError(SongSheetError):
    """Raised when a key name is not a recognized note."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown key: {key!r}")
