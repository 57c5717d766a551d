"""Content error taxonomy.

Per-file errors are raised by the parser / hierarchy resolver and converted
into report ``Issue`` entries by the scanner; they never abort a scan.
Only ``CorpusUnavailable`` is fatal to the caller.
"""

from __future__ import annotations

from pathlib import Path


class ContentError(Exception):
    """Base class for all daybook content errors.

    Attributes:
        kind: Stable identifier used in scan reports (e.g. ``MissingField``).
        path: File the error refers to, if any.
    """

    kind: str = "ContentError"

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class UnrecognizedHeader(ContentError):
    """File does not open with a ``+++`` or ``---`` frontmatter block."""

    kind = "UnrecognizedHeader"


class MalformedHeader(UnrecognizedHeader):
    """Header delimiters were found but the block does not decode to a mapping."""

    kind = "MalformedHeader"


class MissingField(ContentError):
    kind = "MissingField"

    def __init__(self, field_name: str, path: Path | None = None) -> None:
        super().__init__(f"missing required field '{field_name}'", path)
        self.field_name = field_name


class InvalidField(ContentError):
    kind = "InvalidField"

    def __init__(self, field_name: str, value: object, path: Path | None = None) -> None:
        super().__init__(f"invalid value for '{field_name}': {value!r}", path)
        self.field_name = field_name
        self.value = value


class UnindexableFilename(ContentError):
    """Filename carries no integer ordinal (e.g. ``intro.md``)."""

    kind = "UnindexableFilename"


class AmbiguousOrdering(ContentError):
    kind = "AmbiguousOrdering"


class ReadTimeout(ContentError):
    kind = "ReadTimeout"


class ReadFailure(ContentError):
    kind = "ReadFailure"


class ScanCancelled(ContentError):
    """An in-progress scan was cancelled; its partial results are discarded."""

    kind = "ScanCancelled"


class CorpusUnavailable(ContentError):
    """Fatal: the content root is missing, unreadable, or holds no readable files."""

    kind = "CorpusUnavailable"
