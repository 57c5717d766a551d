"""daybook content engine — parse, resolve, group, order and export records."""

from daybook.content.errors import (
    AmbiguousOrdering,
    ContentError,
    CorpusUnavailable,
    InvalidField,
    MalformedHeader,
    MissingField,
    ReadFailure,
    ReadTimeout,
    ScanCancelled,
    UnindexableFilename,
    UnrecognizedHeader,
)
from daybook.content.models import (
    DEFAULT_TEMPLATE,
    Collection,
    ContentRecord,
    Corpus,
    Issue,
    ResolvedEntry,
    ScanReport,
)

__all__ = [
    "AmbiguousOrdering",
    "Collection",
    "ContentError",
    "ContentRecord",
    "Corpus",
    "CorpusUnavailable",
    "DEFAULT_TEMPLATE",
    "InvalidField",
    "Issue",
    "MalformedHeader",
    "MissingField",
    "ReadFailure",
    "ReadTimeout",
    "ResolvedEntry",
    "ScanCancelled",
    "ScanReport",
    "UnindexableFilename",
    "UnrecognizedHeader",
]
