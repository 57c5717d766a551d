"""Domain models for the daybook content engine.

All models are frozen: a scan produces a brand-new ``Corpus`` and nothing is
mutated after construction.
"""

from __future__ import annotations

import datetime
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from daybook.content.ordering import visible_sequence

DEFAULT_TEMPLATE = "page.html"

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class Location:
    """Hierarchy position derived from a file path alone."""

    collection_id: str
    item_index: int | None
    slug: str


@dataclass(frozen=True)
class ContentRecord:
    path: Path
    collection_id: str
    item_index: int | None  # None when the filename carries no ordinal
    slug: str
    title: str
    description: str = ""
    date: datetime.date | None = None
    draft: bool = False
    weight: int = 0
    template: str | None = None  # explicit frontmatter value only; see templates.py
    body: str = ""
    dialect: str = "yaml"
    extra: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Issue:
    """A per-file problem collected during a scan."""

    kind: str
    message: str
    path: str | None = None
    severity: str = SEVERITY_WARNING

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR


@dataclass(frozen=True)
class ScanReport:
    issues: tuple[Issue, ...] = ()
    files_seen: int = 0
    records_parsed: int = 0

    @property
    def errors(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if i.is_error)

    @property
    def warnings(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if not i.is_error)

    @property
    def has_errors(self) -> bool:
        return any(i.is_error for i in self.issues)

    def by_kind(self) -> dict[str, int]:
        """Return issue counts keyed by kind, sorted by kind name."""
        counts = Counter(i.kind for i in self.issues)
        return dict(sorted(counts.items()))


@dataclass(frozen=True)
class Collection:
    """A "day": every record sharing one ``collection_id``.

    ``records`` holds all records (drafts included) already in display
    order; ``visible()`` applies draft filtering on top of that order.
    """

    collection_id: str
    records: tuple[ContentRecord, ...] = ()
    default_template: str = DEFAULT_TEMPLATE
    ambiguous: tuple[int, ...] = ()  # item_index values shared by >1 record

    def visible(self, include_drafts: bool = False) -> tuple[ContentRecord, ...]:
        return visible_sequence(self.records, include_drafts=include_drafts)

    @property
    def drafts(self) -> tuple[ContentRecord, ...]:
        return tuple(r for r in self.records if r.draft)

    @property
    def is_empty(self) -> bool:
        """True when the collection has no publicly visible record."""
        return not self.visible()


@dataclass(frozen=True)
class ResolvedEntry:
    """A record as handed to a renderer: position, template, neighbours."""

    record: ContentRecord
    position: int
    template: str
    previous: str | None = None
    next: str | None = None


@dataclass(frozen=True)
class Corpus:
    """Immutable snapshot of every collection plus the scan report."""

    root: Path
    collections: tuple[Collection, ...] = ()
    report: ScanReport = field(default_factory=ScanReport)

    def collection(self, collection_id: str) -> Collection | None:
        for c in self.collections:
            if c.collection_id == collection_id:
                return c
        return None

    def find(self, slug: str, collection_id: str | None = None) -> ContentRecord | None:
        """Return the first record with *slug*, optionally within one collection."""
        for c in self.collections:
            if collection_id is not None and c.collection_id != collection_id:
                continue
            for r in c.records:
                if r.slug == slug:
                    return r
        return None

    def drafts(self) -> list[ContentRecord]:
        """Authoring view: every draft record, in corpus order."""
        return [r for c in self.collections for r in c.drafts]

    def records(self, include_drafts: bool = False) -> list[ContentRecord]:
        return [r for c in self.collections for r in c.visible(include_drafts)]

    @property
    def record_count(self) -> int:
        return sum(len(c.records) for c in self.collections)
