"""Visibility & ordering engine.

Step 1: drop drafts unless ``include_drafts`` is set.
Step 2: sort by (weight, item_index, date, slug, path) — a total order, so
        two records never compare equal and the result is deterministic.
        The path only matters when nested folders share a name (two
        "day 1" directories feeding one collection with equal slugs).
Step 3: assign zero-based positions and previous/next neighbours.

Records whose filename has no ordinal (``item_index is None``) are placed
after every indexed record of their collection and ordered by date, then
slug. Undated records sort after dated ones at the same rank.

Nothing in this module raises; an empty input yields an empty sequence.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daybook.content.models import ContentRecord, Corpus


@dataclass(frozen=True)
class Positioned:
    position: int
    record: ContentRecord
    previous: str | None = None
    next: str | None = None


def _date_key(value: datetime.date | None) -> tuple[bool, datetime.date]:
    return (value is None, value or datetime.date.min)


def order_key(record: ContentRecord) -> tuple:
    """Sort key implementing the collection display order."""
    if record.item_index is None:
        # Degraded mode: date is the only signal besides the slug tiebreak.
        return (1, 0, 0, _date_key(record.date), record.slug, record.path.as_posix())
    return (
        0,
        record.weight,
        record.item_index,
        _date_key(record.date),
        record.slug,
        record.path.as_posix(),
    )


def is_visible(record: ContentRecord, include_drafts: bool = False) -> bool:
    return include_drafts or not record.draft


def sort_records(records: Iterable[ContentRecord]) -> tuple[ContentRecord, ...]:
    return tuple(sorted(records, key=order_key))


def visible_sequence(
    records: Iterable[ContentRecord],
    include_drafts: bool = False,
) -> tuple[ContentRecord, ...]:
    """Return the externally visible, ordered sequence for one collection."""
    return sort_records(r for r in records if is_visible(r, include_drafts))


def assign_positions(records: Iterable[ContentRecord]) -> tuple[Positioned, ...]:
    """Number an already ordered sequence and link each record to its neighbours."""
    seq = list(records)
    out: list[Positioned] = []
    for i, record in enumerate(seq):
        out.append(
            Positioned(
                position=i,
                record=record,
                previous=seq[i - 1].slug if i > 0 else None,
                next=seq[i + 1].slug if i + 1 < len(seq) else None,
            )
        )
    return tuple(out)


def recent_records(
    corpus: Corpus,
    limit: int | None = None,
    include_drafts: bool = False,
) -> list[ContentRecord]:
    """Recency view: visible records newest first, undated records last.

    Ties on date keep corpus order (collection, then display order).
    """
    records = corpus.records(include_drafts)
    dated = sorted((r for r in records if r.date is not None), key=lambda r: r.date, reverse=True)
    undated = [r for r in records if r.date is None]
    out = dated + undated
    return out[:limit] if limit is not None else out
