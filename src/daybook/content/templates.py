"""Template resolver.

Resolution order for a record:
  1. its own non-empty ``template`` field
  2. the collection's majority template among records that declare one
  3. the global default (``page.html`` unless configured otherwise)

A tie for the most common template counts as "no consistent template"
and falls through to the global default. The resolver never raises.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from daybook.content.models import DEFAULT_TEMPLATE, Collection, ContentRecord, ResolvedEntry
from daybook.content.ordering import assign_positions


def collection_default_template(
    records: Iterable[ContentRecord],
    default: str = DEFAULT_TEMPLATE,
) -> str:
    """Return the majority explicit template of *records*, or *default*."""
    counts = Counter(r.template for r in records if r.template)
    if not counts:
        return default
    ranked = counts.most_common(2)
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return default
    return ranked[0][0]


def resolve_template(
    record: ContentRecord,
    siblings: Iterable[ContentRecord] = (),
    default: str = DEFAULT_TEMPLATE,
) -> str:
    if record.template:
        return record.template
    return collection_default_template(siblings, default)


def resolve_collection(
    collection: Collection,
    include_drafts: bool = False,
) -> tuple[ResolvedEntry, ...]:
    """Produce renderer-ready entries for one collection's visible sequence."""
    entries: list[ResolvedEntry] = []
    for p in assign_positions(collection.visible(include_drafts)):
        entries.append(
            ResolvedEntry(
                record=p.record,
                position=p.position,
                template=p.record.template or collection.default_template,
                previous=p.previous,
                next=p.next,
            )
        )
    return tuple(entries)
