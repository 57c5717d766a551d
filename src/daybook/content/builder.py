"""Collection builder.

Groups parsed records by ``collection_id`` on the coordinating thread and
flags structural conflicts. Duplicate ordinals never abort a build: every
record is kept and each conflicting pair gets an ``AmbiguousOrdering``
warning; ordering then falls through to date and slug.
"""

from __future__ import annotations

import itertools
from collections import defaultdict
from collections.abc import Iterable

from daybook.content.errors import AmbiguousOrdering
from daybook.content.hierarchy import collection_sort_key
from daybook.content.models import (
    DEFAULT_TEMPLATE,
    SEVERITY_WARNING,
    Collection,
    ContentRecord,
    Issue,
)
from daybook.content.ordering import sort_records
from daybook.content.templates import collection_default_template


def _ambiguous_pairs(records: Iterable[ContentRecord]) -> dict[int, list[ContentRecord]]:
    by_index: dict[int, list[ContentRecord]] = defaultdict(list)
    for r in records:
        if r.item_index is not None:
            by_index[r.item_index].append(r)
    return {idx: rs for idx, rs in sorted(by_index.items()) if len(rs) > 1}


def build_collection(
    collection_id: str,
    records: Iterable[ContentRecord],
    default_template: str = DEFAULT_TEMPLATE,
) -> tuple[Collection, list[Issue]]:
    """Build one ``Collection`` and return it with its ordering warnings."""
    ordered = sort_records(records)
    issues: list[Issue] = []

    conflicts = _ambiguous_pairs(ordered)
    for idx, group in conflicts.items():
        for a, b in itertools.combinations(group, 2):
            err = AmbiguousOrdering(
                f"'{a.slug}' and '{b.slug}' share ordinal {idx} in '{collection_id}'; "
                "ordering falls back to date, then slug",
                a.path,
            )
            issues.append(
                Issue(
                    kind=err.kind,
                    message=err.message,
                    path=a.path.as_posix(),
                    severity=SEVERITY_WARNING,
                )
            )

    collection = Collection(
        collection_id=collection_id,
        records=ordered,
        default_template=collection_default_template(ordered, default_template),
        ambiguous=tuple(conflicts),
    )
    return collection, issues


def build_collections(
    records: Iterable[ContentRecord],
    default_template: str = DEFAULT_TEMPLATE,
    known_ids: Iterable[str] = (),
) -> tuple[tuple[Collection, ...], list[Issue]]:
    """Group *records* into collections ordered by natural collection id.

    Args:
        records: Successfully parsed records, in any order.
        default_template: Global fallback template.
        known_ids: Collection ids that must exist even if no record in them
            parsed (e.g. a day folder whose only file is malformed). They
            are kept as empty collections.

    Returns:
        ``(collections, issues)``.
    """
    grouped: dict[str, list[ContentRecord]] = defaultdict(list)
    for cid in known_ids:
        grouped.setdefault(cid, [])
    for r in records:
        grouped[r.collection_id].append(r)

    collections: list[Collection] = []
    issues: list[Issue] = []
    for cid in sorted(grouped, key=collection_sort_key):
        collection, found = build_collection(cid, grouped[cid], default_template)
        collections.append(collection)
        issues.extend(found)
    return tuple(collections), issues
