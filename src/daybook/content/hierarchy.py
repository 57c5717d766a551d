"""Path hierarchy resolver.

Derives (collection_id, item_index, slug) from a file path alone:

  day 13/chapter-2.md  →  ("day 13", 2, "chapter-2")

The parent directory name is the source of truth for grouping; any
frontmatter the file declares is never consulted here.
"""

from __future__ import annotations

import re
from pathlib import Path

from daybook.content.errors import UnindexableFilename
from daybook.content.models import Location

_INT_RE = re.compile(r"\d+")
_NATURAL_SPLIT_RE = re.compile(r"(\d+)")


def collection_id_for(path: Path, *, lowercase: bool = False) -> str:
    """Return the normalized name of *path*'s immediate parent directory."""
    name = path.parent.name.strip()
    return name.lower() if lowercase else name


def item_index_for(path: Path) -> int:
    """Return the first integer in the filename stem.

    Raises:
        UnindexableFilename: if the stem contains no digits.
    """
    match = _INT_RE.search(path.stem)
    if match is None:
        raise UnindexableFilename(f"no ordinal in filename '{path.name}'", path)
    return int(match.group())


def resolve_location(path: Path, *, lowercase: bool = False) -> Location:
    """Return the full hierarchy position of *path*.

    Raises:
        UnindexableFilename: propagated from :func:`item_index_for`. Callers
            that want degraded mode use :func:`resolve_location_lenient`.
    """
    return Location(
        collection_id=collection_id_for(path, lowercase=lowercase),
        item_index=item_index_for(path),
        slug=path.stem,
    )


def resolve_location_lenient(
    path: Path, *, lowercase: bool = False
) -> tuple[Location, UnindexableFilename | None]:
    """Like :func:`resolve_location` but returns ``item_index=None`` plus the error."""
    try:
        return resolve_location(path, lowercase=lowercase), None
    except UnindexableFilename as exc:
        loc = Location(
            collection_id=collection_id_for(path, lowercase=lowercase),
            item_index=None,
            slug=path.stem,
        )
        return loc, exc


def collection_sort_key(collection_id: str) -> tuple:
    """Natural sort key: "day 2" < "day 13" < "day x"."""
    parts = _NATURAL_SPLIT_RE.split(collection_id)
    key: list[tuple[int, int | str]] = []
    for part in parts:
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return (tuple(key), collection_id)
