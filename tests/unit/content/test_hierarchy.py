"""Tests for content/hierarchy.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from daybook.content.errors import UnindexableFilename
from daybook.content.hierarchy import (
    collection_id_for,
    collection_sort_key,
    item_index_for,
    resolve_location,
    resolve_location_lenient,
)


def test_resolve_location_basic() -> None:
    loc = resolve_location(Path("content/day 13/chapter-2.md"))
    assert loc.collection_id == "day 13"
    assert loc.item_index == 2
    assert loc.slug == "chapter-2"


def test_first_integer_wins() -> None:
    assert item_index_for(Path("day 1/part-10-of-12.md")) == 10


def test_leading_zeros() -> None:
    assert item_index_for(Path("day 1/chapter-007.md")) == 7


def test_no_integer_raises() -> None:
    with pytest.raises(UnindexableFilename):
        item_index_for(Path("day 1/intro.md"))


def test_lenient_returns_none_index_and_error() -> None:
    loc, err = resolve_location_lenient(Path("day 4/intro.md"))
    assert loc.item_index is None
    assert loc.collection_id == "day 4"
    assert loc.slug == "intro"
    assert isinstance(err, UnindexableFilename)


def test_lenient_no_error_for_indexed_file() -> None:
    loc, err = resolve_location_lenient(Path("day 4/chapter-1.md"))
    assert loc.item_index == 1
    assert err is None


def test_collection_id_trimmed_not_reinterpreted() -> None:
    assert collection_id_for(Path(" Day 7 /chapter-1.md")) == "Day 7"


def test_collection_id_lowercase_policy() -> None:
    assert collection_id_for(Path("Day 7/chapter-1.md"), lowercase=True) == "day 7"


def test_directory_digits_do_not_affect_item_index() -> None:
    # The ordinal comes from the filename only.
    assert item_index_for(Path("day 99/chapter-3.md")) == 3


def test_collection_sort_key_is_numeric() -> None:
    ids = ["day 13", "day 2", "day 1", "day 10"]
    assert sorted(ids, key=collection_sort_key) == ["day 1", "day 2", "day 10", "day 13"]


def test_collection_sort_key_mixed_names() -> None:
    ids = ["extras", "day 2", "appendix", "day 1"]
    ordered = sorted(ids, key=collection_sort_key)
    assert ordered.index("day 1") < ordered.index("day 2")
    assert ordered == sorted(ids, key=collection_sort_key)  # stable / deterministic
