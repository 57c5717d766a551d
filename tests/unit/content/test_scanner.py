"""Tests for content/scanner.py — end-to-end scans of a content tree."""

from __future__ import annotations

import datetime
import threading
import time
from pathlib import Path

import pytest

from daybook.content.errors import CorpusUnavailable, ScanCancelled
from daybook.content.scanner import ScanSettings, discover_files, read_bytes, scan_corpus


def write_chapter(root: Path, rel: str, frontmatter: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{frontmatter}\n---\n\nBody.\n", encoding="utf-8")
    return path


def _slugs(collection) -> list[str]:
    return [r.slug for r in collection.visible()]


# ------------------------------------------------------------------
# Happy path
# ------------------------------------------------------------------


def test_scan_builds_ordered_corpus(content_root: Path) -> None:
    corpus = scan_corpus(content_root)
    assert [c.collection_id for c in corpus.collections] == ["day 1", "day 2", "day 13"]
    assert _slugs(corpus.collection("day 1")) == ["chapter-1", "chapter-2", "chapter-4"]
    assert _slugs(corpus.collection("day 13")) == ["chapter-5", "chapter-4"]
    assert corpus.report.files_seen == 7
    assert corpus.report.records_parsed == 7
    assert corpus.report.issues == ()


def test_scan_reads_both_dialects(content_root: Path) -> None:
    corpus = scan_corpus(content_root)
    day13 = corpus.collection("day 13")
    assert {r.dialect for r in day13.records} == {"toml", "yaml"}


def test_drafts_kept_for_authoring(content_root: Path) -> None:
    corpus = scan_corpus(content_root)
    assert [r.slug for r in corpus.drafts()] == ["chapter-3"]
    assert "chapter-3" not in [r.slug for r in corpus.records()]
    assert "chapter-3" in [r.slug for r in corpus.records(include_drafts=True)]


def test_rescan_is_deterministic(content_root: Path) -> None:
    a = scan_corpus(content_root, ScanSettings(workers=1))
    b = scan_corpus(content_root, ScanSettings(workers=8))
    assert a == b


def test_lowercase_ids_policy(tmp_path: Path) -> None:
    write_chapter(tmp_path, "Day 1/chapter-1.md", "title: A\ndescription: a")
    corpus = scan_corpus(tmp_path, ScanSettings(lowercase_ids=True))
    assert corpus.collections[0].collection_id == "day 1"


def test_exclude_globs(content_root: Path) -> None:
    files = discover_files(content_root, ["day 13/*"])
    assert all("day 13" not in p.parent.name for p in files)
    assert len(files) == 5


# ------------------------------------------------------------------
# Per-file problems never abort
# ------------------------------------------------------------------


def test_bad_files_reported_not_fatal(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: Good\ndescription: ok")
    (tmp_path / "day 1" / "chapter-2.md").write_text("no header here\n", encoding="utf-8")
    write_chapter(tmp_path, "day 1/chapter-3.md", "description: no title")
    write_chapter(tmp_path, "day 1/intro.md", "title: Intro\ndescription: d")

    corpus = scan_corpus(tmp_path)
    kinds = corpus.report.by_kind()
    assert kinds == {"MissingField": 1, "UnindexableFilename": 1, "UnrecognizedHeader": 1}
    assert _slugs(corpus.collection("day 1")) == ["chapter-1", "intro"]
    assert len(corpus.report.errors) == 2
    assert corpus.report.records_parsed == 2


def test_day_with_only_broken_files_is_empty_collection(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: Good\ndescription: ok")
    (tmp_path / "day 2").mkdir()
    (tmp_path / "day 2" / "chapter-1.md").write_text("oops\n", encoding="utf-8")

    corpus = scan_corpus(tmp_path)
    day2 = corpus.collection("day 2")
    assert day2 is not None
    assert day2.is_empty


def test_duplicate_ordinals_warn(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-2.md", "title: A\ndescription: a\ndate: 2024-01-02")
    write_chapter(tmp_path, "day 1/chapter-02.md", "title: B\ndescription: b\ndate: 2024-01-01")
    corpus = scan_corpus(tmp_path)
    assert corpus.report.by_kind() == {"AmbiguousOrdering": 1}
    assert not corpus.report.has_errors
    assert _slugs(corpus.collection("day 1")) == ["chapter-02", "chapter-2"]
    assert corpus.report.issues[0].path == "day 1/chapter-02.md"


def test_issue_paths_are_relative(tmp_path: Path) -> None:
    (tmp_path / "day 1").mkdir()
    (tmp_path / "day 1" / "chapter-1.md").write_text("nope", encoding="utf-8")
    write_chapter(tmp_path, "day 1/chapter-2.md", "title: ok\ndescription: ok")
    corpus = scan_corpus(tmp_path)
    assert corpus.report.issues[0].path == "day 1/chapter-1.md"


def test_impossible_yaml_date_is_warning_not_fatal(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: A\ndescription: a\ndate: 2024-02-01")
    write_chapter(tmp_path, "day 1/chapter-2.md", "title: B\ndescription: b\ndate: 2024-02-30")

    corpus = scan_corpus(tmp_path)

    assert corpus.report.by_kind() == {"InvalidField": 1}
    assert corpus.report.issues[0].path == "day 1/chapter-2.md"
    assert corpus.report.records_parsed == 2
    assert corpus.find("chapter-2").date is None
    assert corpus.find("chapter-1").date == datetime.date(2024, 2, 1)


def test_same_named_nested_days_merge_in_stable_order(tmp_path: Path) -> None:
    write_chapter(tmp_path, "b/day 1/chapter-1.md", "title: From B\ndescription: b")
    write_chapter(tmp_path, "a/day 1/chapter-1.md", "title: From A\ndescription: a")

    corpus = scan_corpus(tmp_path)
    day1 = corpus.collection("day 1")

    assert [r.title for r in day1.visible()] == ["From A", "From B"]
    assert corpus.find("chapter-1").title == "From A"
    assert corpus == scan_corpus(tmp_path, ScanSettings(workers=1))


# ------------------------------------------------------------------
# Timeouts + read failures
# ------------------------------------------------------------------


def test_read_timeout_affects_only_that_file(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: A\ndescription: a")
    slow = write_chapter(tmp_path, "day 1/chapter-2.md", "title: B\ndescription: b")

    def reader(path: Path) -> bytes:
        if path == slow:
            time.sleep(0.5)
        return read_bytes(path)

    corpus = scan_corpus(tmp_path, ScanSettings(read_timeout=0.05), reader=reader)
    assert corpus.report.by_kind() == {"ReadTimeout": 1}
    assert corpus.report.issues[0].path == "day 1/chapter-2.md"
    assert _slugs(corpus.collection("day 1")) == ["chapter-1"]


def test_single_worker_timeout_does_not_starve_other_files(tmp_path: Path) -> None:
    hung = write_chapter(tmp_path, "day 1/chapter-1.md", "title: A\ndescription: a")
    for i in (2, 3, 4):
        write_chapter(tmp_path, f"day 1/chapter-{i}.md", f"title: T{i}\ndescription: d")
    release = threading.Event()

    def reader(path: Path) -> bytes:
        if path == hung:
            release.wait(5)
        return read_bytes(path)

    try:
        corpus = scan_corpus(tmp_path, ScanSettings(workers=1, read_timeout=0.2), reader=reader)
    finally:
        release.set()

    assert corpus.report.by_kind() == {"ReadTimeout": 1}
    assert corpus.report.issues[0].path == "day 1/chapter-1.md"
    assert _slugs(corpus.collection("day 1")) == ["chapter-2", "chapter-3", "chapter-4"]


def test_os_error_is_read_failure(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: A\ndescription: a")
    broken = write_chapter(tmp_path, "day 1/chapter-2.md", "title: B\ndescription: b")

    def reader(path: Path) -> bytes:
        if path == broken:
            raise PermissionError("denied")
        return read_bytes(path)

    corpus = scan_corpus(tmp_path, reader=reader)
    assert corpus.report.by_kind() == {"ReadFailure": 1}


# ------------------------------------------------------------------
# Fatal cases
# ------------------------------------------------------------------


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(CorpusUnavailable):
        scan_corpus(tmp_path / "nope")


def test_root_is_file_is_fatal(tmp_path: Path) -> None:
    f = tmp_path / "file.md"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(CorpusUnavailable, match="not a directory"):
        scan_corpus(f)


def test_empty_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(CorpusUnavailable, match="no"):
        scan_corpus(tmp_path)


def test_no_readable_files_is_fatal(tmp_path: Path) -> None:
    write_chapter(tmp_path, "day 1/chapter-1.md", "title: A")

    def reader(path: Path) -> bytes:
        raise OSError("disk gone")

    with pytest.raises(CorpusUnavailable, match="could be read"):
        scan_corpus(tmp_path, reader=reader)


def test_all_malformed_is_not_fatal(tmp_path: Path) -> None:
    (tmp_path / "day 1").mkdir()
    (tmp_path / "day 1" / "chapter-1.md").write_text("no header", encoding="utf-8")
    corpus = scan_corpus(tmp_path)
    assert corpus.report.has_errors
    assert corpus.collection("day 1").is_empty


# ------------------------------------------------------------------
# Cancellation
# ------------------------------------------------------------------


def test_cancelled_scan_raises(content_root: Path) -> None:
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(ScanCancelled):
        scan_corpus(content_root, cancel=cancel)
