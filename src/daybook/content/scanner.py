"""Corpus scanner — discover, parse and assemble a content tree.

Pipeline per file (run in a worker pool, one task per file):
  read (bounded by read_timeout) → parse frontmatter → resolve path hierarchy
  → decode record

Each read runs on its own short-lived thread, so a hung file costs one
worker at most read_timeout seconds and never delays other files.

Results are merged on the calling thread in sorted path order, so the
resulting ``Corpus`` is identical for identical input regardless of which
worker finished first.

Per-file problems become ``Issue`` entries. Only a missing/unreadable root
or a tree with no readable ``.md`` file raises ``CorpusUnavailable``.
"""

from __future__ import annotations

import fnmatch
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

from daybook.content.builder import build_collections
from daybook.content.errors import (
    ContentError,
    CorpusUnavailable,
    ReadFailure,
    ReadTimeout,
    ScanCancelled,
)
from daybook.content.frontmatter import build_record, parse_frontmatter
from daybook.content.hierarchy import collection_id_for, resolve_location_lenient
from daybook.content.models import (
    DEFAULT_TEMPLATE,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    ContentRecord,
    Corpus,
    Issue,
    ScanReport,
)

if TYPE_CHECKING:
    from daybook.config import DaybookConfig

logger = logging.getLogger(__name__)

_CONTENT_GLOB = "*.md"

Reader = Callable[[Path], bytes]


@dataclass(frozen=True)
class ScanSettings:
    default_template: str = DEFAULT_TEMPLATE
    lowercase_ids: bool = False
    workers: int = 8
    read_timeout: float = 5.0
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, cfg: DaybookConfig) -> ScanSettings:
        return cls(
            default_template=cfg.content.default_template,
            lowercase_ids=cfg.content.lowercase_ids,
            workers=cfg.scan.workers,
            read_timeout=cfg.scan.read_timeout,
            exclude=tuple(cfg.content.exclude),
        )


@dataclass
class FileResult:
    path: Path
    record: ContentRecord | None = None
    issues: list[Issue] = field(default_factory=list)
    readable: bool = True


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _issue(exc: ContentError, path: Path, root: Path, severity: str) -> Issue:
    return Issue(kind=exc.kind, message=exc.message, path=_relative(path, root), severity=severity)


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def discover_files(root: Path, exclude: tuple[str, ...] | list[str] = ()) -> list[Path]:
    """Return every ``*.md`` file under *root*, sorted, minus *exclude* globs.

    Raises:
        CorpusUnavailable: if *root* is missing, not a directory, or cannot be listed.
    """
    if not root.exists():
        raise CorpusUnavailable(f"content root '{root}' does not exist", root)
    if not root.is_dir():
        raise CorpusUnavailable(f"content root '{root}' is not a directory", root)

    try:
        candidates = sorted(p for p in root.rglob(_CONTENT_GLOB) if p.is_file())
    except OSError as exc:
        raise CorpusUnavailable(f"cannot list content root '{root}': {exc}", root) from exc

    files: list[Path] = []
    for p in candidates:
        rel = _relative(p, root)
        if any(fnmatch.fnmatch(rel, pat) for pat in exclude):
            logger.debug("excluded %s", rel)
            continue
        files.append(p)
    return files


# ---------------------------------------------------------------------------
# Per-file task
# ---------------------------------------------------------------------------


def _read_with_timeout(path: Path, reader: Reader, timeout: float) -> bytes:
    """Run *reader* on its own daemon thread and wait at most *timeout* seconds.

    The deadline starts when this file's read starts. A read that overruns
    is abandoned, not interrupted: its thread keeps running until *reader*
    returns, and being a daemon it never holds up interpreter exit.
    """
    fut: Future[bytes] = Future()

    def run() -> None:
        if not fut.set_running_or_notify_cancel():
            return
        try:
            fut.set_result(reader(path))
        except BaseException as exc:
            fut.set_exception(exc)

    threading.Thread(target=run, name=f"daybook-read:{path.name}", daemon=True).start()
    try:
        return fut.result(timeout=timeout)
    except FutureTimeout:
        fut.cancel()
        raise ReadTimeout(f"read did not finish within {timeout:g}s", path) from None
    except OSError as exc:
        raise ReadFailure(f"cannot read file: {exc}", path) from exc


def load_file(
    path: Path,
    root: Path,
    settings: ScanSettings,
    read: Callable[[Path], bytes],
) -> FileResult:
    """Read, parse and decode one file. Never raises ``ContentError``."""
    result = FileResult(path=path)

    try:
        raw = read(path)
    except (ReadTimeout, ReadFailure) as exc:
        result.readable = False
        result.issues.append(_issue(exc, path, root, SEVERITY_ERROR))
        return result

    location, unindexable = resolve_location_lenient(path, lowercase=settings.lowercase_ids)
    if unindexable is not None:
        result.issues.append(_issue(unindexable, path, root, SEVERITY_WARNING))

    try:
        parsed = parse_frontmatter(raw, path)
        record, problems = build_record(path, parsed, location)
    except ContentError as exc:
        result.issues.append(_issue(exc, path, root, SEVERITY_ERROR))
        return result

    for problem in problems:
        result.issues.append(_issue(problem, path, root, SEVERITY_WARNING))
    result.record = record
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def scan_corpus(
    root: Path,
    settings: ScanSettings | None = None,
    *,
    reader: Reader = read_bytes,
    cancel: threading.Event | None = None,
) -> Corpus:
    """Scan *root* and return a fresh, fully built ``Corpus``.

    Args:
        root: Directory holding the collection folders.
        settings: Scanner settings; defaults apply when omitted.
        reader: Function returning a file's bytes (overridable for testing).
        cancel: When set during the scan, pending work is dropped and
            ``ScanCancelled`` is raised; nothing partial is returned.

    Raises:
        CorpusUnavailable: root missing/unreadable, no ``.md`` files, or no
            file could be read.
        ScanCancelled: *cancel* was set before the scan completed.
    """
    settings = settings or ScanSettings()
    files = discover_files(root, settings.exclude)
    if not files:
        raise CorpusUnavailable(f"no {_CONTENT_GLOB} files found under '{root}'", root)

    logger.debug("scanning %d files under %s with %d workers", len(files), root, settings.workers)

    workers = max(1, settings.workers)
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="daybook-scan")

    def read(path: Path) -> bytes:
        return _read_with_timeout(path, reader, settings.read_timeout)

    results: list[FileResult] = []
    try:
        futures: list[Future[FileResult]] = [
            pool.submit(load_file, p, root, settings, read) for p in files
        ]
        for fut in futures:
            if cancel is not None and cancel.is_set():
                raise ScanCancelled(f"scan of '{root}' cancelled", root)
            results.append(fut.result())
        if cancel is not None and cancel.is_set():
            raise ScanCancelled(f"scan of '{root}' cancelled", root)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    if not any(r.readable for r in results):
        raise CorpusUnavailable(f"none of the {len(files)} files under '{root}' could be read", root)

    return assemble_corpus(root, results, settings)


def assemble_corpus(root: Path, results: list[FileResult], settings: ScanSettings) -> Corpus:
    """Merge per-file results into a ``Corpus`` (coordinating thread only)."""
    issues: list[Issue] = []
    records: list[ContentRecord] = []
    known_ids: list[str] = []

    for r in results:
        issues.extend(r.issues)
        if r.record is not None:
            records.append(r.record)
        known_ids.append(collection_id_for(r.path, lowercase=settings.lowercase_ids))

    collections, ordering_issues = build_collections(
        records,
        default_template=settings.default_template,
        known_ids=known_ids,
    )
    # builder issues carry the record path as scanned
    issues.extend(replace(i, path=_relative(Path(i.path), root)) if i.path else i for i in ordering_issues)

    for issue in issues:
        logger.debug("%s %s: %s", issue.kind, issue.path, issue.message)

    report = ScanReport(
        issues=tuple(issues),
        files_seen=len(results),
        records_parsed=len(records),
    )
    return Corpus(root=root, collections=collections, report=report)
