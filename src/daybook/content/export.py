"""Corpus serialization for downstream renderers.

Output is deterministic: keys are sorted, paths are relative POSIX paths,
dates are ISO-8601 and nothing time-dependent is emitted. Scanning the same
tree twice yields byte-identical JSON.

Bodies are omitted unless ``include_body`` is set; the renderer usually
reads them through the record path itself.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import typer

from daybook.content.models import Collection, ContentRecord, Corpus, ResolvedEntry
from daybook.content.templates import resolve_collection

FORMAT_VERSION = 1


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _json_safe(value: Any) -> Any:
    """Make frontmatter extras JSON-serializable (dates, nested tables)."""
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def record_to_dict(record: ContentRecord, root: Path, include_body: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "path": _relative(record.path, root),
        "collection_id": record.collection_id,
        "item_index": record.item_index,
        "slug": record.slug,
        "title": record.title,
        "description": record.description,
        "date": record.date.isoformat() if record.date else None,
        "draft": record.draft,
        "weight": record.weight,
        "dialect": record.dialect,
        "extra": _json_safe(record.extra),
    }
    if include_body:
        data["body"] = record.body
    return data


def entry_to_dict(entry: ResolvedEntry, root: Path, include_body: bool = False) -> dict[str, Any]:
    data = record_to_dict(entry.record, root, include_body=include_body)
    data.update(
        position=entry.position,
        template=entry.template,
        previous=entry.previous,
        next=entry.next,
    )
    return data


def collection_to_dict(
    collection: Collection,
    root: Path,
    include_drafts: bool = False,
    include_body: bool = False,
) -> dict[str, Any]:
    entries = resolve_collection(collection, include_drafts=include_drafts)
    return {
        "id": collection.collection_id,
        "default_template": collection.default_template,
        "ambiguous_ordinals": list(collection.ambiguous),
        "empty": not entries,
        "entries": [entry_to_dict(e, root, include_body) for e in entries],
    }


def corpus_to_dict(
    corpus: Corpus,
    include_drafts: bool = False,
    include_body: bool = False,
) -> dict[str, Any]:
    """Return the renderer-facing structure for *corpus*."""
    report = corpus.report
    return {
        "version": FORMAT_VERSION,
        "include_drafts": include_drafts,
        "collections": [
            collection_to_dict(c, corpus.root, include_drafts, include_body)
            for c in corpus.collections
        ],
        "report": {
            "files_seen": report.files_seen,
            "records_parsed": report.records_parsed,
            "issues": [
                {"kind": i.kind, "path": i.path, "message": i.message, "severity": i.severity}
                for i in report.issues
            ],
        },
    }


def dumps_corpus(
    corpus: Corpus,
    include_drafts: bool = False,
    include_body: bool = False,
    indent: int | None = 2,
) -> str:
    data = corpus_to_dict(corpus, include_drafts=include_drafts, include_body=include_body)
    return json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"


# ------------------------------------------------------------------
# Overwrite guard + atomic write
# ------------------------------------------------------------------


def check_overwrite(path: Path, yes: bool) -> bool:
    """Return True if we should proceed with writing, False if user declines.

    If *yes* is True, skip the prompt and return True.
    If the file does not exist, return True.
    Otherwise, ask the user.
    """
    if yes or not path.exists():
        return True

    return typer.confirm(f"  File exists: {path.name}\n  Overwrite?", default=False)


def write_output(path: Path, content: str) -> None:
    """Write *content* to *path* atomically (temp → rename).

    Creates parent directories if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
