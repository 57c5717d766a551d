"""Frontmatter parser.

A content file opens with a metadata block in one of two dialects:

  +++                     ---
  title = "Day 1"         title: Day 1
  weight = 2              weight: 2
  +++                     ---

Detection looks at the first non-blank line only. Everything after the
closing delimiter is the body and is passed through untouched.

TOML is decoded with ``tomllib``; YAML with a ``yaml.SafeLoader`` subclass that
leaves timestamps as strings, so an impossible date such as ``2024-02-30``
reaches the date decoder (an ``InvalidField`` warning) instead of failing
the whole header.
Unknown keys are kept in ``ContentRecord.extra`` and otherwise ignored.
"""

from __future__ import annotations

import datetime
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from daybook.content.errors import InvalidField, MalformedHeader, MissingField, UnrecognizedHeader
from daybook.content.models import ContentRecord, Location

TOML_DELIMITER = "+++"
YAML_DELIMITER = "---"

_KNOWN_FIELDS: frozenset[str] = frozenset(
    ["title", "description", "date", "draft", "weight", "template"]
)
_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader without the implicit timestamp resolver."""


_HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class TomlHeader:
    raw: str
    dialect: str = "toml"


@dataclass(frozen=True)
class YamlHeader:
    raw: str
    dialect: str = "yaml"


@dataclass(frozen=True)
class ParsedDocument:
    header: TomlHeader | YamlHeader
    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def dialect(self) -> str:
        return self.header.dialect


# ---------------------------------------------------------------------------
# Header splitting
# ---------------------------------------------------------------------------


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        # utf-8-sig strips a leading BOM if present
        return raw.decode("utf-8-sig", errors="replace")
    return raw.lstrip("\ufeff")


def split_header(raw: bytes | str, path: Path | None = None) -> tuple[TomlHeader | YamlHeader, str]:
    """Split *raw* into a tagged header variant and the body text.

    Raises:
        UnrecognizedHeader: if the first non-blank line is not ``+++`` or
            ``---``, or if the opening delimiter is never closed.
    """
    text = _decode(raw)
    lines = text.splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines):
        raise UnrecognizedHeader("file is empty; expected a '+++' or '---' header", path)

    opener = lines[start].strip()
    if opener not in (TOML_DELIMITER, YAML_DELIMITER):
        raise UnrecognizedHeader(
            f"first non-blank line is {opener[:40]!r}; expected '+++' or '---'", path
        )

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == opener:
            header_text = "".join(lines[start + 1 : end])
            body = "".join(lines[end + 1 :])
            header = TomlHeader(header_text) if opener == TOML_DELIMITER else YamlHeader(header_text)
            return header, body

    raise UnrecognizedHeader(f"header opened with {opener!r} is never closed", path)


def _load_header(header: TomlHeader | YamlHeader, path: Path | None) -> dict[str, Any]:
    if isinstance(header, TomlHeader):
        try:
            data: Any = tomllib.loads(header.raw)
        except tomllib.TOMLDecodeError as exc:
            raise MalformedHeader(f"invalid TOML header: {exc}", path) from exc
    else:
        try:
            data = yaml.load(header.raw, Loader=_HeaderLoader)
        except (yaml.YAMLError, ValueError) as exc:
            raise MalformedHeader(f"invalid YAML header: {exc}", path) from exc
        if data is None:
            data = {}

    if not isinstance(data, dict):
        raise MalformedHeader(
            f"header must be a mapping, got {type(data).__name__}", path
        )
    return data


def parse_frontmatter(raw: bytes | str, path: Path | None = None) -> ParsedDocument:
    """Parse raw file content into a ``ParsedDocument``.

    Pure function of its input; *path* is only attached to errors.

    Raises:
        UnrecognizedHeader: no recognizable header.
        MalformedHeader: header found but not decodable to a mapping.
    """
    header, body = split_header(raw, path)
    return ParsedDocument(header=header, frontmatter=_load_header(header, path), body=body)


# ---------------------------------------------------------------------------
# Field decoding
# ---------------------------------------------------------------------------


def _coerce_date(value: Any, path: Path | None) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidField("date", value, path)


def _coerce_bool(name: str, value: Any, path: Path | None) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidField(name, value, path)


def _coerce_int(name: str, value: Any, path: Path | None) -> int:
    if isinstance(value, bool):
        raise InvalidField(name, value, path)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidField(name, value, path)


def build_record(
    path: Path,
    parsed: ParsedDocument,
    location: Location,
) -> tuple[ContentRecord, list[InvalidField | MissingField]]:
    """Decode frontmatter fields into a ``ContentRecord``.

    Optional fields that fail to decode fall back to their defaults and are
    returned as non-fatal problems alongside the record.

    Returns:
        ``(record, problems)`` where *problems* lists warning-level issues
        (invalid optional values, missing description).

    Raises:
        MissingField: if ``title`` is absent or blank.
    """
    fm = parsed.frontmatter
    problems: list[InvalidField | MissingField] = []

    title = fm.get("title")
    if title is None or not str(title).strip():
        raise MissingField("title", path)

    description = fm.get("description")
    if description is None or not str(description).strip():
        problems.append(MissingField("description", path))
        description = ""

    date_value: datetime.date | None = None
    if fm.get("date") not in (None, ""):
        try:
            date_value = _coerce_date(fm["date"], path)
        except InvalidField as exc:
            problems.append(exc)

    draft = False
    if "draft" in fm:
        try:
            draft = _coerce_bool("draft", fm["draft"], path)
        except InvalidField as exc:
            problems.append(exc)

    weight = 0
    if "weight" in fm:
        try:
            weight = _coerce_int("weight", fm["weight"], path)
        except InvalidField as exc:
            problems.append(exc)

    template = fm.get("template")
    template = str(template).strip() if template is not None else None

    record = ContentRecord(
        path=path,
        collection_id=location.collection_id,
        item_index=location.item_index,
        slug=location.slug,
        title=str(title).strip(),
        description=str(description).strip(),
        date=date_value,
        draft=draft,
        weight=weight,
        template=template or None,
        body=parsed.body,
        dialect=parsed.dialect,
        extra={k: v for k, v in fm.items() if k not in _KNOWN_FIELDS},
    )
    return record, problems
