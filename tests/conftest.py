"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


def _write_chapter(root: Path, rel: str, frontmatter: str, body: str = "Body text.\n", dialect: str = "yaml") -> Path:
    """Write a content file under *root* with a YAML or TOML header."""
    delim = "---" if dialect == "yaml" else "+++"
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{delim}\n{frontmatter.strip()}\n{delim}\n\n{body}", encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Small content tree: two days, one TOML file, one draft, one weighted pair."""
    root = tmp_path / "content"
    _write_chapter(root, "day 1/chapter-1.md", "title: One\ndescription: first\ndate: 2024-01-01")
    _write_chapter(root, "day 1/chapter-4.md", "title: Four\ndescription: fourth\ndate: 2024-01-04")
    _write_chapter(root, "day 1/chapter-2.md", "title: Two\ndescription: second\ndate: 2024-01-02")
    _write_chapter(
        root,
        "day 1/chapter-3.md",
        "title: Three\ndescription: wip\ndate: 2024-01-03\ndraft: true",
    )
    _write_chapter(
        root,
        "day 13/chapter-4.md",
        'title = "Thirteen Four"\ndescription = "x"\nweight = 4\ndate = 2024-02-04',
        dialect="toml",
    )
    _write_chapter(
        root,
        "day 13/chapter-5.md",
        "title: Thirteen Five\ndescription: y\nweight: 2\ndate: 2024-02-05\ntemplate: chapter.html",
    )
    _write_chapter(root, "day 2/chapter-1.md", "title: Day Two\ndescription: z\ndate: 2024-01-10")
    return root


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ~/.daybook and DAYBOOK_* variables of the developer out of tests."""
    missing = tmp_path_factory.mktemp("home") / "config.yaml"
    monkeypatch.setattr("daybook.config._GLOBAL_CONFIG_PATH", missing)
    for name in ("DAYBOOK_CONTENT_ROOT", "DAYBOOK_INCLUDE_DRAFTS", "DAYBOOK_WORKERS"):
        monkeypatch.delenv(name, raising=False)
