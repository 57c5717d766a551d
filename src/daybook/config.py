"""daybook configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (DAYBOOK_CONTENT_ROOT, DAYBOOK_INCLUDE_DRAFTS, DAYBOOK_WORKERS)
  3. Per-project daybook.yaml
  4. Global ~/.daybook/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from daybook.content.models import DEFAULT_TEMPLATE

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".daybook"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
PROJECT_CONFIG_NAME: str = "daybook.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["content", "scan", "output"])

_TRUE_ENV = {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class ContentCfg:
    """Content tree settings (daybook.yaml: content:).

    Attributes:
        root: Directory holding the "day N" folders.
        include_drafts: Preview mode — list draft records as well.
        default_template: Global template fallback.
        lowercase_ids: Lowercase collection ids derived from directory names.
        exclude: Glob patterns (matched against the path relative to root).
    """

    root: str = "."
    include_drafts: bool = False
    default_template: str = DEFAULT_TEMPLATE
    lowercase_ids: bool = False
    exclude: list[str] = field(default_factory=list)


@dataclass
class ScanCfg:
    """Scanner worker pool (daybook.yaml: scan:)."""

    workers: int = 8
    read_timeout: float = 5.0  # seconds per file


@dataclass
class OutputCfg:
    """JSON export settings (daybook.yaml: output:)."""

    path: str = "corpus.json"
    indent: int = 2


@dataclass
class DaybookConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    content: ContentCfg = field(default_factory=ContentCfg)
    scan: ScanCfg = field(default_factory=ScanCfg)
    output: OutputCfg = field(default_factory=OutputCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def validate_config(cfg: DaybookConfig) -> DaybookConfig:
    """Raise ConfigError if *cfg* holds values the scanner cannot use."""
    if cfg.scan.workers < 1:
        raise ConfigError(f"scan.workers must be >= 1, got {cfg.scan.workers}")
    if cfg.scan.read_timeout <= 0:
        raise ConfigError(f"scan.read_timeout must be > 0, got {cfg.scan.read_timeout}")
    if not cfg.content.default_template.strip():
        raise ConfigError("content.default_template must not be empty")
    if cfg.output.indent < 0:
        raise ConfigError(f"output.indent must be >= 0, got {cfg.output.indent}")
    return cfg


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_ENV
    return bool(value)


def _cfg_from_dict(data: dict[str, Any]) -> DaybookConfig:
    """Build a *DaybookConfig* from a merged raw YAML dict."""
    cfg = DaybookConfig()

    try:
        if "content" in data:
            c = data["content"] or {}
            exclude = c.get("exclude", cfg.content.exclude) or []
            if isinstance(exclude, str):
                exclude = [exclude]
            cfg.content = ContentCfg(
                root=str(c.get("root", cfg.content.root)),
                include_drafts=_as_bool(c.get("include_drafts", cfg.content.include_drafts)),
                default_template=str(c.get("default_template", cfg.content.default_template)),
                lowercase_ids=_as_bool(c.get("lowercase_ids", cfg.content.lowercase_ids)),
                exclude=[str(p) for p in exclude],
            )

        if "scan" in data:
            s = data["scan"] or {}
            cfg.scan = ScanCfg(
                workers=int(s.get("workers", cfg.scan.workers)),
                read_timeout=float(s.get("read_timeout", cfg.scan.read_timeout)),
            )

        if "output" in data:
            o = data["output"] or {}
            cfg.output = OutputCfg(
                path=str(o.get("path", cfg.output.path)),
                indent=int(o.get("indent", cfg.output.indent)),
            )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: DaybookConfig) -> DaybookConfig:
    """Apply DAYBOOK_* environment variable overrides (layer 2)."""
    if root := os.environ.get("DAYBOOK_CONTENT_ROOT"):
        cfg.content.root = root
    if drafts := os.environ.get("DAYBOOK_INCLUDE_DRAFTS"):
        cfg.content.include_drafts = _as_bool(drafts)
    if workers := os.environ.get("DAYBOOK_WORKERS"):
        try:
            cfg.scan.workers = int(workers)
        except ValueError as exc:
            raise ConfigError(f"DAYBOOK_WORKERS must be an integer, got {workers!r}") from exc
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse '{path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must contain a YAML mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> DaybookConfig:
    """Load and return a merged *DaybookConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *daybook.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged and validated *DaybookConfig*.

    Raises:
        ConfigError: If a config file cannot be parsed or holds invalid values.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    return validate_config(cfg)


def ensure_project_config(project_dir: Path, content_root: str = ".") -> Path:
    """Create ``daybook.yaml`` in *project_dir* with defaults if it does not exist.

    Returns:
        Path to the project config file.
    """
    target = project_dir / PROJECT_CONFIG_NAME
    project_dir.mkdir(parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# daybook project configuration.\n"
            "# Environment variables (DAYBOOK_CONTENT_ROOT, DAYBOOK_INCLUDE_DRAFTS,\n"
            "# DAYBOOK_WORKERS) override values in this file.\n"
            "\n"
            "content:\n"
            f"  root: {json.dumps(content_root)}\n"
            "  include_drafts: false\n"
            f"  default_template: {DEFAULT_TEMPLATE}\n"
            "  lowercase_ids: false\n"
            "  exclude: []\n"
            "\n"
            "scan:\n"
            "  workers: 8\n"
            "  read_timeout: 5.0\n"
            "\n"
            "output:\n"
            "  path: corpus.json\n"
            "  indent: 2\n"
        )
        target.write_text(content, encoding="utf-8")

    return target
