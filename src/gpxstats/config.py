"""
gpxstats configuration loader

This module centralizes *all* configuration handling for gpxstats.

Design goals:
- Keep scripts Unix-friendly: CLI flags override everything.
- Provide sensible defaults if no config exists.
- Allow per-machine config without committing personal paths:
    ~/.config/gpxstats/config.toml
- Allow repo-local config:
    <repo_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by each script)
2) Environment variables (GPXSTATS_*)
3) User config: ~/.config/gpxstats/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` otherwise.

Only the CLI reads configuration. Route and Track take their granularity as a
plain constructor argument and never consult this module.
"""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gpxstats.errors import ConfigError

DEFAULT_GRANULARITY_M = 5.0
ANALYZE_KINDS = ("track", "route")


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise a ConfigError
      with a clear, user-facing message.

    Rationale:
    - Missing config files are normal and expected.
    - Malformed config files indicate user intent and should fail loudly.
    """
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        # Wrap parsing errors with file context for usability
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "analyze.granularity")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str):
        return Path(v).expanduser()
    return None


def _as_bool(v: Any, default: bool) -> bool:
    """
    Coerce loosely-typed config values into booleans.

    Accepts common truthy / falsy representations so that TOML, environment
    variables and user overrides all behave consistently.
    """
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    return default


def as_granularity(v: Any, origin: str) -> float:
    """
    Coerce a granularity value (metres) into a finite, non-negative float.

    Unlike the other coercions this one raises: a wrong granularity silently
    replaced by the default would change every merge decision.
    """
    if isinstance(v, bool):
        raise ConfigError(f"Invalid granularity from {origin}: {v!r}")
    try:
        g = float(v)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid granularity from {origin}: {v!r}") from None
    if not math.isfinite(g) or g < 0:
        raise ConfigError(f"Granularity from {origin} must be a finite value >= 0, got {g}")
    return g


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the gpxstats repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_work_root() -> Path:
    return Path.home() / "GPS" / "_work"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalyzeConfig:
    """
    Defaults for GPX analysis runs.

    granularity: merge threshold in metres
    include_rests: whether average speed counts resting time
    kind: "track" (<trk>) or "route" (<rte>)
    """

    granularity: float = DEFAULT_GRANULARITY_M
    include_rests: bool = True
    kind: str = "track"


@dataclass(frozen=True)
class GPXStatsPaths:
    work_root: Path


@dataclass(frozen=True)
class GPXStatsConfig:
    """
    Fully merged gpxstats configuration.

    Attributes:
    - paths: resolved filesystem layout
    - analyze: analysis defaults
    - source: provenance map showing where each value came from
    """

    paths: GPXStatsPaths
    analyze: AnalyzeConfig
    source: dict[str, str]


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GPXStatsConfig:
    """
    Load, merge, and normalize all gpxstats configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpxstats" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    work_root = default_work_root()
    granularity = DEFAULT_GRANULARITY_M
    include_rests = True
    kind = "track"

    # Track provenance for debugging and audits
    src = {
        "paths.work_root": "default",
        "analyze.granularity": "default",
        "analyze.include_rests": "default",
        "analyze.kind": "default",
    }

    # ------------------------------------------------------------------
    # Repo + user overrides (user wins)
    # ------------------------------------------------------------------
    for cfg, label, cfg_path in (
        (repo_cfg, "repo", repo_config_path),
        (user_cfg, "user", user_config_path),
    ):
        origin = f"{label}:{cfg_path}"

        v = _as_path(_deep_get(cfg, "paths.work_root"))
        if v is not None:
            work_root = v
            src["paths.work_root"] = origin

        v = _deep_get(cfg, "analyze.granularity")
        if v is not None:
            granularity = as_granularity(v, origin)
            src["analyze.granularity"] = origin

        v = _deep_get(cfg, "analyze.include_rests")
        if v is not None:
            include_rests = _as_bool(v, include_rests)
            src["analyze.include_rests"] = origin

        v = _deep_get(cfg, "analyze.kind")
        if v is not None:
            if str(v) not in ANALYZE_KINDS:
                raise ConfigError(f"Invalid analyze.kind from {origin}: {v!r}")
            kind = str(v)
            src["analyze.kind"] = origin

    # Environment variable overrides (highest non-CLI precedence)
    env_root = os.environ.get("GPXSTATS_WORK_ROOT")
    if env_root:
        work_root = Path(env_root).expanduser()
        src["paths.work_root"] = "env:GPXSTATS_WORK_ROOT"

    env_gran = os.environ.get("GPXSTATS_GRANULARITY")
    if env_gran:
        granularity = as_granularity(env_gran, "env:GPXSTATS_GRANULARITY")
        src["analyze.granularity"] = "env:GPXSTATS_GRANULARITY"

    return GPXStatsConfig(
        paths=GPXStatsPaths(work_root=work_root.expanduser()),
        analyze=AnalyzeConfig(
            granularity=granularity,
            include_rests=include_rests,
            kind=kind,
        ),
        source=src,
    )
