"""qualcode configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (QUALCODE_RELIABILITY_UNIT, QUALCODE_LOG_LEVEL)
  3. Per-project qualcode.yaml  (next to the project file)
  4. Global ~/.qualcode/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from qualcode.segment import UNITS

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".qualcode"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "qualcode.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["autocode", "reliability", "report", "words", "logging"]
)

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class AutoCodeCfg:
    """Auto-coding preview settings (qualcode.yaml: autocode:)."""

    preview_limit: int = 50
    context_chars: int = 20


@dataclass
class ReliabilityCfg:
    """Intercoder reliability settings (qualcode.yaml: reliability:)."""

    unit: str = "paragraph"


@dataclass
class ReportCfg:
    """Report and codebook export settings (qualcode.yaml: report:).

    Attributes:
        examples_per_code: Example excerpts listed per code in the codebook.
        excerpt_chars: Characters kept from each example excerpt.
        decimals: Decimal places for coverage percentages.
    """

    examples_per_code: int = 3
    excerpt_chars: int = 80
    decimals: int = 1


@dataclass
class WordsCfg:
    """Word frequency settings (qualcode.yaml: words:)."""

    min_length: int = 3
    max_words: int = 100
    stop_words: list[str] = field(default_factory=list)


@dataclass
class LoggingCfg:
    level: str = "WARNING"


@dataclass
class QualcodeConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    autocode: AutoCodeCfg = field(default_factory=AutoCodeCfg)
    reliability: ReliabilityCfg = field(default_factory=ReliabilityCfg)
    report: ReportCfg = field(default_factory=ReportCfg)
    words: WordsCfg = field(default_factory=WordsCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)

    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.logging.level)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}', ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


def _positive_int(section: str, key: str, value: Any, *, allow_zero: bool = False) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{section}.{key} must be an integer, got {value!r}") from None
    if number < 0 or (number == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise ConfigError(f"{section}.{key} must be {bound}, got {number}")
    return number


def _validate_unit(unit: str) -> str:
    if unit not in UNITS:
        raise ConfigError(
            f"reliability.unit must be one of {', '.join(UNITS)}, got '{unit}'"
        )
    return unit


def _validate_level(level: str) -> str:
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(_LOG_LEVELS)}, got '{level}'"
        )
    return level


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


def _cfg_from_dict(data: dict[str, Any]) -> QualcodeConfig:
    """Build a *QualcodeConfig* from a merged raw YAML dict."""
    cfg = QualcodeConfig()

    if "autocode" in data:
        a = data["autocode"] or {}
        cfg.autocode = AutoCodeCfg(
            preview_limit=_positive_int(
                "autocode", "preview_limit", a.get("preview_limit", cfg.autocode.preview_limit)
            ),
            context_chars=_positive_int(
                "autocode", "context_chars",
                a.get("context_chars", cfg.autocode.context_chars), allow_zero=True,
            ),
        )

    if "reliability" in data:
        r = data["reliability"] or {}
        cfg.reliability = ReliabilityCfg(
            unit=_validate_unit(str(r.get("unit", cfg.reliability.unit))),
        )

    if "report" in data:
        rp = data["report"] or {}
        cfg.report = ReportCfg(
            examples_per_code=_positive_int(
                "report", "examples_per_code",
                rp.get("examples_per_code", cfg.report.examples_per_code), allow_zero=True,
            ),
            excerpt_chars=_positive_int(
                "report", "excerpt_chars", rp.get("excerpt_chars", cfg.report.excerpt_chars)
            ),
            decimals=_positive_int(
                "report", "decimals", rp.get("decimals", cfg.report.decimals), allow_zero=True
            ),
        )

    if "words" in data:
        w = data["words"] or {}
        stop_words = w.get("stop_words", cfg.words.stop_words) or []
        if not isinstance(stop_words, list):
            raise ConfigError(f"words.stop_words must be a list, got {stop_words!r}")
        cfg.words = WordsCfg(
            min_length=_positive_int("words", "min_length", w.get("min_length", cfg.words.min_length)),
            max_words=_positive_int("words", "max_words", w.get("max_words", cfg.words.max_words)),
            stop_words=[str(s).lower() for s in stop_words],
        )

    if "logging" in data:
        lg = data["logging"] or {}
        cfg.logging = LoggingCfg(level=_validate_level(str(lg.get("level", cfg.logging.level))))

    return cfg


def _apply_env_overrides(cfg: QualcodeConfig) -> QualcodeConfig:
    """Apply QUALCODE_* environment variable overrides (layer 2)."""
    if unit := os.environ.get("QUALCODE_RELIABILITY_UNIT"):
        cfg.reliability.unit = _validate_unit(unit)
    if level := os.environ.get("QUALCODE_LOG_LEVEL"):
        cfg.logging.level = _validate_level(level)
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> QualcodeConfig:
    """Load and return a merged *QualcodeConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *qualcode.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *QualcodeConfig* with env var overrides applied.

    Raises:
        ConfigError: If a file is not a YAML mapping or holds an invalid value.
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
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    return _apply_env_overrides(cfg)


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.qualcode/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Args:
        global_config_path: Override path (for testing).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# qualcode global configuration.\n"
            "# Per-project qualcode.yaml files override these values.\n"
            "\n"
            "autocode:\n"
            "  preview_limit: 50\n"
            "  context_chars: 20\n"
            "\n"
            "reliability:\n"
            "  unit: paragraph   # paragraph | sentence\n"
            "\n"
            "report:\n"
            "  examples_per_code: 3\n"
            "  excerpt_chars: 80\n"
            "  decimals: 1\n"
            "\n"
            "words:\n"
            "  min_length: 3\n"
            "  max_words: 100\n"
            "  stop_words: []\n"
            "\n"
            "logging:\n"
            "  level: WARNING\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
