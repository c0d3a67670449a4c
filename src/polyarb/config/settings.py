"""TOML config: default.toml plus an optional profile overlay, typed accessors, logging setup."""

from __future__ import annotations

import logging
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

# Searched in order when no --config-dir is given
_SEARCH_DIRS = (
    Path.cwd() / "config",
    Path(__file__).resolve().parent.parent.parent.parent / "config",
)
SECTIONS = ("polymarket", "fetch", "scan", "alerts", "logging")


def _read(path: Path) -> dict[str, Any]:
    return tomllib.loads(path.read_text(encoding="utf-8"))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base without mutating either."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = _deep_merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    return next((d for d in _SEARCH_DIRS if d.exists()), _SEARCH_DIRS[-1])


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Merged config dict; {} without default.toml, default alone for an unknown profile."""
    root = _find_config_dir(config_dir)
    default_path = root / "default.toml"
    if not default_path.exists():
        return {}
    merged = _read(default_path)
    overlay_path = root / f"{profile}.toml" if profile else None
    if overlay_path is not None and overlay_path.exists():
        merged = _deep_merge(merged, _read(overlay_path))
    return merged


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    return Settings.from_dict(load_config(profile, config_dir))


class Settings:
    """Sectioned settings; each accessor falls back to its default when a key is absent."""

    def __init__(self, sections: dict[str, dict[str, Any]] | None = None):
        sections = sections or {}
        for name in SECTIONS:
            setattr(self, name, dict(sections.get(name) or {}))

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls({name: raw.get(name) for name in SECTIONS})

    def _get(self, section: str, key: str, default: Any, cast: Callable[[Any], Any]) -> Any:
        return cast(getattr(self, section).get(key, default))

    # [polymarket]
    @property
    def gamma_api_base(self) -> str:
        return self._get("polymarket", "gamma_api_base", "https://gamma-api.polymarket.com", str).rstrip("/")

    # [fetch]
    @property
    def page_size(self) -> int:
        return self._get("fetch", "page_size", 500, int)

    @property
    def max_pages(self) -> int:
        return self._get("fetch", "max_pages", 50, int)

    @property
    def timeout_sec(self) -> float:
        return self._get("fetch", "timeout_sec", 30.0, float)

    @property
    def max_retries(self) -> int:
        return self._get("fetch", "max_retries", 3, int)

    @property
    def retry_base_delay_sec(self) -> float:
        return self._get("fetch", "retry_base_delay_sec", 1.0, float)

    # [scan]
    @property
    def scan_limit(self) -> int:
        return self._get("scan", "limit", 50, int)

    @property
    def scan_min_liquidity(self) -> float:
        return self._get("scan", "min_liquidity", 50, float)

    @property
    def arb_limit(self) -> int:
        return self._get("scan", "arb_limit", 200, int)

    @property
    def report_top(self) -> int:
        return self._get("scan", "report_top", 10, int)

    # [alerts]
    @property
    def alert_min_edge(self) -> float:
        return self._get("alerts", "min_edge", 20, float)

    @property
    def alert_min_volume(self) -> float:
        return self._get("alerts", "min_volume", 10000, float)

    @property
    def alert_session_key(self) -> str:
        return self._get("alerts", "session_key", "", str)

    # [logging]
    @property
    def logging_level(self) -> str:
        return self._get("logging", "level", "INFO", str).upper()

    @property
    def logging_format(self) -> str:
        return self._get("logging", "format", "console", str)

    @property
    def logging_level_num(self) -> int:
        return logging.getLevelName(self.logging_level) if self.logging_level in _LEVELS else logging.INFO


_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(settings: Settings) -> None:
    """Configure structlog once at CLI entry. Logs go to stderr so stdout stays parseable."""
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.logging_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
