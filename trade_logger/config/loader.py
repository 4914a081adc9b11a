"""
Environment + JSON config loader for the trade logger.
"""

from __future__ import annotations

import json
import os
from dataclasses import fields, replace
from functools import lru_cache
from pathlib import Path

import soupsieve

from trade_logger.config.models import MAX_RAW_TEXT_LIMIT, TradeLoggerSettings, TradeSelectors


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _project_root() / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


def read_trade_logger_settings() -> TradeLoggerSettings:
    """
    Build settings from environment variables, falling back to defaults.
    """

    load_env_files()
    selectors_path = _get_str_env("TRADE_LOGGER_SELECTORS_PATH", "")
    return TradeLoggerSettings(
        debounce_seconds=max(
            0.0,
            _get_float_env("TRADE_LOGGER_DEBOUNCE_SECONDS", 0.2),
        ),
        load_more_interval_seconds=max(
            0.1,
            _get_float_env("TRADE_LOGGER_LOAD_MORE_INTERVAL_SECONDS", 3.0),
        ),
        raw_text_limit=min(
            MAX_RAW_TEXT_LIMIT,
            max(1, _get_int_env("TRADE_LOGGER_RAW_TEXT_LIMIT", MAX_RAW_TEXT_LIMIT)),
        ),
        enabled_on_start=_get_bool_env("TRADE_LOGGER_ENABLED", True),
        max_seen_keys=max(0, _get_int_env("TRADE_LOGGER_MAX_SEEN_KEYS", 0)),
        selectors_path=str(_resolve_config_path(selectors_path)) if selectors_path else None,
        log_level=_get_str_env("TRADE_LOGGER_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_trade_logger_settings() -> TradeLoggerSettings:
    """
    Return cached trade logger settings from environment variables.
    """

    return read_trade_logger_settings()


def load_selector_config(*, config_path: str) -> TradeSelectors:
    """
    Load selector overrides from a JSON file on top of the built-in defaults.
    """

    path = _resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Selector config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw_data, dict):
        raise ValueError("Invalid selector config: root must be a JSON object.")

    known = {item.name for item in fields(TradeSelectors)}
    overrides: dict[str, list[str]] = {}
    for key, value in raw_data.items():
        if not isinstance(key, str):
            continue
        name = key.strip().lower()
        if name not in known:
            continue
        selector_list = _normalize_selector_list(value)
        _validate_selectors(name, selector_list)
        if selector_list:
            overrides[name] = selector_list

    return replace(TradeSelectors(), **overrides)


def load_selectors(settings: TradeLoggerSettings) -> TradeSelectors:
    """
    Return configured selectors, or the defaults when no file is configured.
    """

    if not settings.selectors_path:
        return TradeSelectors()
    return load_selector_config(config_path=settings.selectors_path)


def _normalize_selector_list(value: object) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return []


def _validate_selectors(name: str, selectors: list[str]) -> None:
    for selector in selectors:
        try:
            soupsieve.compile(selector)
        except soupsieve.SelectorSyntaxError as exc:
            raise ValueError(f"Invalid selector for '{name}': {selector!r}") from exc
