from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import os
import yaml
from dotenv import load_dotenv

from country_search.search.matching import MatchPolicy


FALLBACK_EMPTY = "empty"
FALLBACK_SEED = "seed"
FALLBACK_MODES = (FALLBACK_EMPTY, FALLBACK_SEED)

FLAG_DEFAULT_EMPTY = "empty"
FLAG_DEFAULT_PLACEHOLDER = "placeholder"
FLAG_DEFAULTS = (FLAG_DEFAULT_EMPTY, FLAG_DEFAULT_PLACEHOLDER)

LOADING_INDICATOR = "indicator"
LOADING_CARDS = "cards"
LOADING_DISPLAYS = (LOADING_INDICATOR, LOADING_CARDS)


@dataclass(frozen=True)
class APIConfig:
    url: str
    # None: no timeout on the fetch.
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class SearchConfig:
    match_policy: MatchPolicy = MatchPolicy.SUBSTRING
    fallback: str = FALLBACK_EMPTY
    lenient_envelope: bool = True
    flag_default: str = FLAG_DEFAULT_EMPTY
    force_https: bool = False
    debounce_ms: int = 250
    loading_display: str = LOADING_INDICATOR


@dataclass(frozen=True)
class AppConfig:
    api: APIConfig
    search: SearchConfig


def _project_root() -> Path:
    # .../src/country_search/utils/config.py -> project root is 4 parents up.
    return Path(__file__).resolve().parents[3]


def _config_path(path: str | Path | None) -> Path:
    load_dotenv()
    return Path(path or os.getenv("COUNTRY_SEARCH_CONFIG") or (_project_root() / "config" / "app.yaml"))


def _choice(section: dict[str, Any], key: str, allowed: tuple[str, ...], default: str, cfg_path: Path) -> str:
    raw = section.get(key)
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value not in allowed:
        raise ValueError(f"Invalid search.{key}={raw!r} in {cfg_path} (expected one of: {', '.join(allowed)})")
    return value


def parse_search_config(section: dict[str, Any], cfg_path: Path) -> SearchConfig:
    raw_policy = section.get("match_policy") or MatchPolicy.SUBSTRING.value
    try:
        policy = MatchPolicy(str(raw_policy).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in MatchPolicy)
        raise ValueError(f"Invalid search.match_policy={raw_policy!r} in {cfg_path} (expected one of: {allowed})")

    debounce_ms = section.get("debounce_ms", 250)
    try:
        debounce_ms = int(debounce_ms)
    except (TypeError, ValueError):
        raise ValueError(f"search.debounce_ms must be an int in {cfg_path}")
    if debounce_ms < 0:
        raise ValueError(f"search.debounce_ms must be >= 0 in {cfg_path}")

    return SearchConfig(
        match_policy=policy,
        fallback=_choice(section, "fallback", FALLBACK_MODES, FALLBACK_EMPTY, cfg_path),
        lenient_envelope=bool(section.get("lenient_envelope", True)),
        flag_default=_choice(section, "flag_default", FLAG_DEFAULTS, FLAG_DEFAULT_EMPTY, cfg_path),
        force_https=bool(section.get("force_https", False)),
        debounce_ms=debounce_ms,
        loading_display=_choice(section, "loading_display", LOADING_DISPLAYS, LOADING_INDICATOR, cfg_path),
    )


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """
    Load app config from YAML.

    Precedence:
    - explicit `path`
    - env `COUNTRY_SEARCH_CONFIG`
    - project default `config/app.yaml`
    """
    cfg_path = _config_path(path)
    cfg = load_yaml(cfg_path)
    api = cfg.get("api") or {}
    search = cfg.get("search") or {}

    url = api.get("url")
    if not url:
        raise ValueError(f"Missing api.url in {cfg_path}")

    timeout_seconds = api.get("timeout_seconds")

    return AppConfig(
        api=APIConfig(
            url=str(url),
            timeout_seconds=float(timeout_seconds) if timeout_seconds is not None else None,
        ),
        search=parse_search_config(search, cfg_path),
    )


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    return yaml.safe_load(p.read_text(encoding="utf-8")) or {}
