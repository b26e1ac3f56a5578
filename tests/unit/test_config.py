from __future__ import annotations

from pathlib import Path

import pytest

from country_search.search.matching import MatchPolicy
from country_search.utils.config import load_app_config


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "app.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults(tmp_path: Path):
    cfg = load_app_config(_write(tmp_path, "api:\n  url: https://x/countries\n"))
    assert cfg.api.url == "https://x/countries"
    assert cfg.api.timeout_seconds is None
    assert cfg.search.match_policy is MatchPolicy.SUBSTRING
    assert cfg.search.fallback == "empty"
    assert cfg.search.lenient_envelope is True
    assert cfg.search.flag_default == "empty"
    assert cfg.search.force_https is False
    assert cfg.search.debounce_ms == 250
    assert cfg.search.loading_display == "indicator"


def test_full_config(tmp_path: Path):
    cfg = load_app_config(
        _write(
            tmp_path,
            """
api:
  url: https://x/countries
  timeout_seconds: 5
search:
  match_policy: WORD_PREFIX
  fallback: seed
  lenient_envelope: false
  flag_default: placeholder
  force_https: true
  debounce_ms: 0
  loading_display: cards
""",
        )
    )
    assert cfg.api.timeout_seconds == 5.0
    assert cfg.search.match_policy is MatchPolicy.WORD_PREFIX
    assert cfg.search.fallback == "seed"
    assert cfg.search.lenient_envelope is False
    assert cfg.search.flag_default == "placeholder"
    assert cfg.search.force_https is True
    assert cfg.search.debounce_ms == 0
    assert cfg.search.loading_display == "cards"


def test_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    p = _write(tmp_path, "api:\n  url: https://env/countries\n")
    monkeypatch.setenv("COUNTRY_SEARCH_CONFIG", str(p))
    assert load_app_config().api.url == "https://env/countries"


def test_missing_url(tmp_path: Path):
    with pytest.raises(ValueError, match="api.url"):
        load_app_config(_write(tmp_path, "search:\n  fallback: seed\n"))


@pytest.mark.parametrize(
    "search",
    [
        "match_policy: fuzzy",
        "fallback: cache",
        "flag_default: emoji",
        "loading_display: spinner",
        "debounce_ms: soon",
        "debounce_ms: -1",
    ],
)
def test_invalid_search_values(tmp_path: Path, search: str):
    with pytest.raises(ValueError):
        load_app_config(_write(tmp_path, f"api:\n  url: https://x\nsearch:\n  {search}\n"))


def test_project_default_config_loads(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("COUNTRY_SEARCH_CONFIG", raising=False)
    cfg = load_app_config()
    assert cfg.api.url.startswith("https://")
