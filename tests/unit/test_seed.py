from __future__ import annotations

from country_search.transforms.countries import extract_flag_url, extract_key, extract_name
from country_search.transforms.seed import build_seed_countries


def test_seed_has_at_least_250_countries():
    rows = build_seed_countries()
    assert len(rows) >= 250


def test_seed_is_deterministic_and_fresh():
    a = build_seed_countries()
    b = build_seed_countries()
    assert a == b
    assert a is not b
    assert a[0] is not b[0]


def test_seed_records_normalize_cleanly():
    rows = build_seed_countries()
    names = [extract_name(r) for r in rows]
    assert all(names)
    assert names == sorted(names, key=str.casefold)
    assert "Kosovo" in names
    assert all(extract_flag_url(r).startswith("https://") for r in rows)
    keys = [extract_key(r, i) for i, r in enumerate(rows)]
    assert len(set(keys)) == len(keys)
