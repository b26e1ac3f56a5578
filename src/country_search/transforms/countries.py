from __future__ import annotations

from typing import Any, Callable, Iterable

from pydantic import BaseModel

from country_search.collector.api_client import ResponseShapeError


CountryRecord = dict[str, Any]

# 1x1 transparent GIF, used when the flag default is "placeholder".
PLACEHOLDER_FLAG_URL = "data:image/gif;base64,R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"

UNKNOWN_NAME = "Unknown"

# Field chains below are a compatibility contract with the shapes the upstream
# API has served over time. Order matters: the first non-empty hit wins.
#
# Name:
#   common           flattened payloads   {"common": "Canada"}
#   name.common      restcountries v3     {"name": {"common": "Canada", ...}}
#   name.official    restcountries v3, official only
#   name             restcountries v2     {"name": "Canada"} (string only)
#   countryName / officialName / commonName   ad-hoc mirrors
NAME_FIELDS: tuple[str, ...] = (
    "common",
    "name.common",
    "name.official",
    "name",
    "countryName",
    "officialName",
    "commonName",
)

# Flag (image URL only):
#   flags.png        restcountries v3
#   flags.svg        restcountries v3, svg only
#   flag             flattened payloads   {"flag": "https://.../ca.png"}
#                    (restcountries v3 puts an emoji here; non-URL values are skipped)
#   flagUrl / flagPNG / png   ad-hoc mirrors
FLAG_FIELDS: tuple[str, ...] = (
    "flags.png",
    "flags.svg",
    "flag",
    "flagUrl",
    "flagPNG",
    "png",
)

# Key: alpha-3, alpha-2, numeric, IOC committee code, then a generic `code`.
KEY_FIELDS: tuple[str, ...] = (
    "cca3",
    "cca2",
    "ccn3",
    "cioc",
    "code",
)

URL_PREFIXES: tuple[str, ...] = ("https://", "http://", "data:", "/")

ENVELOPE_FIELDS: tuple[str, ...] = ("countries", "data")


class NormalizedCountry(BaseModel):
    name: str
    flag_url: str
    key: str


def lookup(record: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings. Missing steps yield None."""
    cur = record
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur


def _first_string(
    record: Any,
    fields: Iterable[str],
    accept: Callable[[str], bool] | None = None,
) -> str | None:
    for path in fields:
        value = lookup(record, path)
        if not isinstance(value, str) or not value.strip():
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


def _first_code(record: Any, fields: Iterable[str]) -> str | None:
    for path in fields:
        value = lookup(record, path)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value
    return None


def extract_records(data: Any, *, lenient: bool = True) -> list[CountryRecord]:
    """
    Pull the list of country records out of a decoded response body.

    Strict mode accepts only a top-level list and raises ResponseShapeError
    otherwise. Lenient mode also looks under `countries` / `data` and falls
    back to an empty list.
    """
    if isinstance(data, list):
        return list(data)

    if not lenient:
        raise ResponseShapeError(f"Expected a JSON list, got {type(data).__name__}")

    if isinstance(data, dict):
        for field in ENVELOPE_FIELDS:
            inner = data.get(field)
            if isinstance(inner, list):
                return list(inner)
    return []


def extract_name(record: Any) -> str:
    return _first_string(record, NAME_FIELDS) or ""


def display_name(record: Any) -> str:
    return extract_name(record) or UNKNOWN_NAME


def looks_like_url(value: str) -> bool:
    # "//cdn/x.png" (scheme-relative) is covered by the "/" prefix.
    return value.strip().lower().startswith(URL_PREFIXES)


def force_https(url: str) -> str:
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


def extract_flag_url(record: Any, *, default: str = "", force_secure: bool = False) -> str:
    url = _first_string(record, FLAG_FIELDS, looks_like_url)
    if url is None:
        return default
    return force_https(url) if force_secure else url


def extract_key(record: Any, index: int) -> str:
    code = _first_code(record, KEY_FIELDS)
    if code is not None:
        return code
    return f"{display_name(record)}-{index}"


def normalize_country(
    record: Any,
    index: int,
    *,
    flag_default: str = "",
    force_secure: bool = False,
) -> NormalizedCountry:
    return NormalizedCountry(
        name=display_name(record),
        flag_url=extract_flag_url(record, default=flag_default, force_secure=force_secure),
        key=extract_key(record, index),
    )
