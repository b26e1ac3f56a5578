from __future__ import annotations

import pycountry

from country_search.transforms.countries import CountryRecord


FLAG_PNG_URL = "https://flagcdn.com/w320/{code}.png"
FLAG_SVG_URL = "https://flagcdn.com/{code}.svg"

# Countries served by the upstream API but absent from ISO 3166-1.
EXTRA_COUNTRIES: tuple[dict[str, str], ...] = (
    {"alpha_2": "XK", "alpha_3": "XKX", "numeric": "", "name": "Kosovo", "official_name": "Republic of Kosovo"},
)


def _seed_record(
    *,
    alpha_2: str,
    alpha_3: str,
    numeric: str,
    name: str,
    official_name: str,
) -> CountryRecord:
    code = alpha_2.lower()
    record: CountryRecord = {
        "name": {"common": name, "official": official_name},
        "cca2": alpha_2,
        "cca3": alpha_3,
        "flags": {
            "png": FLAG_PNG_URL.format(code=code),
            "svg": FLAG_SVG_URL.format(code=code),
        },
    }
    if numeric:
        record["ccn3"] = numeric
    return record


def build_seed_countries() -> list[CountryRecord]:
    """
    Static fallback list in the restcountries v3 shape.

    Pure: builds fresh dicts on every call from pycountry's ISO 3166-1 data,
    plus EXTRA_COUNTRIES, sorted by common name.
    """
    rows: list[CountryRecord] = []
    for c in pycountry.countries:
        common = getattr(c, "common_name", None) or c.name
        official = getattr(c, "official_name", None) or c.name
        rows.append(
            _seed_record(
                alpha_2=c.alpha_2,
                alpha_3=c.alpha_3,
                numeric=getattr(c, "numeric", "") or "",
                name=common,
                official_name=official,
            )
        )

    known = {r["cca2"] for r in rows}
    for extra in EXTRA_COUNTRIES:
        if extra["alpha_2"] in known:
            continue
        rows.append(_seed_record(**extra))

    rows.sort(key=lambda r: r["name"]["common"].casefold())
    return rows
