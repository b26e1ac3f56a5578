from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable, Sequence

from country_search.transforms.countries import extract_name


class MatchPolicy(str, Enum):
    SUBSTRING = "substring"
    WORD_PREFIX = "word_prefix"


# Separators for word-prefix tokens: whitespace , . ' - ( )
_TOKEN_SPLIT_RE = re.compile(r"[\s,.'()\-]+")


def normalize_query(raw: str | None) -> str:
    return (raw or "").strip().lower()


def substring_match(name: str, query: str) -> bool:
    q = normalize_query(query)
    if not q:
        return True
    return q in name.lower()


def tokenize_name(name: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT_RE.split(name.lower()) if t]


def word_prefix_match(name: str, query: str) -> bool:
    """
    True when any word of `name` starts with `query`.

    "Independent State of Samoa" matches "ind" and "sam", but not "dep".
    """
    q = normalize_query(query)
    if not q:
        return True
    return any(token.startswith(q) for token in tokenize_name(name))


_MATCHERS: dict[MatchPolicy, Callable[[str, str], bool]] = {
    MatchPolicy.SUBSTRING: substring_match,
    MatchPolicy.WORD_PREFIX: word_prefix_match,
}


def get_matcher(policy: MatchPolicy | str) -> Callable[[str, str], bool]:
    return _MATCHERS[MatchPolicy(policy)]


def filter_countries(
    records: Sequence[Any],
    query: str | None,
    policy: MatchPolicy | str = MatchPolicy.SUBSTRING,
) -> list[Any]:
    """
    Records whose extracted name matches `query`, in their original order.

    Returns the same record objects (no copies); an empty query keeps everything.
    """
    q = normalize_query(query)
    if not q:
        return list(records)

    matches = get_matcher(policy)
    return [r for r in records if matches(extract_name(r), q)]
