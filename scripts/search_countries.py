from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    # Allows running from a checkout without `pip install -e .`.
    sys.path.insert(0, str(SRC_DIR))

from country_search.collector.api_client import CountriesClient  # noqa: E402
from country_search.search.matching import MatchPolicy  # noqa: E402
from country_search.search.session import CountrySearchSession  # noqa: E402
from country_search.utils.config import FALLBACK_MODES, load_app_config  # noqa: E402
from country_search.utils.logging import get_logger, setup_logging  # noqa: E402

logger = get_logger(component="search_countries")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch the countries list once and print the names matching QUERY.")
    p.add_argument("query", nargs="?", default="", help="search text (empty: list everything)")
    p.add_argument("--config", default=None, help="path to app.yaml (default: COUNTRY_SEARCH_CONFIG or config/app.yaml)")
    p.add_argument("--policy", choices=[m.value for m in MatchPolicy], default=None)
    p.add_argument("--fallback", choices=list(FALLBACK_MODES), default=None)
    p.add_argument("--json", action="store_true", help="print cards as JSON")
    return p.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    cfg = load_app_config(args.config)
    search_cfg = cfg.search
    if args.policy:
        search_cfg = replace(search_cfg, match_policy=MatchPolicy(args.policy))
    if args.fallback:
        search_cfg = replace(search_cfg, fallback=args.fallback)
    # One-shot run: apply the query immediately.
    search_cfg = replace(search_cfg, debounce_ms=0)

    client = CountriesClient(cfg.api.url, timeout_seconds=cfg.api.timeout_seconds)
    session = CountrySearchSession(search_cfg, client)
    try:
        await session.load()
        session.set_query(args.query)
        cards = session.cards()
    finally:
        await session.close()

    if args.json:
        print(json.dumps([c.model_dump() for c in cards], ensure_ascii=False, indent=2))
    else:
        for c in cards:
            print(c.name)

    logger.info("search_done", query=session.query, matches=len(cards), fetch_failed=session.last_error is not None)
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_logging(fmt="console")
    return asyncio.run(_run(_parse_args(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
