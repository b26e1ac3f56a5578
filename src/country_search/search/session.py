from __future__ import annotations

import asyncio
from typing import Any

from country_search.collector.api_client import APIClientError, CountriesClient
from country_search.search.debounce import Debouncer
from country_search.search.matching import filter_countries, normalize_query
from country_search.transforms.countries import (
    PLACEHOLDER_FLAG_URL,
    CountryRecord,
    NormalizedCountry,
    extract_records,
    normalize_country,
)
from country_search.transforms.seed import build_seed_countries
from country_search.utils.config import (
    FALLBACK_SEED,
    FLAG_DEFAULT_PLACEHOLDER,
    LOADING_CARDS,
    SearchConfig,
)
from country_search.utils.logging import get_logger


logger = get_logger(component="search_session")


class CountrySearchSession:
    """
    In-memory state behind one search page.

    Writers:
    - load() (fetch completion) replaces `countries` wholesale, once.
    - set_query() (input handler) feeds the debounced query.
    Everything else reads.

    After close() a late fetch result is dropped and no state changes.
    """

    def __init__(
        self,
        settings: SearchConfig,
        client: CountriesClient,
        *,
        owns_client: bool = True,
    ) -> None:
        self._settings = settings
        self._client = client
        self._owns_client = owns_client

        self._countries: list[CountryRecord] = build_seed_countries() if settings.fallback == FALLBACK_SEED else []
        self._loading = True
        self._load_started = False
        self._closed = False
        self._fetch_task: asyncio.Task[None] | None = None
        self.last_error: APIClientError | None = None

        self.raw_query = ""
        self._debouncer: Debouncer[str] = Debouncer(settings.debounce_ms / 1000.0, "")

    @property
    def settings(self) -> SearchConfig:
        return self._settings

    @property
    def countries(self) -> list[CountryRecord]:
        return self._countries

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def query(self) -> str:
        return self._debouncer.value

    @property
    def debouncer(self) -> Debouncer[str]:
        return self._debouncer

    @property
    def show_cards(self) -> bool:
        return not self._loading or self._settings.loading_display == LOADING_CARDS

    def start(self) -> asyncio.Task[None]:
        """Schedule the single fetch on the running loop (idempotent)."""
        if self._fetch_task is None:
            self._fetch_task = asyncio.get_running_loop().create_task(self.load())
        return self._fetch_task

    async def wait_loaded(self) -> None:
        if self._fetch_task is not None:
            await self._fetch_task

    async def load(self) -> None:
        if self._load_started or self._closed:
            return
        self._load_started = True

        try:
            data = await self._client.fetch_countries()
            records = extract_records(data, lenient=self._settings.lenient_envelope)
        except APIClientError as e:
            if self._closed:
                return
            self.last_error = e
            logger.error(
                "countries_fetch_failed",
                url=self._client.url,
                error_type=type(e).__name__,
                err=str(e),
                fallback=self._settings.fallback,
                fallback_count=len(self._countries),
            )
        else:
            if self._closed:
                logger.info("countries_fetch_discarded", reason="session_closed", count=len(records))
                return
            self._countries = records
            logger.info("countries_loaded", url=self._client.url, count=len(records))

        self._loading = False

    def set_query(self, raw: str | None) -> None:
        if self._closed:
            return
        self.raw_query = raw or ""
        self._debouncer.push(normalize_query(raw))

    def filtered(self, query: str | None = None) -> list[CountryRecord]:
        """Filter the loaded list by `query`, or by the current debounced query when omitted."""
        q = self.query if query is None else query
        return filter_countries(self._countries, q, self._settings.match_policy)

    def cards(self, query: str | None = None) -> list[NormalizedCountry]:
        flag_default = PLACEHOLDER_FLAG_URL if self._settings.flag_default == FLAG_DEFAULT_PLACEHOLDER else ""
        return [
            normalize_country(
                record,
                idx,
                flag_default=flag_default,
                force_secure=self._settings.force_https,
            )
            for idx, record in enumerate(self.filtered(query))
        ]

    def snapshot(self, query: str | None = None) -> dict[str, Any]:
        cards = self.cards(query) if self.show_cards else []
        return {
            "loading": self._loading,
            "query": self.query if query is None else normalize_query(query),
            "count": len(cards),
            "countries": [c.model_dump() for c in cards],
        }

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()

        task = self._fetch_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if self._owns_client:
            await self._client.aclose()
