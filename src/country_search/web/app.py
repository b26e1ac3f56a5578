from __future__ import annotations

from contextlib import asynccontextmanager
from html import escape
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from country_search.collector.api_client import CountriesClient
from country_search.search.session import CountrySearchSession
from country_search.transforms.countries import NormalizedCountry
from country_search.utils.config import AppConfig, load_app_config
from country_search.utils.logging import get_logger


logger = get_logger(component="web")

SEARCH_PLACEHOLDER = "Search countries..."
LOADING_TEXT = "Loading..."

_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Country Flags</title>
<style>
  main {{ max-width: 1100px; margin: 0 auto; padding: 24px 16px; font-family: system-ui, sans-serif; }}
  .grid {{ display: flex; flex-wrap: wrap; gap: 16px; }}
  .countryCard {{ width: 180px; border: 1px solid #e5e7eb; border-radius: 10px; overflow: hidden;
                  display: flex; flex-direction: column; align-items: center; }}
  .countryCard img {{ width: 100%; height: 110px; object-fit: cover; }}
  .countryCard .name {{ padding: 10px 12px; text-align: center; font-weight: 600; font-size: 14px; }}
</style>
</head>
<body>
<main>
<h1>Country Flags</h1>
<form method="get" action="/">
<input type="text" name="q" value="{query}" placeholder="{placeholder}" aria-label="Search countries">
</form>
{body}
</main>
</body>
</html>
"""


def render_card(card: NormalizedCountry) -> str:
    name = escape(card.name)
    img = ""
    if card.flag_url:
        img = f'<img src="{escape(card.flag_url)}" alt="Flag of {name}" loading="lazy">'
    return (
        f'<div class="countryCard" role="listitem" data-key="{escape(card.key)}">'
        f'{img}<div class="name">{name}</div></div>'
    )


def render_page(session: CountrySearchSession, raw_query: str) -> str:
    parts: list[str] = []
    if session.loading:
        parts.append(f'<div class="loading">{LOADING_TEXT}</div>')
    if session.show_cards:
        cards = "".join(render_card(c) for c in session.cards(raw_query))
        parts.append(f'<section class="grid" role="list">{cards}</section>')
    return _PAGE.format(
        query=escape(raw_query),
        placeholder=escape(SEARCH_PLACEHOLDER),
        body="\n".join(parts),
    )


def create_app(config: AppConfig | None = None, *, client: CountriesClient | None = None) -> FastAPI:
    """
    Build the search page app. One fetch is started at startup; the session
    is closed at shutdown, along with the client unless the caller passed one in.

    Run with: uvicorn --factory country_search.web.app:create_app
    """
    cfg = config or load_app_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        http = client or CountriesClient(cfg.api.url, timeout_seconds=cfg.api.timeout_seconds)
        session = CountrySearchSession(cfg.search, http, owns_client=client is None)
        app.state.session = session
        session.start()
        logger.info(
            "search_session_started",
            url=http.url,
            match_policy=cfg.search.match_policy.value,
            fallback=cfg.search.fallback,
        )
        try:
            yield
        finally:
            await session.close()
            logger.info("search_session_closed")

    app = FastAPI(title="country-search", version="v1", lifespan=lifespan)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request, q: str = "") -> HTMLResponse:
        session: CountrySearchSession = request.app.state.session
        return HTMLResponse(render_page(session, q))

    @app.get("/v1/countries")
    async def countries(request: Request, q: str = "") -> dict[str, Any]:
        session: CountrySearchSession = request.app.state.session
        return session.snapshot(q)

    @app.get("/v1/health")
    async def health(request: Request) -> dict[str, Any]:
        session: CountrySearchSession = request.app.state.session
        err = session.last_error
        return {
            "ok": True,
            "loading": session.loading,
            "loaded": len(session.countries),
            "error": f"{type(err).__name__}: {err}" if err is not None else None,
        }

    return app
