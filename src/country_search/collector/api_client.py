from __future__ import annotations

from typing import Any

import httpx


class APIClientError(Exception):
    pass


class APITimeoutError(APIClientError):
    pass


class APIServerError(APIClientError):
    pass


class ResponseDecodeError(APIClientError):
    pass


class ResponseShapeError(APIClientError):
    pass


class APIUnexpectedStatusError(APIClientError):
    def __init__(self, status_code: int, body_text: str | None = None) -> None:
        super().__init__(f"Unexpected status code: {status_code}")
        self.status_code = status_code
        self.body_text = body_text


DEFAULT_COUNTRIES_URL = "https://countries-search-data-prod-812920491762.asia-south1.run.app/countries"


class CountriesClient:
    """
    Countries API client
    - GET-only, single fixed URL
    - No params, no custom headers, no auth
    - Async httpx
    """

    def __init__(
        self,
        url: str = DEFAULT_COUNTRIES_URL,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("Missing countries API url")

        self._url = url
        # None disables the timeout entirely; the fetch runs until the server answers.
        self._timeout = float(timeout_seconds) if timeout_seconds is not None else None

        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers={},
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> CountriesClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def fetch_countries(self) -> Any:
        """
        One GET against the configured URL. Returns the decoded JSON body as-is;
        shape checks belong to transforms.countries.extract_records.
        """
        try:
            resp = await self._client.get(self._url)
        except httpx.TimeoutException as e:
            raise APITimeoutError("Request timeout") from e
        except httpx.RequestError as e:
            raise APIClientError(f"Request error: {e}") from e

        if 200 <= resp.status_code < 300:
            try:
                return resp.json()
            except ValueError as e:
                raise ResponseDecodeError("Failed to parse JSON") from e

        if resp.status_code >= 500:
            raise APIServerError(f"API server error ({resp.status_code})")

        raise APIUnexpectedStatusError(resp.status_code, body_text=resp.text)
