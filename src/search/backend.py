"""
HTTP client for the companies search backend.

The backend exposes two GET endpoints taking ``page``/``pageSize`` plus
either ``conditions`` (JSON array) or ``prompt`` (free text), and answers
with a result envelope.  Non-2xx responses and network failures are
raised as ``SearchBackendError``; classifying them is the dispatcher's job.
"""
from __future__ import annotations

from typing import Any, Protocol

import httpx

from src.core.config import get_settings
from src.core.logging import get_logger
from src.search.errors import SearchBackendError

logger = get_logger(__name__)

CONDITIONS_ENDPOINT = "/api/companies/external/conditions"
PROMPT_ENDPOINT = "/api/companies/external/search"

_HEADERS = {"Accept": "application/json", "User-Agent": "MarketIntelSearch/1.0"}


class SearchBackend(Protocol):
    def fetch(self, endpoint: str, params: dict[str, str]) -> Any: ...


def _error_message(resp: httpx.Response) -> str:
    """Pull the server's own message out of an error response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return resp.text.strip() or resp.reason_phrase


class HttpSearchBackend:
    """``SearchBackend`` over a shared ``httpx.Client``."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ):
        settings = get_settings()
        self._client = client or httpx.Client(
            base_url=base_url or settings.search_api_base_url,
            timeout=timeout if timeout is not None else settings.search_timeout_seconds,
            headers=_HEADERS,
        )

    def fetch(self, endpoint: str, params: dict[str, str]) -> Any:
        logger.info("GET %s params=%s", endpoint, sorted(params))
        try:
            resp = self._client.get(endpoint, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Search backend unreachable: %s", exc)
            raise SearchBackendError(str(exc) or type(exc).__name__) from exc

        if resp.is_error:
            message = _error_message(resp)
            logger.warning("Search backend returned %d: %s", resp.status_code, message)
            raise SearchBackendError(message, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise SearchBackendError("Search backend returned a non-JSON body", resp.status_code) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpSearchBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_backend: HttpSearchBackend | None = None


def get_backend() -> HttpSearchBackend:
    """Return the shared backend client (lazy-created)."""
    global _backend
    if _backend is None:
        _backend = HttpSearchBackend()
        logger.info("Search backend client created  base_url=%s", get_settings().search_api_base_url)
    return _backend
