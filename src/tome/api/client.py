from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from tome.api.errors import (
    BookNotFoundError,
    ContentUnavailableError,
    NotAuthenticatedError,
    TomeApiError,
)
from tome.config import AppConfig
from tome.library.models import Book, PageContent, ReadingProgress

log = logging.getLogger(__name__)


class TomeClient:
    """Async client for the Tome backend: books, content and the user profile."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._config.api_base_url.rstrip("/")

    @property
    def is_authenticated(self) -> bool:
        return self._config.is_authenticated

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.request_timeout)
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        if not self._config.auth_token:
            raise NotAuthenticatedError("No user logged in")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.auth_token}",
        }

    # ── Books ──────────────────────────────────────────────

    async def get_book(self, book_id: str) -> Book:
        """Fetch book metadata, preferring the endpoint that carries fullTextUrl."""
        try:
            data = await self._get_json(f"{self.base_url}/books/{book_id}/full")
        except TomeApiError as e:
            log.info("Full metadata unavailable for %s (%s), falling back", book_id, e)
            try:
                data = await self._get_json(f"{self.base_url}/books/{book_id}")
            except TomeApiError as e2:
                raise BookNotFoundError(str(e2)) from e2

        if not data.get("success"):
            raise BookNotFoundError(data.get("message") or "Book not found")
        try:
            return Book.from_api(data["data"])
        except (KeyError, TypeError, AttributeError) as e:
            raise BookNotFoundError("Book not found: malformed response") from e

    async def get_page_content(
        self, book_id: str, page: int, words_per_page: int
    ) -> PageContent:
        url = f"{self.base_url}/books/{book_id}/content"
        params = {"page": page, "wordsPerPage": words_per_page}
        try:
            data = await self._get_json(url, params=params)
        except TomeApiError as e:
            raise ContentUnavailableError(str(e)) from e

        if not data.get("success"):
            raise ContentUnavailableError(data.get("message") or "Content not available")
        try:
            payload = data["data"]
            meta = payload["metadata"]
            return PageContent(
                content=str(payload["content"]),
                current_page=int(meta["currentPage"]),
                total_pages=int(meta["totalPages"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            log.error("Unexpected content payload for %s page %s: %s", book_id, page, e)
            raise ContentUnavailableError("Unexpected content response format") from e

    async def get_full_text(self, url: str) -> str:
        try:
            resp = await self._http().get(url)
            resp.raise_for_status()
            return resp.text
        except httpx.HTTPStatusError as e:
            log.error("Full text fetch failed: %s %s", e.response.status_code, url)
            raise ContentUnavailableError(
                "Failed to load book content from storage"
            ) from e
        except httpx.RequestError as e:
            log.error("Full text request error: %s %s -> %s", type(e).__name__, url, e)
            raise ContentUnavailableError(
                "Failed to load book content from storage"
            ) from e

    # ── Profile ────────────────────────────────────────────

    async def update_reading_progress(self, progress: ReadingProgress) -> dict[str, Any]:
        return await self._post_json(
            f"{self.base_url}/users/reading-progress",
            progress.to_payload(),
            failure="Failed to update reading progress",
        )

    async def add_to_bookshelf(
        self, book_id: str, shelf_type: str, gutenberg_id: Optional[str] = None
    ) -> dict[str, Any]:
        return await self._post_json(
            f"{self.base_url}/users/bookshelves",
            {"bookId": book_id, "shelfType": shelf_type, "gutenbergId": gutenberg_id},
            failure="Failed to add to bookshelf",
        )

    async def get_book_status(self, book_id: str) -> Optional[str]:
        """Shelf the book sits on ('currentlyReading', ...), or None."""
        if not self.is_authenticated:
            return None
        url = f"{self.base_url}/users/books/{book_id}/status"
        try:
            resp = await self._http().get(url, headers=self._auth_headers())
        except httpx.RequestError as e:
            log.warning("Status check failed for %s: %s", book_id, e)
            return None
        if resp.status_code != 200:
            return None
        try:
            return resp.json().get("status")
        except (ValueError, AttributeError):
            return None

    # ── Transport ──────────────────────────────────────────

    async def _get_json(
        self, url: str, params: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        try:
            resp = await self._http().get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            log.error("API error: %s %s", e.response.status_code, url)
            raise TomeApiError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            log.error("API request error: %s %s -> %s", type(e).__name__, url, e)
            raise TomeApiError(f"{type(e).__name__} ({url})") from e
        except ValueError as e:
            log.error("Invalid JSON from %s: %s", url, e)
            raise TomeApiError("Invalid response from server") from e
        if not isinstance(data, dict):
            raise TomeApiError("Invalid response from server")
        return data

    async def _post_json(
        self, url: str, payload: dict[str, Any], failure: str
    ) -> dict[str, Any]:
        headers = self._auth_headers()
        try:
            resp = await self._http().post(url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            log.error("%s: HTTP %s %s", failure, e.response.status_code, url)
            raise TomeApiError(failure) from e
        except httpx.RequestError as e:
            log.error("%s: %s %s -> %s", failure, type(e).__name__, url, e)
            raise TomeApiError(failure) from e
        except ValueError as e:
            raise TomeApiError(failure) from e

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
