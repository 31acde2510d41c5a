"""Where a book's pages come from: the server's page endpoint or its raw text."""

from __future__ import annotations

import logging

from tome.api.client import TomeClient
from tome.api.errors import ContentUnavailableError
from tome.library.models import Book
from tome.reader.navigation import ServerPageLoaded, TextLoaded

log = logging.getLogger(__name__)


class ContentResolver:
    def __init__(self, client: TomeClient, storage_base_url: str) -> None:
        self._client = client
        self._storage_base_url = storage_base_url

    def has_text_source(self, book: Book) -> bool:
        return bool(book.text_url(self._storage_base_url))

    async def fetch_page(
        self, book_id: str, page: int, words_per_page: int
    ) -> ServerPageLoaded:
        result = await self._client.get_page_content(book_id, page, words_per_page)
        return ServerPageLoaded(
            content=result.content,
            current_page=result.current_page,
            total_pages=result.total_pages,
        )

    async def fetch_full_text(self, book: Book) -> TextLoaded:
        url = book.text_url(self._storage_base_url)
        if not url:
            raise ContentUnavailableError("No full text available for this book")
        log.info("Fetching full text for %s from %s", book.key, url)
        return TextLoaded(await self._client.get_full_text(url))
