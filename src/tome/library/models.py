"""Data models for books and reading progress."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

SHELF_TYPES = ("currentlyReading", "wantToRead", "read")


def shelf_label(shelf_type: str) -> str:
    """currentlyReading -> 'currently Reading'"""
    return re.sub(r"([A-Z])", r" \1", shelf_type).strip()


@dataclass
class Book:
    id: str
    title: str
    author: str = "Unknown"
    gutenberg_id: Optional[str] = None
    summary: str = ""
    full_text_url: str = ""

    @property
    def key(self) -> str:
        """Addressing key for content requests: internal id, else Gutenberg id."""
        return self.id or (self.gutenberg_id or "")

    def text_url(self, storage_base_url: str) -> str:
        if self.full_text_url:
            return self.full_text_url
        if self.gutenberg_id:
            return f"{storage_base_url.rstrip('/')}/{self.gutenberg_id}/full-text.txt"
        return ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Book:
        gutenberg_id = data.get("gutenbergId")
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            title=data.get("title") or "Untitled",
            author=data.get("author") or "Unknown",
            gutenberg_id=str(gutenberg_id) if gutenberg_id is not None else None,
            summary=data.get("summary") or "",
            full_text_url=data.get("fullTextUrl") or "",
        )


@dataclass
class PageContent:
    """One page as served by the backend's content endpoint."""

    content: str
    current_page: int
    total_pages: int


@dataclass
class ReadingProgress:
    book_id: str
    current_page: int
    progress: int  # percent, 0 - 100
    reading_time: int  # minutes
    gutenberg_id: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "bookId": self.book_id,
            "gutenbergId": self.gutenberg_id,
            "currentPage": self.current_page,
            "progress": self.progress,
            "readingTime": self.reading_time,
        }
