"""Word-count pagination for raw book text."""

from __future__ import annotations


def count_pages(word_count: int, words_per_page: int) -> int:
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be positive, got {words_per_page}")
    return -(-word_count // words_per_page)


def paginate(text: str, words_per_page: int) -> list[str]:
    """Split text into pages of exactly words_per_page words (last may be shorter).

    Words are whitespace-delimited and each page is rejoined with single spaces,
    so runs of whitespace and line breaks are not preserved.
    """
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be positive, got {words_per_page}")
    words = text.split()
    return [
        " ".join(words[i : i + words_per_page])
        for i in range(0, len(words), words_per_page)
    ]
