"""Errors raised by the backend client."""

from __future__ import annotations


class TomeApiError(RuntimeError):
    """Base class for failed backend calls."""


class BookNotFoundError(TomeApiError):
    pass


class ContentUnavailableError(TomeApiError):
    pass


class NotAuthenticatedError(TomeApiError):
    pass
