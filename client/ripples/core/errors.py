"""Exceptions raised by the report pipeline.

The scheduler only ever catches ``ReportFailed``; the subclasses exist so
logs can tell a network problem from a malformed response.
"""

from __future__ import annotations


class RipplesError(Exception):
    """Base class for all client errors."""


class ReportFailed(RipplesError):
    """A location report round trip did not produce a usable response."""


class TransportError(ReportFailed):
    """Connection failure, timeout, or non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseDecodeError(ReportFailed):
    """Response body did not match the ripple response schema."""
