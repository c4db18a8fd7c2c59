"""Abstractions for pluggable page fetching strategies."""

from __future__ import annotations

from typing import Protocol


class PageFetcher(Protocol):
    """Contract for retrieving the raw text of a rate page.

    Implementations perform a single request per call and raise
    :class:`fx_bcv.ingestion.bcv_requests.FetchError` on any transport failure.
    """

    def fetch(self, uri: str) -> str:
        ...  # pragma: no cover - protocol definition


__all__ = ["PageFetcher"]
