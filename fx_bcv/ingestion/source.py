"""Best-effort acquisition of the current BCV rate (fetch + extract)."""

from __future__ import annotations

from typing import Callable, Protocol

from fx_bcv.ingestion.bcv_html import ExtractError, parse_bcv_rate
from fx_bcv.ingestion.bcv_requests import BCVPageFetcher, FetchError
from fx_bcv.ingestion.models import Rate
from fx_bcv.ingestion.strategy import PageFetcher
from fx_bcv.utils.logger import get_logger

LOGGER = get_logger(__name__)


class RateProvider(Protocol):
    def get_current_rate(self, uri: str) -> Rate | None:
        ...  # pragma: no cover - protocol definition


class BCVRateSource:
    """Compose a :class:`PageFetcher` with the HTML extractor.

    Network and markup failures are logged and turned into ``None`` so a
    refresh never blocks a conversion; callers fall back to cached data.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        *,
        extractor: Callable[[str], Rate] = parse_bcv_rate,
    ) -> None:
        self.fetcher = fetcher or BCVPageFetcher()
        self.extractor = extractor

    def get_current_rate(self, uri: str) -> Rate | None:
        LOGGER.info("Getting new rate")
        try:
            html = self.fetcher.fetch(uri)
        except FetchError as exc:
            LOGGER.warning("Failed reading BCV page: %s", exc)
            return None
        try:
            return self.extractor(html)
        except ExtractError as exc:
            LOGGER.warning("Could not extract rate from HTML: %s", exc)
            return None


__all__ = ["BCVRateSource", "RateProvider"]
