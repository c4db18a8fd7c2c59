from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from fx_bcv.ingestion.bcv_requests import FetchError
from fx_bcv.ingestion.models import Rate
from fx_bcv.ingestion.source import BCVRateSource
from fx_bcv.ingestion.strategy import PageFetcher


class _StaticFetcher:
    def __init__(self, text: str) -> None:
        self.text = text
        self.uris: list[str] = []

    def fetch(self, uri: str) -> str:
        self.uris.append(uri)
        return self.text


class _FailingFetcher:
    def fetch(self, uri: str) -> str:
        raise FetchError(f"Problem loading {uri}: timed out")


def test_get_current_rate_combines_fetch_and_extract(
    bcv_page: str, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="fx_bcv")
    fetcher = _StaticFetcher(bcv_page)
    source = BCVRateSource(fetcher)

    rate = source.get_current_rate("https://bcv.test/rates")

    assert rate == Rate(Decimal("35.4298"), date(2023, 11, 17))
    assert fetcher.uris == ["https://bcv.test/rates"]
    assert "Getting new rate" in caplog.text


def test_get_current_rate_swallows_fetch_errors(caplog: pytest.LogCaptureFixture) -> None:
    source = BCVRateSource(_FailingFetcher())

    with caplog.at_level(logging.WARNING):
        assert source.get_current_rate("https://bcv.test/rates") is None
    assert "Failed reading BCV page" in caplog.text
    assert "timed out" in caplog.text


def test_get_current_rate_swallows_extract_errors(caplog: pytest.LogCaptureFixture) -> None:
    source = BCVRateSource(_StaticFetcher("<html><body>Example Domain</body></html>"))

    with caplog.at_level(logging.WARNING):
        assert source.get_current_rate("https://www.example.com") is None
    assert "Could not extract rate from HTML: No dolar div" in caplog.text


def test_get_current_rate_uses_custom_extractor() -> None:
    expected = Rate(Decimal("40.1"), date(2024, 5, 2))
    source = BCVRateSource(_StaticFetcher("ignored"), extractor=lambda _html: expected)

    assert source.get_current_rate("https://bcv.test") is expected


def test_fetchers_satisfy_the_page_fetcher_contract(bcv_page: str) -> None:
    fetcher: PageFetcher = _StaticFetcher(bcv_page)

    assert BCVRateSource(fetcher).fetcher is fetcher
