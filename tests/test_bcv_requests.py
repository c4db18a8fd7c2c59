from __future__ import annotations

import pytest
import requests

from fx_bcv.ingestion.bcv_requests import BCVPageFetcher, FetchError, fetch_page


class _DummyResponse:
    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class _DummySession:
    def __init__(self, response: _DummyResponse | None = None, error: Exception | None = None):
        self.headers: dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get(self, uri: str, **kwargs):
        self.calls.append((uri, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def test_fetch_returns_page_text() -> None:
    session = _DummySession(_DummyResponse("<html>ok</html>"))
    fetcher = BCVPageFetcher(session=session, timeout=5)

    assert fetcher.fetch("https://www.bcv.org.ve/") == "<html>ok</html>"
    assert session.calls == [("https://www.bcv.org.ve/", {"timeout": 5, "verify": True})]
    assert session.headers["User-Agent"].startswith("Mozilla/5.0")


def test_fetch_performs_a_single_request_on_failure() -> None:
    session = _DummySession(error=requests.ConnectionError("connection refused"))
    fetcher = BCVPageFetcher(session=session)

    with pytest.raises(FetchError, match="connection refused"):
        fetcher.fetch("https://www.bcv.org.ve/")
    assert len(session.calls) == 1


@pytest.mark.parametrize(
    "error",
    [
        requests.Timeout("read timed out"),
        requests.exceptions.InvalidURL("bad url"),
        requests.exceptions.ChunkedEncodingError("truncated"),
    ],
)
def test_fetch_maps_transport_errors(error: Exception) -> None:
    fetcher = BCVPageFetcher(session=_DummySession(error=error))

    with pytest.raises(FetchError, match="Problem loading"):
        fetcher.fetch("https://www.bcv.org.ve/")


def test_fetch_maps_http_status_errors() -> None:
    fetcher = BCVPageFetcher(session=_DummySession(_DummyResponse(status_code=503)))

    with pytest.raises(FetchError, match="503"):
        fetcher.fetch("https://www.bcv.org.ve/")


def test_fetch_page_and_close_delegate_to_session() -> None:
    session = _DummySession(_DummyResponse("body"))

    assert fetch_page("https://example.com", session=session) == "body"

    fetcher = BCVPageFetcher(session=session, verify=False)
    fetcher.fetch("https://example.com")
    fetcher.close()
    assert session.calls[-1][1]["verify"] is False
    assert session.closed is True


def test_fetch_page_rejects_invalid_uri_without_network() -> None:
    with pytest.raises(FetchError):
        fetch_page("not a uri")
