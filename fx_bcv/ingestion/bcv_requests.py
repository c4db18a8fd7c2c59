"""requests-based downloader for the BCV reference rate page."""

from __future__ import annotations

import requests

from fx_bcv.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/130.0.0.0 Safari/537.36"
)


class FetchError(RuntimeError):
    """Raised when the page could not be downloaded for any transport reason."""


class BCVPageFetcher:
    """Fetch the text of a page with a single GET request (no retries)."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        verify: bool = True,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )
        self.timeout = timeout
        self.verify = verify

    def fetch(self, uri: str) -> str:
        """Return the body of ``uri`` decoded as text."""

        try:
            response = self.session.get(uri, timeout=self.timeout, verify=self.verify)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Problem loading {uri}: {exc}") from exc
        LOGGER.debug("Fetched %s (%s characters)", uri, len(response.text))
        return response.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "BCVPageFetcher":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # pragma: no cover - trivial
        self.close()


def fetch_page(uri: str, *, session: requests.Session | None = None, timeout: float = 30) -> str:
    """Convenience wrapper around :class:`BCVPageFetcher` for one-off downloads."""

    return BCVPageFetcher(session=session, timeout=timeout).fetch(uri)


__all__ = ["BCVPageFetcher", "DEFAULT_USER_AGENT", "FetchError", "fetch_page"]
