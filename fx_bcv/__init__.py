"""Public interface for the fx_bcv package."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from fx_bcv.conversion import (
    ConversionError,
    DivisionByZeroRate,
    NoRatesAvailable,
    convert_all,
    rates_for_conversion,
)
from fx_bcv.db.cache_store import CacheStore
from fx_bcv.ingestion.models import (
    AmountKind,
    CacheState,
    ConversionDirection,
    Currency,
    CurrencyAmount,
    Rate,
)
from fx_bcv.utils.bcv import BCV_URI, DEFAULT_CACHE_STATE, RATE_CHANGE_TIME_UTC
from fx_bcv.utils.freshness import is_refresh_due, refresh_if_due, should_adopt

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from fx_bcv.ingestion.source import RateProvider

__all__ = [
    "__version__",
    "AmountKind",
    "BCV_URI",
    "CacheState",
    "CacheStore",
    "ConversionDirection",
    "ConversionError",
    "Currency",
    "CurrencyAmount",
    "DEFAULT_CACHE_STATE",
    "DivisionByZeroRate",
    "FxBcv",
    "NoRatesAvailable",
    "RATE_CHANGE_TIME_UTC",
    "Rate",
    "fetch_current_rate",
    "get_rates_for_conversion",
    "is_refresh_due",
    "refresh_if_due",
    "should_adopt",
]

try:
    __version__ = importlib_metadata.version("fx-bcv")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fetch_current_rate(uri: str = BCV_URI, **kwargs) -> Rate | None:
    from fx_bcv.ingestion.source import BCVRateSource as _BCVRateSource

    return _BCVRateSource(**kwargs).get_current_rate(uri)


def get_rates_for_conversion(state: CacheState, last_rate_only: bool = False) -> list[Rate]:
    """Entry point used by display layers; see :func:`rates_for_conversion`."""

    return rates_for_conversion(state, last_rate_only)


class FxBcv:
    """Package facade tying the cache, the BCV source and the converter together."""

    __slots__ = ("store", "_source", "clock")

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(
        self,
        data_path: str | Path | None = None,
        *,
        source: RateProvider | None = None,
        clock: Clock | None = None,
        store: CacheStore | None = None,
    ) -> None:
        """Configure where the cache lives and how rates are fetched.

        ``data_path`` defaults to the per-user ``dobsdata.json`` (see
        :func:`fx_bcv.db.default_cache_path`). ``source`` and ``clock`` are
        injectable so refresh decisions can be driven deterministically. When
        ``source`` is omitted the BCV scraper is only built once a refresh
        actually needs it.
        """

        self.store = store or CacheStore(data_path)
        self._source: RateProvider | None = source
        self.clock: Clock = clock or _utc_now

    @property
    def source(self) -> RateProvider:
        if self._source is None:
            from fx_bcv.ingestion.source import BCVRateSource

            self._source = BCVRateSource()
        return self._source

    def load_state(self) -> CacheState:
        return self.store.load()

    def refresh_if_due(self, state: CacheState | None = None, uri: str | None = None) -> CacheState:
        """Refresh ``state`` (or the stored one) when stale and persist any adoption."""

        current = state if state is not None else self.store.load()
        now = self.clock()
        if not is_refresh_due(current, now):
            return current
        return refresh_if_due(current, self.source, now=now, uri=uri, store=self.store)

    def rates(self, *, last_rate_only: bool = False, precision: int | None = None) -> list[Rate]:
        """Return the up-to-date rates a conversion would use."""

        state = self.refresh_if_due()
        return rates_for_conversion(state, last_rate_only, precision=precision)

    def convert(
        self,
        amount: Decimal | int | str,
        direction: ConversionDirection = ConversionDirection.FORWARD,
        *,
        last_rate_only: bool = False,
        precision: int | None = None,
    ) -> list[CurrencyAmount]:
        """Convert ``amount`` with every selected rate, oldest first.

        Raises :class:`NoRatesAvailable` when no rate is cached or fetchable
        and :class:`DivisionByZeroRate` for an inverse conversion with a zero
        multiplier; in both cases nothing is returned.
        """

        rates = self.rates(last_rate_only=last_rate_only, precision=precision)
        if not rates:
            raise NoRatesAvailable("No rates available")
        return convert_all(Decimal(str(amount)), rates, direction)
