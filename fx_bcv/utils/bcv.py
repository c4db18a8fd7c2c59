"""BCV-specific constants and the default cache state used across the package."""

from __future__ import annotations

from datetime import time
from typing import Final

from fx_bcv.ingestion.models import CacheState

BCV_URI: Final[str] = "https://www.bcv.org.ve/estadisticas/tipo-cambio-de-referencia-smc"

# Approximate UTC time at which the BCV publishes the next business day's rate.
RATE_CHANGE_TIME_UTC: Final[time] = time(19, 30)

DEFAULT_CACHE_STATE: Final[CacheState] = CacheState(
    last_rate=None,
    previous_rate=None,
    refresh_time_of_day=RATE_CHANGE_TIME_UTC,
    source_uri=BCV_URI,
)


__all__ = ["BCV_URI", "RATE_CHANGE_TIME_UTC", "DEFAULT_CACHE_STATE"]
