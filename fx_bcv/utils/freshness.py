"""Cache freshness rules: when to refresh and which fetched rates to adopt."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from fx_bcv.ingestion.models import CacheState, Rate
from fx_bcv.utils.logger import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from fx_bcv.db.cache_store import CacheStore
    from fx_bcv.ingestion.source import RateProvider

LOGGER = get_logger(__name__)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def next_refresh_at(state: CacheState) -> datetime | None:
    """Return the UTC instant after which ``state.last_rate`` is considered stale."""

    if state.last_rate is None:
        return None
    return datetime.combine(
        state.last_rate.effective_date, state.refresh_time_of_day, tzinfo=timezone.utc
    )


def is_refresh_due(state: CacheState, now: datetime) -> bool:
    """Return True when no rate is cached or ``now`` has reached the publish time.

    The BCV publishes one rate per calendar day at a known UTC time, so the
    cached rate goes stale at ``effective_date`` combined with
    ``refresh_time_of_day``. Naive ``now`` values are read as UTC.
    """

    due_at = next_refresh_at(state)
    if due_at is None:
        return True
    return _as_utc(now) >= due_at


def should_adopt(state: CacheState, candidate: Rate) -> bool:
    """Only a strictly newer effective date replaces the cached rate."""

    return state.last_rate is None or candidate.is_newer_than(state.last_rate)


def adopt(state: CacheState, candidate: Rate | None) -> CacheState | None:
    """Return ``state`` shifted to include ``candidate`` or None when nothing changes."""

    if candidate is None:
        return None
    if should_adopt(state, candidate):
        LOGGER.info("Updating rate.")
        return state.updated_with(candidate)
    LOGGER.info("No new rate available yet.")
    return None


def refresh_if_due(
    state: CacheState,
    source: "RateProvider",
    *,
    now: datetime,
    uri: str | None = None,
    store: "CacheStore | None" = None,
) -> CacheState:
    """Fetch a fresh rate when the cache is stale and return the resulting state.

    At most one fetch is attempted per call, however old the cached rate is.
    When a newer rate is adopted and ``store`` is supplied, the new state is
    persisted before being returned.
    """

    if not is_refresh_due(state, now):
        return state
    candidate = source.get_current_rate(uri or state.source_uri)
    updated = adopt(state, candidate)
    if updated is None:
        return state
    if store is not None:
        store.save(updated)
    return updated


__all__ = ["adopt", "is_refresh_due", "next_refresh_at", "refresh_if_due", "should_adopt"]
