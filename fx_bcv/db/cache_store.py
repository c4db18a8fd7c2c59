"""JSON persistence for the cached rate state.

File layout (key names are shared with earlier releases of the tool)::

    {
      "LastRate": {"Multiplier": 36.334, "Date": "2024-03-27"},
      "PreviousRate": null,
      "RateChangeUtcTime": "19:30:00",
      "SourceUri": "https://www.bcv.org.ve/estadisticas/tipo-cambio-de-referencia-smc"
    }
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date, time
from decimal import Decimal
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from fx_bcv.db import default_cache_path
from fx_bcv.ingestion.models import CacheState, Rate
from fx_bcv.utils.bcv import DEFAULT_CACHE_STATE
from fx_bcv.utils.logger import get_logger

LOGGER = get_logger(__name__)

LAST_RATE_KEY = "LastRate"
PREVIOUS_RATE_KEY = "PreviousRate"
REFRESH_TIME_KEY = "RateChangeUtcTime"
SOURCE_URI_KEY = "SourceUri"
MULTIPLIER_KEY = "Multiplier"
DATE_KEY = "Date"

REQUIRED_KEYS = (LAST_RATE_KEY, REFRESH_TIME_KEY, SOURCE_URI_KEY)

JSON_INDENT = "  "


class PersistenceError(RuntimeError):
    """Base class for cache file failures."""


class ReadError(PersistenceError):
    """The cache file could not be opened or read."""


class WriteError(PersistenceError):
    """The cache file could not be written."""


class MalformedRecord(PersistenceError):
    """The cache file was read but does not describe a valid state."""


def _rate_to_payload(rate: Rate | None) -> dict[str, Any] | None:
    if rate is None:
        return None
    return {
        MULTIPLIER_KEY: rate.multiplier,
        DATE_KEY: rate.effective_date.isoformat(),
    }


def _number_text(value: Decimal) -> str:
    if not value.is_finite():
        raise ValueError(f"{MULTIPLIER_KEY} must be finite, got {value}")
    # Positional notation keeps every digit; json.loads(parse_float=Decimal) reads it back exactly.
    return format(value, "f")


def _encode(value: object, level: int = 0) -> str:
    if isinstance(value, Decimal):
        return _number_text(value)
    if isinstance(value, dict) and value:
        inner = JSON_INDENT * (level + 1)
        members = ",\n".join(
            f"{inner}{json.dumps(key)}: {_encode(item, level + 1)}" for key, item in value.items()
        )
        return "{\n" + members + "\n" + JSON_INDENT * level + "}"
    return json.dumps(value)


def dumps_state(state: CacheState) -> str:
    """Return ``state`` as indented JSON with multipliers written digit for digit."""

    return _encode(state_to_payload(state)) + "\n"


def _rate_from_payload(value: object, key: str) -> Rate | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedRecord(f"{key} must be an object or null")
    missing = [name for name in (MULTIPLIER_KEY, DATE_KEY) if name not in value]
    if missing:
        raise MalformedRecord(f"{key} is missing {', '.join(missing)}")
    multiplier = value[MULTIPLIER_KEY]
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
        raise MalformedRecord(f"{key}.{MULTIPLIER_KEY} must be a number")
    raw_date = value[DATE_KEY]
    if not isinstance(raw_date, str):
        raise MalformedRecord(f"{key}.{DATE_KEY} must be an ISO date string")
    try:
        effective_date = date.fromisoformat(raw_date)
    except ValueError as exc:
        raise MalformedRecord(f"{key}.{DATE_KEY} is not a valid date: {raw_date!r}") from exc
    return Rate(multiplier=Decimal(multiplier), effective_date=effective_date)


def state_to_payload(state: CacheState) -> dict[str, Any]:
    """Return the document for ``state``; multipliers stay :class:`~decimal.Decimal`."""

    return {
        LAST_RATE_KEY: _rate_to_payload(state.last_rate),
        PREVIOUS_RATE_KEY: _rate_to_payload(state.previous_rate),
        REFRESH_TIME_KEY: state.refresh_time_of_day.isoformat(),
        SOURCE_URI_KEY: state.source_uri,
    }


def state_from_payload(payload: object) -> CacheState:
    """Validate a decoded JSON document and build a :class:`CacheState`.

    ``LastRate`` (possibly null), ``RateChangeUtcTime`` and ``SourceUri`` are
    mandatory; ``PreviousRate`` may be omitted. A rate lacking either of its
    fields invalidates the whole record.
    """

    if not isinstance(payload, dict):
        raise MalformedRecord("Cache state must be a JSON object")
    missing = [key for key in REQUIRED_KEYS if key not in payload]
    if missing:
        raise MalformedRecord(f"Missing required field(s): {', '.join(missing)}")

    raw_time = payload[REFRESH_TIME_KEY]
    if not isinstance(raw_time, str):
        raise MalformedRecord(f"{REFRESH_TIME_KEY} must be a HH:MM:SS string")
    try:
        refresh_time = time.fromisoformat(raw_time)
    except ValueError as exc:
        raise MalformedRecord(f"{REFRESH_TIME_KEY} is not a valid time: {raw_time!r}") from exc

    source_uri = payload[SOURCE_URI_KEY]
    if not isinstance(source_uri, str):
        raise MalformedRecord(f"{SOURCE_URI_KEY} must be a string")
    parsed_uri = urlparse(source_uri)
    if not parsed_uri.scheme or not parsed_uri.netloc:
        raise MalformedRecord(f"{SOURCE_URI_KEY} must be an absolute URI: {source_uri!r}")

    return CacheState(
        last_rate=_rate_from_payload(payload[LAST_RATE_KEY], LAST_RATE_KEY),
        previous_rate=_rate_from_payload(payload.get(PREVIOUS_RATE_KEY), PREVIOUS_RATE_KEY),
        refresh_time_of_day=refresh_time,
        source_uri=source_uri,
    )


def read_state(path: str | Path) -> CacheState:
    """Read and validate the cache file at ``path``."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        raise ReadError(f"Problem reading cache state from {path}: {exc}") from exc
    try:
        payload = json.loads(text, parse_float=Decimal)
    except ValueError as exc:
        raise MalformedRecord(f"Problem reading cache state from {path}: {exc}") from exc
    return state_from_payload(payload)


def write_state(state: CacheState, path: str | Path) -> None:
    """Serialise ``state`` as indented JSON, replacing ``path`` in one step."""

    target = Path(path)
    try:
        serialised = dumps_state(state)
    except ValueError as exc:
        raise WriteError(f"Problem writing to file {target}: {exc}") from exc
    tmp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(serialised)
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(f"Problem writing to file {target}: {exc}") from exc


class CacheStore:
    """Load and save :class:`CacheState` snapshots without ever raising."""

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        default_state: CacheState = DEFAULT_CACHE_STATE,
    ) -> None:
        self.path = Path(path) if path is not None else default_cache_path()
        self.default_state = default_state

    def load(self) -> CacheState:
        """Return the stored state or the default one when it cannot be read."""

        try:
            return read_state(self.path)
        except PersistenceError as exc:
            LOGGER.warning("Could not read cache state (this is normal on first use): %s", exc)
            return self.default_state

    def save(self, state: CacheState) -> bool:
        """Persist ``state``; failures are logged and reported as ``False``."""

        try:
            write_state(state, self.path)
        except PersistenceError as exc:
            LOGGER.warning("Could not write cache state file: %s", exc)
            return False
        return True


__all__ = [
    "CacheStore",
    "MalformedRecord",
    "PersistenceError",
    "ReadError",
    "WriteError",
    "dumps_state",
    "read_state",
    "state_from_payload",
    "state_to_payload",
    "write_state",
]
