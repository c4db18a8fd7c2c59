"""Data models shared across ingestion, persistence and conversion modules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from enum import Enum


class Currency(str, Enum):
    """The two currencies handled by the converter."""

    USD = "USD"
    VES = "VES"

    @property
    def prefix(self) -> str:
        return "US$" if self is Currency.USD else "Bs."


class AmountKind(str, Enum):
    """Role an amount plays relative to a rate (``source * multiplier = target``)."""

    SOURCE = "source"
    TARGET = "target"


class ConversionDirection(str, Enum):
    """Forward multiplies by the rate, inverse divides by it."""

    FORWARD = "forward"
    INVERSE = "inverse"

    @property
    def result_kind(self) -> AmountKind:
        return AmountKind.TARGET if self is ConversionDirection.FORWARD else AmountKind.SOURCE


def _quantize(value: Decimal, decimals: int) -> Decimal:
    if decimals < 0:
        raise ValueError("decimals must not be negative")
    with localcontext() as ctx:
        # Integer digits plus decimals, with room for a rounding carry.
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True, slots=True)
class Rate:
    """USD → VES multiplier published by the BCV for ``effective_date``."""

    multiplier: Decimal
    effective_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.multiplier, Decimal):
            object.__setattr__(self, "multiplier", Decimal(str(self.multiplier)))

    def with_precision(self, precision: int) -> "Rate":
        """Return a copy whose multiplier is rounded to ``precision`` decimals."""

        return replace(self, multiplier=_quantize(self.multiplier, precision))

    def is_newer_than(self, other: "Rate") -> bool:
        return self.effective_date > other.effective_date


@dataclass(frozen=True, slots=True)
class CacheState:
    """Snapshot persisted between runs: a depth-2 rate history plus source settings."""

    last_rate: Rate | None
    previous_rate: Rate | None
    refresh_time_of_day: time
    source_uri: str

    def updated_with(self, rate: Rate) -> "CacheState":
        """Demote ``last_rate`` to ``previous_rate`` and install ``rate`` as the latest."""

        return replace(self, previous_rate=self.last_rate, last_rate=rate)


@dataclass(frozen=True, slots=True)
class CurrencyAmount:
    """A converted amount, tagged with its role and the rate date that produced it."""

    kind: AmountKind
    amount: Decimal
    rate_date: date | None = None

    @property
    def currency(self) -> Currency:
        return Currency.USD if self.kind is AmountKind.SOURCE else Currency.VES

    def with_decimals(self, decimals: int) -> "CurrencyAmount":
        return replace(self, amount=_quantize(self.amount, decimals))

    def __str__(self) -> str:
        return f"{self.currency.prefix} {self.amount}"


__all__ = [
    "AmountKind",
    "CacheState",
    "ConversionDirection",
    "Currency",
    "CurrencyAmount",
    "Rate",
]
