"""Pick the cached rates to apply and convert amounts with them."""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Iterable

from fx_bcv.ingestion.models import CacheState, ConversionDirection, CurrencyAmount, Rate

# Rates are rounded to this many decimals before being applied.
RATE_PRECISION = 2


class ConversionError(ArithmeticError):
    """Base class for conversions that cannot produce a trustworthy number."""


class DivisionByZeroRate(ConversionError):
    """An inverse conversion was requested with a zero multiplier."""


class NoRatesAvailable(ConversionError):
    """Neither a cached nor a freshly fetched rate exists."""


def rates_for_conversion(
    state: CacheState,
    last_rate_only: bool = False,
    *,
    precision: int | None = None,
) -> list[Rate]:
    """Return the rates to convert with, oldest first.

    ``[]`` without a cached rate, ``[last]`` when there is no previous rate or
    ``last_rate_only`` is set, otherwise ``[previous, last]``. When
    ``precision`` is given each rate is replaced by a rounded copy.
    """

    if state.last_rate is None:
        return []
    if state.previous_rate is None or last_rate_only:
        selected = [state.last_rate]
    else:
        selected = [state.previous_rate, state.last_rate]
    if precision is None:
        return selected
    return [rate.with_precision(precision) for rate in selected]


def convert_amount(amount: Decimal, rate: Rate, direction: ConversionDirection) -> CurrencyAmount:
    """Convert ``amount`` with ``rate``.

    Forward conversions multiply (USD → VES); inverse conversions divide
    (VES → USD) and raise :class:`DivisionByZeroRate` for a zero multiplier.
    """

    if direction is ConversionDirection.FORWARD:
        with localcontext() as ctx:
            # Enough digits for the exact product of the two coefficients.
            ctx.prec = max(
                ctx.prec,
                len(amount.as_tuple().digits) + len(rate.multiplier.as_tuple().digits),
            )
            converted = amount * rate.multiplier
    else:
        if rate.multiplier == 0:
            raise DivisionByZeroRate(
                f"Can not make this conversion with rate 0 ({rate.effective_date.isoformat()})."
            )
        converted = amount / rate.multiplier
    return CurrencyAmount(kind=direction.result_kind, amount=converted, rate_date=rate.effective_date)


def convert_all(
    amount: Decimal, rates: Iterable[Rate], direction: ConversionDirection
) -> list[CurrencyAmount]:
    """Convert ``amount`` with every rate, or raise before producing any output."""

    return [convert_amount(amount, rate, direction) for rate in rates]


__all__ = [
    "ConversionError",
    "DivisionByZeroRate",
    "NoRatesAvailable",
    "RATE_PRECISION",
    "convert_all",
    "convert_amount",
    "rates_for_conversion",
]
