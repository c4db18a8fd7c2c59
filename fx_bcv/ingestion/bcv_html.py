"""Extract the USD/VES reference rate from the BCV statistics page."""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation

import pandas as pd
from bs4 import BeautifulSoup, Tag

from fx_bcv.ingestion.models import Rate
from fx_bcv.utils.logger import get_logger

LOGGER = get_logger(__name__)

RATE_BLOCK_ID = "dolar"
DATE_ATTRIBUTE = "datatype"
DATE_ATTRIBUTE_VALUE = "xsd:dateTime"

# es-VE numbers: "." groups thousands, "," separates decimals.
_ES_VE_NUMBER = re.compile(r"^[+-]?(\d{1,3}(\.\d{3})+|\d+)(,\d+)?$")


class ExtractError(ValueError):
    """Base class for markup that does not yield a rate."""


class NoRateElement(ExtractError):
    """The page has no element with ``id="dolar"``."""


class MultiplierParseError(ExtractError):
    """The rate block has no ``<strong>`` node or its text is not a number."""


class NoDateElement(ExtractError):
    """No sibling block carrying a ``datatype="xsd:dateTime"`` element."""


class DateParseError(ExtractError):
    """The dated element has no usable ``content`` timestamp."""


def _parse_decimal(value: str | None) -> Decimal | None:
    if value is None:
        return None
    cleaned = re.sub(r"\s+", "", value)
    if not _ES_VE_NUMBER.match(cleaned):
        return None
    try:
        return Decimal(cleaned.replace(".", "").replace(",", "."))
    except InvalidOperation:
        return None


def _coerce_date(value: object) -> date | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = pd.to_datetime(value.strip(), errors="coerce")
    except (TypeError, ValueError):
        return None
    if pd.isna(parsed):
        return None
    # Keep the calendar day as written on the page, whatever its offset.
    return parsed.date()


def _find_multiplier(block: Tag) -> Decimal:
    strong = block.find("strong")
    if strong is None:
        raise MultiplierParseError("No strong element in the dolar block")
    text = strong.get_text(strip=True)
    multiplier = _parse_decimal(text)
    if multiplier is None:
        raise MultiplierParseError(f"Problem parsing usd multiplier {text!r}")
    return multiplier


def _find_effective_date(block: Tag) -> date:
    sibling = block.find_next_sibling()
    if sibling is None:
        raise NoDateElement("No sibling for the dolar block")
    dated = sibling.find(attrs={DATE_ATTRIBUTE: DATE_ATTRIBUTE_VALUE})
    if dated is None:
        raise NoDateElement("No date found")
    content = dated.get("content")
    effective_date = _coerce_date(content)
    if effective_date is None:
        raise DateParseError(f"No date or date in bad format: {content!r}")
    return effective_date


def parse_bcv_rate(html: str) -> Rate:
    """Parse BCV HTML into a :class:`Rate`.

    Only two anchors are relied upon: the block with ``id="dolar"`` whose
    ``<strong>`` text holds the multiplier, and the element right after it,
    which contains a ``datatype="xsd:dateTime"`` node whose ``content``
    attribute is the publication timestamp. Everything else on the page may
    change freely.
    """

    soup = BeautifulSoup(html, "html.parser")
    block = soup.find(id=RATE_BLOCK_ID)
    if block is None:
        raise NoRateElement("No dolar div")
    multiplier = _find_multiplier(block)
    effective_date = _find_effective_date(block)
    LOGGER.debug("Extracted rate %s effective %s", multiplier, effective_date)
    return Rate(multiplier=multiplier, effective_date=effective_date)


__all__ = [
    "DateParseError",
    "ExtractError",
    "MultiplierParseError",
    "NoDateElement",
    "NoRateElement",
    "RATE_BLOCK_ID",
    "parse_bcv_rate",
]
