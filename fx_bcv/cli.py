"""USD - VES converter using the BCV reference rate."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence, TextIO

from fx_bcv import FxBcv, __version__
from fx_bcv.conversion import RATE_PRECISION, ConversionError
from fx_bcv.ingestion.models import ConversionDirection, CurrencyAmount
from fx_bcv.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

SEPARATOR = "|"

_AMOUNT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

__all__ = ["display_conversions", "main", "parse_amount", "parse_args"]


def parse_amount(raw: str) -> Decimal:
    """Parse an amount with an optional sign and ``.`` as decimal separator."""

    cleaned = raw.strip()
    if not _AMOUNT_PATTERN.match(cleaned):
        raise argparse.ArgumentTypeError(f"invalid amount: {raw!r}")
    try:
        return Decimal(cleaned)
    except InvalidOperation as exc:  # pragma: no cover - regex guards this
        raise argparse.ArgumentTypeError(f"invalid amount: {raw!r}") from exc


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError("Decimals to display can not be negative.")
    return value


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dobs", description=__doc__)
    parser.add_argument(
        "amount",
        nargs="?",
        type=parse_amount,
        default=Decimal(1),
        help="Amount to be converted to VES, or to USD if -u is given (default: 1)",
    )
    parser.add_argument(
        "-u",
        "--convert-to-us-dollars",
        dest="to_usd",
        action="store_true",
        help="Convert the amount to USD",
    )
    parser.add_argument(
        "-l",
        "--last-rate-only",
        dest="last_rate_only",
        action="store_true",
        help="Make the conversion using only the last rate available",
    )
    parser.add_argument(
        "-d",
        "--decimals-to-display",
        dest="decimals",
        type=_non_negative_int,
        default=2,
        help="Number of decimals in the result to display",
    )
    parser.add_argument(
        "--data-file",
        dest="data_path",
        help="Cache file path (defaults to $DOBS_DATA_PATH or the user data directory)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def display_conversions(
    output: TextIO, results: Iterable[CurrencyAmount], decimals_to_display: int
) -> None:
    for result in results:
        rate_date = result.rate_date.isoformat() if result.rate_date else "-"
        output.write(f"{result.with_decimals(decimals_to_display)} {SEPARATOR} {rate_date}\n")


def main(argv: Sequence[str] | None = None, *, fx: FxBcv | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_verbosity(logging.DEBUG)
    elif args.quiet:
        set_verbosity(logging.WARNING)

    converter = fx or FxBcv(args.data_path)
    direction = ConversionDirection.INVERSE if args.to_usd else ConversionDirection.FORWARD
    try:
        results = converter.convert(
            args.amount,
            direction,
            last_rate_only=args.last_rate_only,
            precision=RATE_PRECISION,
        )
    except ConversionError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    display_conversions(sys.stdout, results, args.decimals)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
