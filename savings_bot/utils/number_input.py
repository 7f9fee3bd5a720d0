"""Utilities for parsing numeric input."""

from __future__ import annotations

import math
import re

_AMOUNT_RE = re.compile(r"[+-]?\d+(\.\d+)?")


def parse_amount(text: str) -> float | None:
    """Parse a money amount like "250", "1 000", "1,5" or "₹2,500.50".

    A comma is a thousands separator when it is followed by exactly three
    digits, otherwise it is read as the decimal point.
    """

    value = (text or "").strip().replace("₹", "").replace(" ", "").replace(" ", "")
    if not value:
        return None
    if "," in value:
        if re.fullmatch(r"[+-]?\d{1,3}(,\d{3})+(\.\d+)?", value):
            value = value.replace(",", "")
        elif value.count(",") == 1 and "." not in value:
            value = value.replace(",", ".")
        else:
            return None
    if not _AMOUNT_RE.fullmatch(value):
        return None
    amount = float(value)
    if not math.isfinite(amount):
        return None
    return round(amount, 2)


def parse_positive_amount(text: str) -> float | None:
    """Parse an amount strictly greater than zero."""

    value = parse_amount(text)
    if value is None or value <= 0:
        return None
    return value
