"""
Value normalization for extraction payloads.

The extraction service returns loosely typed JSON: amounts may arrive as
floats, strings or not at all, dates as ISO strings or datetimes, and
coverage types with whatever casing the model produced. These helpers turn
those values into the engine's types or raise a typed error that the check
evaluator converts into a Check.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .exceptions import InvalidNumericComparisonError, MalformedInputError


_TYPE_SEPARATORS = re.compile(r"[\s\-]+")
_NAME_NOISE = re.compile(r"[^a-z0-9 ]+")
_COMPANY_SUFFIXES = ("pty ltd", "pty limited", "limited", "ltd", "pty")


def normalize_coverage_type(value: Any) -> Optional[str]:
    """
    Normalize a coverage type for matching.

    Case-insensitive, with spaces and hyphens folded to underscores:
    "Public Liability", "public-liability" and "PUBLIC_LIABILITY" all
    become "public_liability". Blank values return None.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    text = _TYPE_SEPARATORS.sub("_", text)
    return re.sub(r"_+", "_", text).strip("_") or None


def parse_amount(value: Any, field_name: str = "amount") -> Decimal:
    """
    Read a currency amount exactly.

    Accepts int, float and Decimal. Booleans, strings, NaN and infinities
    are rejected: a limit the extractor returned as text is not something
    the engine will compare.

    Raises:
        InvalidNumericComparisonError: If the value is not a finite number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidNumericComparisonError(
            message=f"{field_name} is not numeric: {value!r}",
            details={"field": field_name, "value": repr(value)},
        )
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidNumericComparisonError(
                message=f"{field_name} is not finite: {value!r}",
                details={"field": field_name, "value": repr(value)},
            )
        # str() keeps the shortest round-trip repr (20000000.0, not binary noise)
        return Decimal(str(value))
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise InvalidNumericComparisonError(
            message=f"{field_name} is not numeric: {value!r}",
            details={"field": field_name, "value": repr(value)},
        )
    if not amount.is_finite():
        raise InvalidNumericComparisonError(
            message=f"{field_name} is not finite: {value!r}",
            details={"field": field_name, "value": repr(value)},
        )
    return amount


def parse_optional_amount(value: Any, field_name: str = "amount") -> Optional[Decimal]:
    """Like parse_amount, but None stays None."""
    if value is None:
        return None
    return parse_amount(value, field_name)


def parse_date(value: Any, field_name: str = "date") -> Optional[date]:
    """
    Read a calendar date.

    Accepts date, datetime (date part) and ISO 8601 strings, with or
    without a time component. None and blank strings return None.

    Raises:
        MalformedInputError: If the value is present but not a date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise MalformedInputError(
        message=f"{field_name} is not a date: {value!r}",
        details={"field": field_name, "value": repr(value)},
    )


def parse_flag(value: Any) -> Optional[bool]:
    """
    Read an endorsement flag.

    The extractor reports flags as booleans, 0/1 or "yes"/"no". Anything
    else is treated as unknown (None), which the checks read as absent.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"yes", "y", "true", "1"}:
            return True
        if text in {"no", "n", "false", "0"}:
            return False
    return None


def parse_score(value: Any) -> Optional[Decimal]:
    """Read a confidence or risk score; anything non-numeric is None."""
    try:
        return parse_optional_amount(value, "score")
    except InvalidNumericComparisonError:
        return None


def normalize_entity_name(value: Optional[str]) -> str:
    """
    Normalize an insured party name for comparison.

    Lower-cases, strips punctuation and trailing company suffixes so
    "Acme Builders Pty. Ltd." matches "ACME BUILDERS".
    """
    if not value:
        return ""
    text = _NAME_NOISE.sub(" ", value.lower())
    text = " ".join(text.split())
    changed = True
    while changed:
        changed = False
        for suffix in _COMPANY_SUFFIXES:
            if text.endswith(" " + suffix):
                text = text[: -len(suffix) - 1].rstrip()
                changed = True
    return text


def normalize_abn(value: Optional[str]) -> str:
    """Strip whitespace from an ABN."""
    if value is None:
        return ""
    return re.sub(r"\s", "", str(value))
