"""
Australian Business Number validation.

Implements the ATO checksum: subtract 1 from the first digit, weight the
eleven digits, and the weighted sum must be divisible by 89.
"""
from __future__ import annotations

from typing import Optional

from .normalize import normalize_abn


ABN_WEIGHTS = (10, 1, 3, 5, 7, 9, 11, 13, 15, 17, 19)


def abn_checksum_error(abn: Optional[str]) -> Optional[str]:
    """
    Validate an ABN.

    Returns:
        None when the ABN is valid, otherwise the reason it is not
    """
    clean = normalize_abn(abn)
    if len(clean) != 11 or not clean.isdigit():
        return "ABN must be exactly 11 digits"

    digits = [int(c) for c in clean]
    digits[0] -= 1
    total = sum(d * w for d, w in zip(digits, ABN_WEIGHTS))
    if total % 89 != 0:
        return "ABN checksum validation failed"
    return None


def is_valid_abn(abn: Optional[str]) -> bool:
    """True when the ABN passes the checksum."""
    return abn_checksum_error(abn) is None
