"""
Presentation helpers.

Pure functions that map engine values to display values: labels, badge
tones and formatted amounts. Dashboards and deficiency notices call these
instead of keeping their own lookup tables.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from .config import DEFAULT_THRESHOLDS, VerificationThresholds
from .models.enums import Severity, VerificationStatus


COVERAGE_TYPE_NAMES = {
    "public_liability": "Public Liability",
    "products_liability": "Products Liability",
    "workers_comp": "Workers' Compensation",
    "professional_indemnity": "Professional Indemnity",
    "motor_vehicle": "Motor Vehicle",
    "contract_works": "Contract Works",
}


@dataclass(frozen=True)
class Presentation:
    """Label and badge tone for a status or severity."""
    label: str
    tone: str  # success | danger | warning | info


def format_coverage_type(coverage_type: Optional[str]) -> str:
    """
    Human-readable coverage name.

    >>> format_coverage_type("workers_comp")
    "Workers' Compensation"
    >>> format_coverage_type("marine_cargo")
    'Marine Cargo'
    """
    if not coverage_type:
        return "Unknown coverage"
    if coverage_type in COVERAGE_TYPE_NAMES:
        return COVERAGE_TYPE_NAMES[coverage_type]
    return coverage_type.replace("_", " ").title()


def format_currency(amount: Optional[Union[Decimal, int]]) -> Optional[str]:
    """
    Format an amount the way certificates print it.

    >>> format_currency(Decimal("20000000"))
    '$20,000,000'
    >>> format_currency(Decimal("1500.50"))
    '$1,500.50'
    """
    if amount is None:
        return None
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def severity_presentation(severity: Severity) -> Presentation:
    """Badge for a deficiency severity."""
    if severity == Severity.CRITICAL:
        return Presentation(label="Critical", tone="danger")
    if severity == Severity.MAJOR:
        return Presentation(label="Major", tone="warning")
    return Presentation(label="Minor", tone="info")


def status_presentation(status: VerificationStatus) -> Presentation:
    """Badge for a verification verdict."""
    if status == VerificationStatus.PASS:
        return Presentation(label="Compliant", tone="success")
    if status == VerificationStatus.FAIL:
        return Presentation(label="Non-compliant", tone="danger")
    return Presentation(label="Needs review", tone="warning")


def confidence_band(
    score: Optional[Union[Decimal, int, float]],
    thresholds: VerificationThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """
    Band a 0-100 confidence score as high, medium or low.

    Missing scores are low.
    """
    if score is None:
        return "low"
    value = Decimal(str(score))
    if value >= thresholds.high_confidence_band:
        return "high"
    if value >= thresholds.medium_confidence_band:
        return "medium"
    return "low"
