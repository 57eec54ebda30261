"""
CocPilot Configuration

One source of truth for the decision policy: confidence floors, fraud
score bands, the expiry warning window and the severity of every check type.

Defaults match what the compliance team signed off on. Each threshold can be
overridden per deployment through COC_* environment variables.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from .models.enums import CheckType, Severity


# =============================================================================
# Severity Policy
# =============================================================================

SEVERITY_BY_CHECK_TYPE: dict[CheckType, Severity] = {
    # Critical: the certificate does not provide the cover
    CheckType.COVERAGE_MISSING: Severity.CRITICAL,
    CheckType.LIMIT_INSUFFICIENT: Severity.CRITICAL,
    CheckType.POLICY_EXPIRED: Severity.CRITICAL,
    CheckType.POLICY_EXPIRES_BEFORE_PROJECT: Severity.CRITICAL,
    CheckType.WORKERS_COMP_STATE_MISMATCH: Severity.CRITICAL,
    # Major: needs human eyes
    CheckType.EXCESS_EXCEEDED: Severity.MAJOR,
    CheckType.PRINCIPAL_INDEMNITY_MISSING: Severity.MAJOR,
    CheckType.CROSS_LIABILITY_MISSING: Severity.MAJOR,
    CheckType.DATA_UNPARSEABLE: Severity.MAJOR,
    CheckType.MALFORMED_INPUT: Severity.MAJOR,
    CheckType.ENTITY_NAME_MISMATCH: Severity.MAJOR,
    CheckType.ABN_MISMATCH: Severity.MAJOR,
    CheckType.ABN_INVALID: Severity.MAJOR,
    CheckType.EXTRACTION_FAILED: Severity.MAJOR,
    # Minor: surfaced, never blocks
    CheckType.LOW_CONFIDENCE_FIELD: Severity.MINOR,
    CheckType.POLICY_EXPIRING_SOON: Severity.MINOR,
}


def severity_for(check_type: CheckType) -> Severity:
    """
    Look up the severity of a non-pass check.

    Unknown types are treated as major so they are never auto-passed.
    """
    return SEVERITY_BY_CHECK_TYPE.get(check_type, Severity.MAJOR)


# =============================================================================
# Thresholds
# =============================================================================

@dataclass(frozen=True)
class VerificationThresholds:
    """
    Numeric decision thresholds.

    Attributes:
        field_confidence_floor: Per-field confidence (0-100) below which a
            passing check is downgraded to a warning
        extraction_confidence_floor: Overall extraction confidence (0-1)
            below which the gate forces review
        expiry_warning_days: Policies ending within this many days of the
            verification date get a minor warning (0 disables)
        high_confidence_band: Confidence (0-100) shown as "high"
        medium_confidence_band: Confidence (0-100) shown as "medium"
        critical_risk_score: Fraud score at or above which risk is critical
        high_risk_score: Fraud score at or above which risk is high
        medium_risk_score: Fraud score at or above which risk is medium
    """
    field_confidence_floor: Decimal = Decimal("60")
    extraction_confidence_floor: Decimal = Decimal("0.6")
    expiry_warning_days: int = 30
    high_confidence_band: Decimal = Decimal("80")
    medium_confidence_band: Decimal = Decimal("60")
    critical_risk_score: Decimal = Decimal("80")
    high_risk_score: Decimal = Decimal("60")
    medium_risk_score: Decimal = Decimal("40")

    @classmethod
    def from_env(cls) -> "VerificationThresholds":
        """Build thresholds from COC_* environment variables."""
        defaults = cls()
        return cls(
            field_confidence_floor=Decimal(os.getenv(
                "COC_FIELD_CONFIDENCE_FLOOR", str(defaults.field_confidence_floor))),
            extraction_confidence_floor=Decimal(os.getenv(
                "COC_EXTRACTION_CONFIDENCE_FLOOR", str(defaults.extraction_confidence_floor))),
            expiry_warning_days=int(os.getenv(
                "COC_EXPIRY_WARNING_DAYS", str(defaults.expiry_warning_days))),
            high_confidence_band=Decimal(os.getenv(
                "COC_HIGH_CONFIDENCE_BAND", str(defaults.high_confidence_band))),
            medium_confidence_band=Decimal(os.getenv(
                "COC_MEDIUM_CONFIDENCE_BAND", str(defaults.medium_confidence_band))),
            critical_risk_score=Decimal(os.getenv(
                "COC_CRITICAL_RISK_SCORE", str(defaults.critical_risk_score))),
            high_risk_score=Decimal(os.getenv(
                "COC_HIGH_RISK_SCORE", str(defaults.high_risk_score))),
            medium_risk_score=Decimal(os.getenv(
                "COC_MEDIUM_RISK_SCORE", str(defaults.medium_risk_score))),
        )


DEFAULT_THRESHOLDS = VerificationThresholds()
