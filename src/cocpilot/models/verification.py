"""
CocPilot Verification Models

The output of a verification run.

Key components:
- Check: One itemized test and its outcome
- Deficiency: A way the certificate falls short, derived from a Check
- GateResult: What the confidence & fraud gate decided, and why
- Verification: The terminal, immutable compliance determination

A Verification is never mutated. Re-verifying a document produces a new
Verification; the caller persists both.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from .enums import (
    CheckStatus,
    CheckType,
    GateOutcome,
    Severity,
    VerificationStatus,
)
from .extraction import ExtractedData
from .requirements import _amount_out


# =============================================================================
# Check
# =============================================================================

@dataclass(frozen=True)
class Check:
    """
    A single itemized check.

    Attributes:
        check_type: What was tested (or the failure found)
        description: Short label for display
        status: pass | fail | warning
        details: Explanation citing the values compared
        coverage_type: Coverage the check concerns, None for structural checks
        requirement_index: Position of the requirement in the input list
        fields: Field-confidence keys the check relied on
        required_value: Value demanded, formatted for display
        actual_value: Value found, formatted for display
    """
    check_type: CheckType
    description: str
    status: CheckStatus
    details: str
    coverage_type: Optional[str] = None
    requirement_index: Optional[int] = None
    fields: tuple[str, ...] = ()
    required_value: Optional[str] = None
    actual_value: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASS

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "check_type": self.check_type.value,
            "description": self.description,
            "status": self.status.value,
            "details": self.details,
            "coverage_type": self.coverage_type,
            "requirement_index": self.requirement_index,
            "fields": list(self.fields),
        }


# =============================================================================
# Deficiency
# =============================================================================

@dataclass(frozen=True)
class Deficiency:
    """
    A specific way a certificate fails a project's requirements.

    Attributes:
        type: Check type the deficiency came from
        severity: critical | major | minor
        description: What is wrong, for the deficiency notice
        required_value: What the project requires, if comparable
        actual_value: What the certificate shows, if comparable
        coverage_type: Coverage concerned, None for structural issues
    """
    type: CheckType
    severity: Severity
    description: str
    required_value: Optional[str] = None
    actual_value: Optional[str] = None
    coverage_type: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "required_value": self.required_value,
            "actual_value": self.actual_value,
            "coverage_type": self.coverage_type,
        }


# =============================================================================
# Gate Result
# =============================================================================

@dataclass(frozen=True)
class GateResult:
    """Decision of the confidence & fraud gate."""
    outcome: GateOutcome
    reasons: tuple[str, ...] = ()

    @property
    def is_clear(self) -> bool:
        return self.outcome == GateOutcome.CLEAR

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "reasons": list(self.reasons),
        }


# =============================================================================
# Verification
# =============================================================================

@dataclass(frozen=True)
class Verification:
    """
    The authoritative compliance determination for one COC document.

    Attributes:
        status: pass | fail | review
        confidence_score: Overall extraction confidence (0-1)
        extracted_data: The extraction the verdict was computed from
        checks: Itemized checks, in evaluation order
        deficiencies: Deficiencies derived from non-pass checks
        verified_at: The as-of date the run was evaluated against
        gate: Confidence & fraud gate decision
        flagged_fields: Low-confidence fields to highlight for reviewers
        input_hash: SHA-256 of the canonical inputs
        requirements_hash: SHA-256 of the requirement snapshot
        engine_version: CocPilot version that produced the verdict
    """
    status: VerificationStatus
    confidence_score: Decimal
    extracted_data: Optional[ExtractedData]
    checks: tuple[Check, ...]
    deficiencies: tuple[Deficiency, ...]
    verified_at: date
    gate: GateResult
    flagged_fields: tuple[str, ...] = ()
    input_hash: str = ""
    requirements_hash: str = ""
    engine_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for persistence and the API."""
        return {
            "status": self.status.value,
            "confidence_score": _amount_out(self.confidence_score),
            "extracted_data": self.extracted_data.to_dict() if self.extracted_data else None,
            "checks": [c.to_dict() for c in self.checks],
            "deficiencies": [d.to_dict() for d in self.deficiencies],
            "verified_at": self.verified_at.isoformat(),
            "gate": self.gate.to_dict(),
            "flagged_fields": list(self.flagged_fields),
            "input_hash": self.input_hash,
            "requirements_hash": self.requirements_hash,
            "engine_version": self.engine_version,
        }
