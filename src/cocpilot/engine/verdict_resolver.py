"""
CocPilot Verdict Resolver

Combines the gate decision and the deficiency list into pass, fail or review.

Precedence, first match wins:
1. Gate force_fail -> fail
2. Any critical deficiency -> fail
3. Gate force_review -> review
4. Any major deficiency -> review
5. Otherwise -> pass (minor deficiencies stay on the record)

A critical deficiency is never downgraded by a review gate, and minor
deficiencies alone never block.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from ..config import severity_for
from ..models import (
    Check,
    CheckStatus,
    CheckType,
    Deficiency,
    GateOutcome,
    GateResult,
    Severity,
    Verification,
    VerificationStatus,
)


EXTRACTION_FAILED_DETAILS = "No extracted data available; manual review required"


@dataclass
class VerdictResolver:
    """
    Resolves the final verification status.

    Usage:
        resolver = VerdictResolver()
        status = resolver.resolve(gate_result, deficiencies)
    """

    def resolve(
        self,
        gate: GateResult,
        deficiencies: Sequence[Deficiency],
    ) -> VerificationStatus:
        if gate.outcome == GateOutcome.FORCE_FAIL:
            return VerificationStatus.FAIL

        severities = {d.severity for d in deficiencies}
        if Severity.CRITICAL in severities:
            return VerificationStatus.FAIL

        if gate.outcome == GateOutcome.FORCE_REVIEW:
            return VerificationStatus.REVIEW

        if Severity.MAJOR in severities:
            return VerificationStatus.REVIEW

        return VerificationStatus.PASS

    def extraction_failed(
        self,
        as_of: date,
        *,
        input_hash: str = "",
        requirements_hash: str = "",
        engine_version: str = "",
    ) -> Verification:
        """
        Verification for a document whose extraction produced nothing.

        Status is review with a single extraction_failed warning and its
        major deficiency. Requirements are not evaluated.
        """
        check = Check(
            check_type=CheckType.EXTRACTION_FAILED,
            description="Document extraction",
            status=CheckStatus.WARNING,
            details=EXTRACTION_FAILED_DETAILS,
        )
        deficiency = Deficiency(
            type=CheckType.EXTRACTION_FAILED,
            severity=severity_for(CheckType.EXTRACTION_FAILED),
            description=EXTRACTION_FAILED_DETAILS,
        )
        return Verification(
            status=VerificationStatus.REVIEW,
            confidence_score=Decimal(0),
            extracted_data=None,
            checks=(check,),
            deficiencies=(deficiency,),
            verified_at=as_of,
            gate=GateResult(
                outcome=GateOutcome.FORCE_REVIEW,
                reasons=("Extraction produced no data",),
            ),
            input_hash=input_hash,
            requirements_hash=requirements_hash,
            engine_version=engine_version,
        )
