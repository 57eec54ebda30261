"""
CocPilot Confidence & Fraud Gate

Decides, before any deficiency is looked at, whether the extraction can be
trusted enough for an automatic verdict.

Rules, first match wins:
1. Fraud screening blocked the document -> force_fail
2. High or critical fraud risk, or overall extraction confidence below the
   floor (or missing) -> force_review
3. Otherwise -> clear

Per-field confidence never reaches the gate; it only downgrades the checks
that consulted the field.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..config import DEFAULT_THRESHOLDS, VerificationThresholds
from ..models import ExtractedData, FraudAnalysis, GateOutcome, GateResult, RiskLevel


logger = logging.getLogger(__name__)


def risk_level_for_score(
    score: Optional[Decimal],
    thresholds: VerificationThresholds = DEFAULT_THRESHOLDS,
) -> Optional[RiskLevel]:
    """Band a 0-100 fraud risk score. None when there is no score."""
    if score is None:
        return None
    if score >= thresholds.critical_risk_score:
        return RiskLevel.CRITICAL
    if score >= thresholds.high_risk_score:
        return RiskLevel.HIGH
    if score >= thresholds.medium_risk_score:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


@dataclass
class ConfidenceFraudGate:
    """
    Evaluates overall extraction confidence and fraud screening.

    Usage:
        gate = ConfidenceFraudGate()
        result = gate.evaluate(extracted)
        if result.outcome == GateOutcome.FORCE_FAIL:
            ...
    """

    thresholds: VerificationThresholds = DEFAULT_THRESHOLDS

    def evaluate(self, extracted: ExtractedData) -> GateResult:
        fraud = extracted.fraud_analysis

        if fraud is not None and fraud.is_blocked:
            reason = "Document blocked by fraud screening"
            if fraud.recommendation:
                reason = f"{reason}: {fraud.recommendation}"
            return GateResult(outcome=GateOutcome.FORCE_FAIL, reasons=(reason,))

        reasons = []

        risk_level = self.risk_level(fraud)
        if risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
            reasons.append(f"Fraud risk is {risk_level.value}")

        confidence = extracted.extraction_confidence
        if confidence is None:
            reasons.append("Extraction confidence not reported")
        elif confidence < self.thresholds.extraction_confidence_floor:
            reasons.append(
                f"Extraction confidence {confidence} is below "
                f"{self.thresholds.extraction_confidence_floor}"
            )

        if reasons:
            logger.debug("Gate forcing review: %s", "; ".join(reasons))
            return GateResult(outcome=GateOutcome.FORCE_REVIEW, reasons=tuple(reasons))

        return GateResult(outcome=GateOutcome.CLEAR)

    def risk_level(self, fraud: Optional[FraudAnalysis]) -> Optional[RiskLevel]:
        """Reported risk level, or the one implied by the score."""
        if fraud is None:
            return None
        if fraud.risk_level is not None:
            return fraud.risk_level
        return risk_level_for_score(fraud.risk_score, self.thresholds)
