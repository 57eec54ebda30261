"""
CocPilot Engine

The verification pipeline.

Services:
- RequirementMatcher: Pair requirements with extracted coverages
- CheckEvaluator: Produce itemized checks
- DeficiencyAggregator: Derive deficiencies from non-pass checks
- ConfidenceFraudGate: Force review or failure on untrusted extractions
- VerdictResolver: Combine gate and deficiencies into a status
- VerificationEngine: Run the whole pipeline

Usage:
    from cocpilot.engine import VerificationEngine, verify
"""
from __future__ import annotations

from .requirement_matcher import (
    MalformedCoverage,
    MatchResult,
    RequirementMatch,
    RequirementMatcher,
    match_requirements,
)
from .check_evaluator import CheckEvaluator
from .deficiency_aggregator import DeficiencyAggregator, aggregate_deficiencies
from .confidence_gate import ConfidenceFraudGate, risk_level_for_score
from .verdict_resolver import VerdictResolver
from .verifier import VerificationEngine, verify

__all__ = [
    # Matching
    "MalformedCoverage",
    "MatchResult",
    "RequirementMatch",
    "RequirementMatcher",
    "match_requirements",
    # Checks
    "CheckEvaluator",
    # Deficiencies
    "DeficiencyAggregator",
    "aggregate_deficiencies",
    # Gate
    "ConfidenceFraudGate",
    "risk_level_for_score",
    # Verdict
    "VerdictResolver",
    # Facade
    "VerificationEngine",
    "verify",
]
