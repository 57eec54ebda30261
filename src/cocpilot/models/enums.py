"""
CocPilot Enumerations

All enumeration types used throughout the verification engine.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Requirements
# =============================================================================

class LimitType(str, Enum):
    """How a coverage limit is expressed on the certificate."""
    PER_OCCURRENCE = "per_occurrence"
    AGGREGATE = "aggregate"
    PER_CLAIM = "per_claim"            # Professional indemnity
    STATUTORY = "statutory"            # Workers' compensation schemes


# =============================================================================
# Checks
# =============================================================================

class CheckStatus(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


class CheckType(str, Enum):
    """
    What a check tested.

    Failure types name the condition that was found. Pass slots
    (COVERAGE_REQUIREMENT, PROJECT_COVERAGE, WORKERS_COMP_STATE,
    ENTITY_VERIFICATION) name the thing that was verified.
    """
    # Requirement checks
    COVERAGE_REQUIREMENT = "coverage_requirement"
    COVERAGE_MISSING = "coverage_missing"
    LIMIT_INSUFFICIENT = "limit_insufficient"
    EXCESS_EXCEEDED = "excess_exceeded"
    PRINCIPAL_INDEMNITY_MISSING = "principal_indemnity_missing"
    CROSS_LIABILITY_MISSING = "cross_liability_missing"

    # Policy period
    POLICY_EXPIRED = "policy_expired"
    POLICY_EXPIRING_SOON = "policy_expiring_soon"
    PROJECT_COVERAGE = "project_coverage"
    POLICY_EXPIRES_BEFORE_PROJECT = "policy_expires_before_project"

    # Workers' compensation scheme
    WORKERS_COMP_STATE = "workers_comp_state"
    WORKERS_COMP_STATE_MISMATCH = "workers_comp_state_mismatch"

    # Insured entity
    ENTITY_VERIFICATION = "entity_verification"
    ENTITY_NAME_MISMATCH = "entity_name_mismatch"
    ABN_MISMATCH = "abn_mismatch"
    ABN_INVALID = "abn_invalid"

    # Data quality
    LOW_CONFIDENCE_FIELD = "low_confidence_field"
    DATA_UNPARSEABLE = "data_unparseable"
    MALFORMED_INPUT = "malformed_input"
    EXTRACTION_FAILED = "extraction_failed"


# =============================================================================
# Deficiencies
# =============================================================================

class Severity(str, Enum):
    """How serious a deficiency is for the verdict."""
    CRITICAL = "critical"              # Always fails the verification
    MAJOR = "major"                    # Needs human review
    MINOR = "minor"                    # Flagged, does not block


# =============================================================================
# Verdict
# =============================================================================

class VerificationStatus(str, Enum):
    """Terminal status of a verification run."""
    PASS = "pass"
    FAIL = "fail"
    REVIEW = "review"


class GateOutcome(str, Enum):
    """Effect of the confidence & fraud gate on the verdict."""
    CLEAR = "clear"
    FORCE_REVIEW = "force_review"
    FORCE_FAIL = "force_fail"


class RiskLevel(str, Enum):
    """Fraud risk level reported by the extraction service."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComplianceStatus(str, Enum):
    """Compliance rollup on a project subcontractor."""
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    PENDING = "pending"
