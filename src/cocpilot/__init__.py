"""
CocPilot - Certificate of Currency Verification Engine

CocPilot checks an insurance certificate of currency (COC) against a
project's insurance requirements and returns a verdict: pass, fail or
review. It never reads documents itself; an upstream extraction service
turns the PDF into structured data, and CocPilot decides.

Core Principle: "Critical gaps fail. Doubt goes to a human."

Key Features:
- Requirement matching by coverage type
- Itemized checks with exact currency comparison
- Severity-ranked deficiencies for notices
- Confidence and fraud gating
- Deterministic, hashable verdicts
- Standard requirement templates (YAML packs)

Quick Start:
    from datetime import date
    from cocpilot import verify

    verification = verify(
        requirements=[{"coverage_type": "public_liability", "minimum_limit": 20000000}],
        extracted_data=extraction_payload,
        as_of=date(2026, 3, 1),
    )
    print(verification.status, [d.description for d in verification.deficiencies])

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "CocPilot Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    # Enums
    CheckStatus,
    CheckType,
    ComplianceStatus,
    GateOutcome,
    LimitType,
    RiskLevel,
    Severity,
    VerificationStatus,
    # Requirements
    InsuranceRequirement,
    ProjectContext,
    SubcontractorIdentity,
    # Extraction
    Coverage,
    ExtractedData,
    FraudAnalysis,
    # Verification
    Check,
    Deficiency,
    GateResult,
    Verification,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import VerificationEngine, verify
from .config import DEFAULT_THRESHOLDS, VerificationThresholds
from .compliance import compliance_status_for, requires_deficiency_notice

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    CocPilotError,
    VerificationInputError,
    MalformedInputError,
    ExtractionAbsentError,
    InvalidNumericComparisonError,
    TemplateLoadError,
    TemplateValidationError,
    TemplateVersionMismatch,
    TemplateNotFoundError,
)

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Version
    "__version__",
    # Enums
    "CheckStatus",
    "CheckType",
    "ComplianceStatus",
    "GateOutcome",
    "LimitType",
    "RiskLevel",
    "Severity",
    "VerificationStatus",
    # Models
    "InsuranceRequirement",
    "ProjectContext",
    "SubcontractorIdentity",
    "Coverage",
    "ExtractedData",
    "FraudAnalysis",
    "Check",
    "Deficiency",
    "GateResult",
    "Verification",
    # Engine
    "VerificationEngine",
    "verify",
    "VerificationThresholds",
    "DEFAULT_THRESHOLDS",
    "compliance_status_for",
    "requires_deficiency_notice",
    # Exceptions
    "CocPilotError",
    "VerificationInputError",
    "MalformedInputError",
    "ExtractionAbsentError",
    "InvalidNumericComparisonError",
    "TemplateLoadError",
    "TemplateValidationError",
    "TemplateVersionMismatch",
    "TemplateNotFoundError",
]
