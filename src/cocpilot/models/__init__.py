"""
CocPilot Models

All domain models for certificate of currency verification.

    from cocpilot.models import (
        # Enums
        CheckStatus, CheckType, Severity, VerificationStatus,
        # Requirements
        InsuranceRequirement, ProjectContext, SubcontractorIdentity,
        # Extraction
        ExtractedData, Coverage, FraudAnalysis,
        # Verification
        Check, Deficiency, GateResult, Verification,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    CheckStatus,
    CheckType,
    ComplianceStatus,
    GateOutcome,
    LimitType,
    RiskLevel,
    Severity,
    VerificationStatus,
)

# =============================================================================
# Requirements
# =============================================================================
from .requirements import (
    InsuranceRequirement,
    ProjectContext,
    SubcontractorIdentity,
)

# =============================================================================
# Extraction
# =============================================================================
from .extraction import (
    Coverage,
    ExtractedData,
    FraudAnalysis,
)

# =============================================================================
# Verification
# =============================================================================
from .verification import (
    Check,
    Deficiency,
    GateResult,
    Verification,
)

# =============================================================================
# Templates
# =============================================================================
from .template import RequirementTemplate

__all__ = [
    # Enums
    "CheckStatus",
    "CheckType",
    "ComplianceStatus",
    "GateOutcome",
    "LimitType",
    "RiskLevel",
    "Severity",
    "VerificationStatus",
    # Requirements
    "InsuranceRequirement",
    "ProjectContext",
    "SubcontractorIdentity",
    # Extraction
    "Coverage",
    "ExtractedData",
    "FraudAnalysis",
    # Verification
    "Check",
    "Deficiency",
    "GateResult",
    "Verification",
    # Templates
    "RequirementTemplate",
]
