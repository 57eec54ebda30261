"""
Pytest configuration and fixtures for CocPilot tests.

Provides helper factories and common fixtures matching actual model definitions.
"""
import pytest
from datetime import date
from decimal import Decimal

from cocpilot.models import (
    Coverage,
    ExtractedData,
    FraudAnalysis,
    InsuranceRequirement,
    LimitType,
    RiskLevel,
)


AS_OF = date(2026, 3, 1)

# Passes the ATO checksum
VALID_ABN = "51 824 753 556"


# =============================================================================
# Factory Helpers
# =============================================================================

def make_requirement(
    coverage_type: str = "public_liability",
    minimum_limit=Decimal("20000000"),
    maximum_excess=None,
    principal_indemnity_required: bool = False,
    cross_liability_required: bool = False,
    limit_type: LimitType = LimitType.PER_OCCURRENCE,
    **kwargs,
) -> InsuranceRequirement:
    """Create an InsuranceRequirement with sensible defaults."""
    return InsuranceRequirement(
        coverage_type=coverage_type,
        minimum_limit=minimum_limit,
        limit_type=limit_type,
        maximum_excess=maximum_excess,
        principal_indemnity_required=principal_indemnity_required,
        cross_liability_required=cross_liability_required,
        **kwargs,
    )


def make_coverage(
    type: str = "public_liability",
    limit=Decimal("20000000"),
    excess=Decimal("5000"),
    principal_indemnity: bool = True,
    cross_liability: bool = True,
    **kwargs,
) -> Coverage:
    """Create a Coverage with sensible defaults."""
    return Coverage(
        type=type,
        limit=limit,
        excess=excess,
        principal_indemnity=principal_indemnity,
        cross_liability=cross_liability,
        **kwargs,
    )


def make_fraud(
    risk_score=Decimal("10"),
    risk_level: RiskLevel = RiskLevel.LOW,
    is_blocked: bool = False,
    recommendation: str = None,
) -> FraudAnalysis:
    """Create a FraudAnalysis."""
    return FraudAnalysis(
        risk_score=risk_score,
        risk_level=risk_level,
        is_blocked=is_blocked,
        recommendation=recommendation,
    )


def make_extracted_data(
    coverages=None,
    period_end: date = date(2027, 6, 30),
    extraction_confidence=Decimal("0.92"),
    field_confidences=None,
    fraud_analysis=None,
    **kwargs,
) -> ExtractedData:
    """Create ExtractedData for a current, confident extraction."""
    if coverages is None:
        coverages = [make_coverage()]
    return ExtractedData(
        insured_party_name=kwargs.pop("insured_party_name", "Acme Scaffolding Pty Ltd"),
        insured_party_abn=kwargs.pop("insured_party_abn", VALID_ABN),
        insurer_name=kwargs.pop("insurer_name", "QBE Insurance"),
        policy_number=kwargs.pop("policy_number", "PL-2026-0042"),
        period_start=kwargs.pop("period_start", date(2026, 6, 30)),
        period_end=period_end,
        coverages=tuple(coverages),
        extraction_confidence=extraction_confidence,
        field_confidences=dict(field_confidences or {}),
        fraud_analysis=fraud_analysis,
        **kwargs,
    )


def make_extraction_payload(**overrides) -> dict:
    """Raw extraction service payload, as the API receives it."""
    payload = {
        "insured_party_name": "Acme Scaffolding Pty Ltd",
        "insured_party_abn": VALID_ABN,
        "insurer_name": "QBE Insurance",
        "policy_number": "PL-2026-0042",
        "period_of_insurance_start": "2026-06-30",
        "period_of_insurance_end": "2027-06-30",
        "coverages": [
            {
                "type": "public_liability",
                "limit": 20000000,
                "excess": 5000,
                "principal_indemnity": True,
                "cross_liability": True,
            },
        ],
        "extraction_confidence": 0.92,
        "field_confidences": {"public_liability_limit": 95},
        "fraud_analysis": {
            "overall_risk_score": 10,
            "risk_level": "low",
            "is_blocked": False,
            "recommendation": "Document appears authentic",
        },
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def public_liability_requirement():
    """PL $20M, excess up to $10k, PI and CL required."""
    return make_requirement(
        maximum_excess=Decimal("10000"),
        principal_indemnity_required=True,
        cross_liability_required=True,
    )


@pytest.fixture
def compliant_extraction():
    """A current PL certificate that meets the standard commercial PL requirement."""
    return make_extracted_data(
        field_confidences={
            "public_liability_limit": Decimal("95"),
            "public_liability_excess": Decimal("90"),
            "period_end": Decimal("98"),
        },
        fraud_analysis=make_fraud(),
    )
