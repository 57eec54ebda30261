"""
Tests for presentation helpers, compliance rollup and configuration.
"""
import pytest
from decimal import Decimal

from cocpilot import verify
from cocpilot.compliance import compliance_status_for, requires_deficiency_notice
from cocpilot.config import (
    DEFAULT_THRESHOLDS,
    VerificationThresholds,
    severity_for,
)
from cocpilot.models import (
    CheckType,
    ComplianceStatus,
    Severity,
    VerificationStatus,
)
from cocpilot.presentation import (
    confidence_band,
    format_coverage_type,
    format_currency,
    severity_presentation,
    status_presentation,
)

from tests.conftest import AS_OF, make_coverage, make_extracted_data, make_fraud


PL_20M = {"coverage_type": "public_liability", "minimum_limit": 20000000}


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:
    """Tests for display formatting."""

    def test_whole_amount(self):
        assert format_currency(Decimal("20000000")) == "$20,000,000"

    def test_int_amount(self):
        assert format_currency(5000) == "$5,000"

    def test_fractional_amount(self):
        assert format_currency(Decimal("1500.50")) == "$1,500.50"

    def test_missing_amount(self):
        assert format_currency(None) is None

    def test_known_coverage_type(self):
        assert format_coverage_type("workers_comp") == "Workers' Compensation"

    def test_unknown_coverage_type_is_titled(self):
        assert format_coverage_type("marine_cargo") == "Marine Cargo"

    def test_missing_coverage_type(self):
        assert format_coverage_type(None) == "Unknown coverage"


class TestBadges:
    """Tests for status and severity badges."""

    @pytest.mark.parametrize("severity,label,tone", [
        (Severity.CRITICAL, "Critical", "danger"),
        (Severity.MAJOR, "Major", "warning"),
        (Severity.MINOR, "Minor", "info"),
    ])
    def test_severity(self, severity, label, tone):
        badge = severity_presentation(severity)

        assert (badge.label, badge.tone) == (label, tone)

    @pytest.mark.parametrize("status,label,tone", [
        (VerificationStatus.PASS, "Compliant", "success"),
        (VerificationStatus.FAIL, "Non-compliant", "danger"),
        (VerificationStatus.REVIEW, "Needs review", "warning"),
    ])
    def test_status(self, status, label, tone):
        badge = status_presentation(status)

        assert (badge.label, badge.tone) == (label, tone)

    @pytest.mark.parametrize("score,band", [
        (None, "low"),
        (Decimal("95"), "high"),
        (80, "high"),
        (Decimal("79.9"), "medium"),
        (60, "medium"),
        (59.5, "low"),
    ])
    def test_confidence_band(self, score, band):
        assert confidence_band(score) == band


# =============================================================================
# Compliance Rollup
# =============================================================================

class TestCompliance:
    """Tests for the subcontractor compliance mapping."""

    def test_pass_is_compliant(self):
        verification = verify([PL_20M], make_extracted_data(), AS_OF)

        assert compliance_status_for(verification) == ComplianceStatus.COMPLIANT
        assert not requires_deficiency_notice(verification)

    def test_fail_is_non_compliant_with_notice(self):
        extracted = make_extracted_data(coverages=[make_coverage(limit=Decimal("5000000"))])

        verification = verify([PL_20M], extracted, AS_OF)

        assert compliance_status_for(verification) == ComplianceStatus.NON_COMPLIANT
        assert requires_deficiency_notice(verification)

    def test_review_is_pending_without_notice(self):
        verification = verify([PL_20M], None, AS_OF)

        assert compliance_status_for(verification) == ComplianceStatus.PENDING
        assert not requires_deficiency_notice(verification)

    def test_fraud_block_without_deficiencies_sends_no_notice(self):
        extracted = make_extracted_data(fraud_analysis=make_fraud(is_blocked=True))

        verification = verify([PL_20M], extracted, AS_OF)

        assert verification.status == VerificationStatus.FAIL
        assert compliance_status_for(verification) == ComplianceStatus.NON_COMPLIANT
        assert not requires_deficiency_notice(verification)


# =============================================================================
# Configuration
# =============================================================================

class TestThresholds:
    """Tests for threshold configuration."""

    def test_defaults(self):
        assert DEFAULT_THRESHOLDS.field_confidence_floor == Decimal("60")
        assert DEFAULT_THRESHOLDS.extraction_confidence_floor == Decimal("0.6")
        assert DEFAULT_THRESHOLDS.expiry_warning_days == 30

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("COC_FIELD_CONFIDENCE_FLOOR", "70")
        monkeypatch.setenv("COC_EXPIRY_WARNING_DAYS", "14")

        thresholds = VerificationThresholds.from_env()

        assert thresholds.field_confidence_floor == Decimal("70")
        assert thresholds.expiry_warning_days == 14
        assert thresholds.extraction_confidence_floor == Decimal("0.6")

    def test_from_env_without_overrides_matches_defaults(self, monkeypatch):
        for name in ("COC_FIELD_CONFIDENCE_FLOOR", "COC_EXPIRY_WARNING_DAYS"):
            monkeypatch.delenv(name, raising=False)

        assert VerificationThresholds.from_env().expiry_warning_days == 30

    @pytest.mark.parametrize("check_type,severity", [
        (CheckType.COVERAGE_MISSING, Severity.CRITICAL),
        (CheckType.POLICY_EXPIRED, Severity.CRITICAL),
        (CheckType.EXCESS_EXCEEDED, Severity.MAJOR),
        (CheckType.DATA_UNPARSEABLE, Severity.MAJOR),
        (CheckType.LOW_CONFIDENCE_FIELD, Severity.MINOR),
        (CheckType.POLICY_EXPIRING_SOON, Severity.MINOR),
    ])
    def test_severity_policy(self, check_type, severity):
        assert severity_for(check_type) == severity

    def test_pass_slot_types_default_to_major(self):
        assert severity_for(CheckType.COVERAGE_REQUIREMENT) == Severity.MAJOR
