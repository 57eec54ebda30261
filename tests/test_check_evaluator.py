"""
Tests for the Check Evaluator.

Tests cover:
- Limit, excess and endorsement comparisons
- One check per triggered failure
- Low-confidence downgrade of passing checks
- Unparseable and malformed data
- Structural checks (currency, project period, WC state, entity)
- Check ordering
"""
import pytest
from datetime import date, timedelta
from decimal import Decimal

from cocpilot.config import VerificationThresholds
from cocpilot.engine import CheckEvaluator, match_requirements
from cocpilot.models import (
    CheckStatus,
    CheckType,
    Coverage,
    ExtractedData,
    InsuranceRequirement,
    ProjectContext,
    SubcontractorIdentity,
)

from tests.conftest import (
    AS_OF,
    VALID_ABN,
    make_coverage,
    make_extracted_data,
    make_requirement,
)


def evaluate(requirements, extracted, as_of=AS_OF, **kwargs):
    match_result = match_requirements(requirements, extracted.coverages)
    return CheckEvaluator().evaluate(match_result, extracted, as_of, **kwargs)


def requirement_checks(checks):
    return [c for c in checks if c.requirement_index is not None]


# =============================================================================
# Requirement Checks
# =============================================================================

class TestRequirementChecks:
    """Tests for per-requirement comparisons."""

    def test_meeting_requirement_passes(self, public_liability_requirement, compliant_extraction):
        checks = evaluate([public_liability_requirement], compliant_extraction)

        req_checks = requirement_checks(checks)
        assert len(req_checks) == 1
        assert req_checks[0].check_type == CheckType.COVERAGE_REQUIREMENT
        assert req_checks[0].status == CheckStatus.PASS
        assert req_checks[0].coverage_type == "public_liability"

    def test_missing_coverage_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage("public_liability")])

        checks = evaluate([make_requirement("professional_indemnity", Decimal("5000000"))], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.COVERAGE_MISSING
        assert check.status == CheckStatus.FAIL
        assert check.required_value == "$5,000,000"
        assert check.actual_value == "Not found"
        assert "Professional Indemnity" in check.details

    def test_limit_below_minimum_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(limit=Decimal("10000000"))])

        checks = evaluate([make_requirement(minimum_limit=Decimal("20000000"))], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.LIMIT_INSUFFICIENT
        assert check.status == CheckStatus.FAIL
        assert check.required_value == "$20,000,000"
        assert check.actual_value == "$10,000,000"

    def test_limit_equal_to_minimum_passes(self):
        extracted = make_extracted_data(coverages=[make_coverage(limit=Decimal("20000000"))])

        checks = evaluate([make_requirement(minimum_limit=Decimal("20000000"))], extracted)

        assert requirement_checks(checks)[0].status == CheckStatus.PASS

    def test_limit_one_cent_short_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(limit=Decimal("19999999.99"))])

        checks = evaluate([make_requirement(minimum_limit=Decimal("20000000"))], extracted)

        assert requirement_checks(checks)[0].check_type == CheckType.LIMIT_INSUFFICIENT

    def test_excess_above_maximum_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(excess=Decimal("15000"))])

        checks = evaluate([make_requirement(maximum_excess=Decimal("10000"))], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.EXCESS_EXCEEDED
        assert check.required_value == "Max $10,000"
        assert check.actual_value == "$15,000"

    def test_excess_equal_to_maximum_passes(self):
        extracted = make_extracted_data(coverages=[make_coverage(excess=Decimal("10000"))])

        checks = evaluate([make_requirement(maximum_excess=Decimal("10000"))], extracted)

        assert requirement_checks(checks)[0].status == CheckStatus.PASS

    def test_no_excess_cap_ignores_excess(self):
        extracted = make_extracted_data(coverages=[make_coverage(excess=Decimal("999999"))])

        checks = evaluate([make_requirement(maximum_excess=None)], extracted)

        assert requirement_checks(checks)[0].status == CheckStatus.PASS

    def test_principal_indemnity_missing_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(principal_indemnity=False)])

        checks = evaluate([make_requirement(principal_indemnity_required=True)], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.PRINCIPAL_INDEMNITY_MISSING
        assert check.required_value == "Yes"
        assert check.actual_value == "No"

    def test_principal_indemnity_unknown_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(principal_indemnity=None)])

        checks = evaluate([make_requirement(principal_indemnity_required=True)], extracted)

        assert requirement_checks(checks)[0].check_type == CheckType.PRINCIPAL_INDEMNITY_MISSING

    def test_cross_liability_missing_fails(self):
        extracted = make_extracted_data(coverages=[make_coverage(cross_liability=False)])

        checks = evaluate([make_requirement(cross_liability_required=True)], extracted)

        assert requirement_checks(checks)[0].check_type == CheckType.CROSS_LIABILITY_MISSING

    def test_every_failure_is_its_own_check(self):
        coverage = make_coverage(
            limit=Decimal("5000000"),
            excess=Decimal("50000"),
            principal_indemnity=False,
            cross_liability=False,
        )
        extracted = make_extracted_data(coverages=[coverage])
        requirement = make_requirement(
            maximum_excess=Decimal("10000"),
            principal_indemnity_required=True,
            cross_liability_required=True,
        )

        checks = requirement_checks(evaluate([requirement], extracted))

        assert [c.check_type for c in checks] == [
            CheckType.LIMIT_INSUFFICIENT,
            CheckType.EXCESS_EXCEEDED,
            CheckType.PRINCIPAL_INDEMNITY_MISSING,
            CheckType.CROSS_LIABILITY_MISSING,
        ]
        assert all(c.status == CheckStatus.FAIL for c in checks)

    def test_no_minimum_only_checks_presence(self):
        extracted = make_extracted_data(coverages=[make_coverage("workers_comp", limit=None)])

        checks = evaluate([make_requirement("workers_comp", minimum_limit=None)], extracted)

        check = requirement_checks(checks)[0]
        assert check.status == CheckStatus.PASS
        assert check.details == "Workers' Compensation coverage present"


# =============================================================================
# Confidence Downgrade
# =============================================================================

class TestLowConfidence:
    """Tests for per-field confidence handling."""

    def test_low_confidence_field_downgrades_pass_to_warning(self):
        extracted = make_extracted_data(field_confidences={"public_liability_limit": Decimal("45")})

        checks = evaluate([make_requirement()], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.LOW_CONFIDENCE_FIELD
        assert check.status == CheckStatus.WARNING
        assert check.fields == ("public_liability_limit",)

    def test_confidence_at_floor_is_not_low(self):
        extracted = make_extracted_data(field_confidences={"public_liability_limit": Decimal("60")})

        checks = evaluate([make_requirement()], extracted)

        assert requirement_checks(checks)[0].status == CheckStatus.PASS

    def test_unconsulted_low_field_is_ignored(self):
        extracted = make_extracted_data(field_confidences={"public_liability_excess": Decimal("10")})

        # No excess cap, so the excess field is never consulted
        checks = evaluate([make_requirement(maximum_excess=None)], extracted)

        assert requirement_checks(checks)[0].status == CheckStatus.PASS

    def test_failure_is_not_downgraded(self):
        extracted = make_extracted_data(
            coverages=[make_coverage(limit=Decimal("1000000"))],
            field_confidences={"public_liability_limit": Decimal("20")},
        )

        checks = evaluate([make_requirement()], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.LIMIT_INSUFFICIENT
        assert check.status == CheckStatus.FAIL

    def test_floor_comes_from_thresholds(self):
        extracted = make_extracted_data(field_confidences={"public_liability_limit": Decimal("70")})
        match_result = match_requirements([make_requirement()], extracted.coverages)
        evaluator = CheckEvaluator(thresholds=VerificationThresholds(field_confidence_floor=Decimal("75")))

        checks = evaluator.evaluate(match_result, extracted, AS_OF)

        assert checks[0].check_type == CheckType.LOW_CONFIDENCE_FIELD


# =============================================================================
# Unparseable and Malformed Data
# =============================================================================

class TestUnparseableData:
    """Tests that bad data becomes checks, never exceptions."""

    def test_text_limit_is_unparseable(self):
        coverage = Coverage.from_dict({"type": "public_liability", "limit": "$20M"})
        extracted = make_extracted_data(coverages=[coverage])

        checks = evaluate([make_requirement()], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.DATA_UNPARSEABLE
        assert check.status == CheckStatus.FAIL
        assert check.actual_value == "'$20M'"

    def test_unparseable_requirement_minimum(self):
        requirement = InsuranceRequirement.from_dict({
            "coverage_type": "public_liability",
            "minimum_limit": "lots",
        })
        extracted = make_extracted_data()

        checks = evaluate([requirement], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.DATA_UNPARSEABLE
        assert "requirement" in check.details

    def test_missing_limit_against_minimum_is_unparseable(self):
        extracted = make_extracted_data(coverages=[make_coverage(limit=None)])

        checks = evaluate([make_requirement()], extracted)

        check = requirement_checks(checks)[0]
        assert check.check_type == CheckType.DATA_UNPARSEABLE
        assert check.actual_value == "Not stated"

    def test_unparseable_excess(self):
        coverage = Coverage.from_dict({"type": "public_liability", "limit": 20000000, "excess": "nil"})
        extracted = make_extracted_data(coverages=[coverage])

        checks = evaluate([make_requirement(maximum_excess=Decimal("10000"))], extracted)

        assert requirement_checks(checks)[0].check_type == CheckType.DATA_UNPARSEABLE

    def test_requirement_without_type_is_malformed_warning(self):
        extracted = make_extracted_data()

        checks = evaluate([InsuranceRequirement(coverage_type=None)], extracted)

        check = checks[0]
        assert check.check_type == CheckType.MALFORMED_INPUT
        assert check.status == CheckStatus.WARNING
        assert check.requirement_index == 0

    def test_untyped_coverage_check_comes_before_structural(self):
        extracted = make_extracted_data(coverages=[Coverage(type=None), make_coverage()])

        checks = evaluate([make_requirement()], extracted)

        assert [c.check_type for c in checks] == [
            CheckType.COVERAGE_REQUIREMENT,
            CheckType.MALFORMED_INPUT,
            CheckType.POLICY_EXPIRED,
        ]


# =============================================================================
# Structural Checks
# =============================================================================

class TestPolicyCurrency:
    """Tests for the policy currency check."""

    def test_current_policy_passes(self):
        checks = evaluate([], make_extracted_data(period_end=date(2027, 6, 30)))

        assert len(checks) == 1
        assert checks[0].check_type == CheckType.POLICY_EXPIRED
        assert checks[0].status == CheckStatus.PASS

    def test_expired_policy_fails(self):
        checks = evaluate([], make_extracted_data(period_end=date(2026, 2, 28)))

        check = checks[0]
        assert check.check_type == CheckType.POLICY_EXPIRED
        assert check.status == CheckStatus.FAIL
        assert check.required_value == "2026-03-01"
        assert check.actual_value == "2026-02-28"

    def test_policy_ending_on_as_of_is_not_expired(self):
        checks = evaluate([], make_extracted_data(period_end=AS_OF))

        assert checks[0].check_type == CheckType.POLICY_EXPIRING_SOON
        assert checks[0].status == CheckStatus.WARNING

    def test_expiring_within_window_warns(self):
        checks = evaluate([], make_extracted_data(period_end=AS_OF + timedelta(days=30)))

        assert checks[0].check_type == CheckType.POLICY_EXPIRING_SOON
        assert "30 days" in checks[0].details

    def test_expiring_after_window_passes(self):
        checks = evaluate([], make_extracted_data(period_end=AS_OF + timedelta(days=31)))

        assert checks[0].status == CheckStatus.PASS

    def test_missing_period_end_is_unparseable(self):
        checks = evaluate([], make_extracted_data(period_end=None))

        assert checks[0].check_type == CheckType.DATA_UNPARSEABLE
        assert checks[0].actual_value == "Not stated"

    def test_garbled_period_end_is_unparseable(self):
        extracted = ExtractedData.from_dict({"period_end": "next June", "extraction_confidence": 0.9})

        checks = evaluate([], extracted)

        assert checks[0].check_type == CheckType.DATA_UNPARSEABLE
        assert "next June" in checks[0].details

    def test_low_confidence_period_end_downgrades(self):
        extracted = make_extracted_data(field_confidences={"period_of_insurance_end": Decimal("40")})

        checks = evaluate([], extracted)

        assert checks[0].check_type == CheckType.LOW_CONFIDENCE_FIELD
        assert checks[0].fields == ("period_end",)


class TestProjectChecks:
    """Tests for project period and workers' compensation state checks."""

    def test_policy_covering_project_passes(self):
        project = ProjectContext(end_date=date(2027, 1, 31))

        checks = evaluate([], make_extracted_data(period_end=date(2027, 6, 30)), project=project)

        assert checks[1].check_type == CheckType.PROJECT_COVERAGE
        assert checks[1].status == CheckStatus.PASS

    def test_policy_ending_before_project_fails(self):
        project = ProjectContext(end_date=date(2027, 12, 31))

        checks = evaluate([], make_extracted_data(period_end=date(2027, 6, 30)), project=project)

        check = checks[1]
        assert check.check_type == CheckType.POLICY_EXPIRES_BEFORE_PROJECT
        assert check.status == CheckStatus.FAIL
        assert check.required_value == "Valid until 2027-12-31"

    def test_no_project_no_project_check(self):
        checks = evaluate([], make_extracted_data())

        assert [c.check_type for c in checks] == [CheckType.POLICY_EXPIRED]

    def test_workers_comp_state_mismatch_fails(self):
        wc = make_coverage("workers_comp", limit=None, state="VIC")
        extracted = make_extracted_data(coverages=[wc])

        checks = evaluate(
            [make_requirement("workers_comp", minimum_limit=None)],
            extracted,
            project=ProjectContext(state="NSW"),
        )

        check = checks[-1]
        assert check.check_type == CheckType.WORKERS_COMP_STATE_MISMATCH
        assert check.status == CheckStatus.FAIL
        assert check.required_value == "NSW scheme"
        assert check.actual_value == "VIC scheme"

    def test_workers_comp_state_match_passes(self):
        wc = make_coverage("workers_comp", limit=None, state="NSW")
        extracted = make_extracted_data(coverages=[wc])

        checks = evaluate(
            [make_requirement("workers_comp", minimum_limit=None)],
            extracted,
            project=ProjectContext.from_dict({"state": "nsw"}),
        )

        assert checks[-1].check_type == CheckType.WORKERS_COMP_STATE
        assert checks[-1].status == CheckStatus.PASS

    def test_workers_comp_without_state_is_skipped(self):
        wc = make_coverage("workers_comp", limit=None)
        extracted = make_extracted_data(coverages=[wc])

        checks = evaluate(
            [make_requirement("workers_comp", minimum_limit=None)],
            extracted,
            project=ProjectContext(state="NSW"),
        )

        assert CheckType.WORKERS_COMP_STATE not in [c.check_type for c in checks]
        assert CheckType.WORKERS_COMP_STATE_MISMATCH not in [c.check_type for c in checks]


class TestEntityChecks:
    """Tests for insured entity verification."""

    def test_matching_entity_passes(self):
        identity = SubcontractorIdentity(name="ACME SCAFFOLDING", abn="51824753556")

        checks = evaluate([], make_extracted_data(), subcontractor=identity)

        assert checks[-1].check_type == CheckType.ENTITY_VERIFICATION
        assert checks[-1].status == CheckStatus.PASS

    def test_name_mismatch_fails(self):
        identity = SubcontractorIdentity(name="Bravo Plumbing Pty Ltd")

        checks = evaluate([], make_extracted_data(), subcontractor=identity)

        assert checks[-1].check_type == CheckType.ENTITY_NAME_MISMATCH
        assert checks[-1].actual_value == "Acme Scaffolding Pty Ltd"

    def test_abn_mismatch_fails(self):
        identity = SubcontractorIdentity(abn="53 004 085 616")

        checks = evaluate([], make_extracted_data(), subcontractor=identity)

        assert checks[-1].check_type == CheckType.ABN_MISMATCH

    def test_invalid_abn_checksum_fails(self):
        extracted = make_extracted_data(insured_party_abn="12 345 678 901")

        checks = evaluate([], extracted, subcontractor=SubcontractorIdentity())

        assert checks[-1].check_type == CheckType.ABN_INVALID
        assert checks[-1].details == "ABN checksum validation failed"

    def test_entity_check_order(self):
        extracted = make_extracted_data(
            insured_party_name="Someone Else",
            insured_party_abn="12345678901",
        )
        identity = SubcontractorIdentity(name="Acme Scaffolding", abn=VALID_ABN)

        checks = evaluate([], extracted, subcontractor=identity)

        assert [c.check_type for c in checks[1:]] == [
            CheckType.ENTITY_NAME_MISMATCH,
            CheckType.ABN_MISMATCH,
            CheckType.ABN_INVALID,
        ]


class TestCheckOrdering:
    """Tests for deterministic check order."""

    def test_requirement_checks_then_structural(self):
        requirements = [
            make_requirement("professional_indemnity", Decimal("5000000")),
            make_requirement("public_liability"),
        ]
        extracted = make_extracted_data()
        project = ProjectContext(end_date=date(2027, 1, 1))

        checks = evaluate(requirements, extracted, project=project)

        assert [c.check_type for c in checks] == [
            CheckType.COVERAGE_MISSING,
            CheckType.COVERAGE_REQUIREMENT,
            CheckType.POLICY_EXPIRED,
            CheckType.PROJECT_COVERAGE,
        ]

    @pytest.mark.parametrize("run", range(3))
    def test_repeated_evaluation_is_identical(self, run, public_liability_requirement, compliant_extraction):
        first = evaluate([public_liability_requirement], compliant_extraction)
        second = evaluate([public_liability_requirement], compliant_extraction)

        assert first == second
