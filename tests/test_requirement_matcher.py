"""
Tests for the Requirement Matcher.

Tests cover:
- One pair per requirement, in order
- Case and separator insensitive coverage types
- Highest limit selection for repeated coverage types
- Malformed requirements and coverages
"""
import pytest
from decimal import Decimal

from cocpilot.engine import RequirementMatcher, match_requirements
from cocpilot.models import Coverage, InsuranceRequirement

from tests.conftest import make_coverage, make_requirement


class TestRequirementMatcher:
    """Tests for requirement/coverage pairing."""

    def test_pairs_follow_requirement_order(self):
        requirements = [
            make_requirement("workers_comp", minimum_limit=None),
            make_requirement("public_liability"),
        ]
        coverages = [make_coverage("public_liability"), make_coverage("workers_comp")]

        result = RequirementMatcher().match(requirements, coverages)

        assert [p.coverage_type for p in result.pairs] == ["workers_comp", "public_liability"]
        assert [p.index for p in result.pairs] == [0, 1]
        assert result.pairs[0].coverage.type == "workers_comp"

    def test_missing_coverage_pairs_with_none(self):
        requirements = [make_requirement("professional_indemnity")]

        result = match_requirements(requirements, [make_coverage("public_liability")])

        assert len(result.pairs) == 1
        assert result.pairs[0].coverage is None
        assert result.unmatched == result.pairs

    def test_coverage_type_match_is_case_insensitive(self):
        requirements = [make_requirement("public_liability")]
        coverages = [make_coverage("Public Liability")]

        result = match_requirements(requirements, coverages)

        assert result.pairs[0].coverage is coverages[0]

    def test_hyphenated_coverage_type_matches(self):
        requirements = [make_requirement("PUBLIC-LIABILITY")]
        coverages = [make_coverage("public_liability")]

        result = match_requirements(requirements, coverages)

        assert result.pairs[0].coverage is coverages[0]
        assert result.pairs[0].coverage_type == "public_liability"

    def test_highest_limit_wins(self):
        low = make_coverage(limit=Decimal("5000000"))
        high = make_coverage(limit=Decimal("20000000"))

        result = match_requirements([make_requirement()], [low, high])

        assert result.pairs[0].coverage is high

    def test_tie_keeps_first_coverage(self):
        first = make_coverage(limit=Decimal("10000000"), excess=Decimal("1000"))
        second = make_coverage(limit=Decimal("10000000"), excess=Decimal("2000"))

        result = match_requirements([make_requirement()], [first, second])

        assert result.pairs[0].coverage is first

    def test_parseable_limit_outranks_unparseable(self):
        unreadable = Coverage.from_dict({"type": "public_liability", "limit": "twenty million"})
        readable = make_coverage(limit=Decimal("1000000"))

        result = match_requirements([make_requirement()], [unreadable, readable])

        assert result.pairs[0].coverage is readable

    def test_requirement_without_type_is_malformed(self):
        requirements = [InsuranceRequirement(coverage_type=None), make_requirement()]

        result = match_requirements(requirements, [make_coverage()])

        assert len(result.pairs) == 2
        assert result.pairs[0].malformed
        assert result.pairs[0].coverage is None
        assert not result.pairs[1].malformed
        # Malformed requirements are not reported as missing coverage
        assert result.unmatched == []

    def test_coverage_without_type_is_reported(self):
        untyped = Coverage(type=None, limit=Decimal("1000000"))

        result = match_requirements([make_requirement()], [untyped, make_coverage()])

        assert len(result.malformed_coverages) == 1
        assert result.malformed_coverages[0].position == 0
        assert result.pairs[0].coverage.type == "public_liability"

    def test_no_requirements_no_pairs(self):
        result = match_requirements([], [make_coverage()])

        assert result.pairs == []

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_coverage_type_is_malformed(self, blank):
        result = match_requirements([InsuranceRequirement(coverage_type=blank)], [])

        assert result.pairs[0].malformed
