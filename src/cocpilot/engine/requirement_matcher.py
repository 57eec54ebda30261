"""
CocPilot Requirement Matcher

Aligns the coverages read from a certificate with a project's requirements.

Key features:
- One pair per requirement, in requirement order (never dropped)
- Case-insensitive, underscore-normalized coverage type matching
- Highest limit wins when the extractor returns a type more than once
- Coverages without a type are reported, not matched
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Sequence

from ..exceptions import InvalidNumericComparisonError
from ..models import Coverage, InsuranceRequirement
from ..normalize import normalize_coverage_type, parse_optional_amount


logger = logging.getLogger(__name__)


# =============================================================================
# Match Results
# =============================================================================

@dataclass(frozen=True)
class RequirementMatch:
    """
    A requirement and the coverage selected for it.

    coverage is None when the certificate has no coverage of the type.
    malformed is set when the requirement itself has no coverage type.
    """
    requirement: InsuranceRequirement
    coverage: Optional[Coverage]
    index: int
    coverage_type: Optional[str] = None
    malformed: bool = False


@dataclass(frozen=True)
class MalformedCoverage:
    """A coverage entry that cannot be matched to anything."""
    coverage: Coverage
    position: int
    reason: str


@dataclass
class MatchResult:
    """Output of the matcher."""
    pairs: list[RequirementMatch] = field(default_factory=list)
    malformed_coverages: list[MalformedCoverage] = field(default_factory=list)

    @property
    def unmatched(self) -> list[RequirementMatch]:
        return [p for p in self.pairs if p.coverage is None and not p.malformed]


# =============================================================================
# Requirement Matcher
# =============================================================================

def _limit_rank(coverage: Coverage) -> tuple[int, Decimal]:
    """
    Sort key for choosing among coverages of one type.

    Parseable limits outrank unparseable or missing ones.
    """
    if coverage.invalid_value("limit") is not None:
        return (0, Decimal(0))
    try:
        limit = parse_optional_amount(coverage.limit, "limit")
    except InvalidNumericComparisonError:
        return (0, Decimal(0))
    if limit is None:
        return (0, Decimal(0))
    return (1, limit)


@dataclass
class RequirementMatcher:
    """
    Pairs each requirement with the best coverage of its type.

    Usage:
        matcher = RequirementMatcher()
        result = matcher.match(requirements, extracted.coverages)
        for pair in result.pairs:
            print(pair.requirement.coverage_type, pair.coverage)
    """

    def match(
        self,
        requirements: Sequence[InsuranceRequirement],
        coverages: Sequence[Coverage],
    ) -> MatchResult:
        """
        Match requirements against extracted coverages.

        Args:
            requirements: Project requirements, in configured order
            coverages: Coverages from the extraction, in extraction order

        Returns:
            MatchResult with one pair per requirement
        """
        result = MatchResult()
        by_type = self._index_coverages(coverages, result)

        for index, requirement in enumerate(requirements):
            coverage_type = normalize_coverage_type(requirement.coverage_type)
            if coverage_type is None:
                logger.warning(
                    "Requirement %d has no coverage_type; skipping", index,
                    extra={"requirement_id": requirement.id},
                )
                result.pairs.append(RequirementMatch(
                    requirement=requirement,
                    coverage=None,
                    index=index,
                    malformed=True,
                ))
                continue

            result.pairs.append(RequirementMatch(
                requirement=requirement,
                coverage=self._select(by_type.get(coverage_type, [])),
                index=index,
                coverage_type=coverage_type,
            ))

        return result

    def _index_coverages(
        self,
        coverages: Sequence[Coverage],
        result: MatchResult,
    ) -> dict[str, list[Coverage]]:
        """Group coverages by normalized type, keeping extraction order."""
        by_type: dict[str, list[Coverage]] = {}
        for position, coverage in enumerate(coverages):
            coverage_type = normalize_coverage_type(coverage.type)
            if coverage_type is None:
                logger.warning("Coverage %d has no type; skipping", position)
                raw_entry = coverage.invalid_value("entry")
                result.malformed_coverages.append(MalformedCoverage(
                    coverage=coverage,
                    position=position,
                    reason=(
                        f"Coverage entry is not an object: {raw_entry}" if raw_entry
                        else "Coverage entry has no coverage type"
                    ),
                ))
                continue
            by_type.setdefault(coverage_type, []).append(coverage)
        return by_type

    def _select(self, candidates: list[Coverage]) -> Optional[Coverage]:
        """Pick the highest-limit candidate; ties keep the first."""
        best: Optional[Coverage] = None
        for candidate in candidates:
            if best is None or _limit_rank(candidate) > _limit_rank(best):
                best = candidate
        return best


def match_requirements(
    requirements: Sequence[InsuranceRequirement],
    coverages: Sequence[Coverage],
) -> MatchResult:
    """
    Match requirements against coverages.

    Convenience function that creates a temporary matcher.
    """
    return RequirementMatcher().match(requirements, coverages)
