"""
CocPilot Deficiency Aggregator

Converts every non-pass Check into exactly one Deficiency.

Severity comes from the policy table in config; the aggregator never
decides it on its own. Deficiencies are not deduplicated: two checks that
flag the same coverage produce two deficiencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..config import severity_for
from ..models import Check, Deficiency


@dataclass
class DeficiencyAggregator:
    """
    Derives deficiencies from checks.

    Usage:
        deficiencies = DeficiencyAggregator().aggregate(checks)
    """

    def aggregate(self, checks: Sequence[Check]) -> list[Deficiency]:
        """One Deficiency per non-pass check, in check order."""
        return [self.to_deficiency(check) for check in checks if not check.passed]

    def to_deficiency(self, check: Check) -> Deficiency:
        return Deficiency(
            type=check.check_type,
            severity=severity_for(check.check_type),
            description=check.details,
            required_value=check.required_value,
            actual_value=check.actual_value,
            coverage_type=check.coverage_type,
        )


def aggregate_deficiencies(checks: Sequence[Check]) -> list[Deficiency]:
    """Convenience function that creates a temporary aggregator."""
    return DeficiencyAggregator().aggregate(checks)
