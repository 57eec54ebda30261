"""
CocPilot Check Evaluator

Turns matched requirements and the extracted policy into itemized Checks.

Key features:
- Typed comparisons per requirement (limit, excess, endorsements)
- Exact Decimal comparison of currency amounts, no tolerance
- Every triggered failure is its own Check
- Passing checks built on low-confidence fields become warnings
- Fixed structural checks (policy currency, project period, WC scheme,
  insured entity) after the requirement checks
- Deterministic order: requirement order, malformed coverages, structural

Unparseable or malformed data produces a Check, never an exception.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..abn import abn_checksum_error
from ..config import DEFAULT_THRESHOLDS, VerificationThresholds
from ..exceptions import InvalidNumericComparisonError
from ..models import (
    Check,
    CheckStatus,
    CheckType,
    Coverage,
    ExtractedData,
    InsuranceRequirement,
    ProjectContext,
    SubcontractorIdentity,
)
from ..normalize import normalize_abn, normalize_entity_name, parse_optional_amount
from ..presentation import format_coverage_type, format_currency
from .requirement_matcher import MalformedCoverage, MatchResult, RequirementMatch


logger = logging.getLogger(__name__)

WORKERS_COMP = "workers_comp"

PERIOD_END_FIELDS = ("period_end", "period_of_insurance_end")


class _Unparseable(Exception):
    """Internal signal: an amount could not be compared."""

    def __init__(self, side: str, field_name: str, raw: str) -> None:
        super().__init__(field_name)
        self.side = side
        self.field_name = field_name
        self.raw = raw


def _amount(owner: object, field_name: str, side: str) -> Optional[Decimal]:
    """Read an amount from a requirement or coverage, or signal why not."""
    raw = owner.invalid_value(field_name)  # type: ignore[attr-defined]
    if raw is not None:
        raise _Unparseable(side, field_name, raw)
    value = getattr(owner, field_name)
    try:
        return parse_optional_amount(value, field_name)
    except InvalidNumericComparisonError:
        raise _Unparseable(side, field_name, repr(value))


def _yes_no(value: Optional[bool]) -> str:
    return "Yes" if value else "No"


# =============================================================================
# Check Evaluator
# =============================================================================

@dataclass
class CheckEvaluator:
    """
    Evaluates requirement pairs and structural checks.

    Usage:
        evaluator = CheckEvaluator()
        checks = evaluator.evaluate(match_result, extracted, as_of=date.today())
    """

    thresholds: VerificationThresholds = DEFAULT_THRESHOLDS

    def evaluate(
        self,
        match_result: MatchResult,
        extracted: ExtractedData,
        as_of: date,
        project: Optional[ProjectContext] = None,
        subcontractor: Optional[SubcontractorIdentity] = None,
    ) -> list[Check]:
        """
        Evaluate all checks for one document.

        Args:
            match_result: Requirement/coverage pairs from the matcher
            extracted: The extracted policy data
            as_of: Verification date for the currency check
            project: Optional project context (end date, state)
            subcontractor: Optional expected insured entity

        Returns:
            Checks in deterministic order
        """
        checks: list[Check] = []

        for pair in match_result.pairs:
            checks.extend(self.evaluate_requirement(pair, extracted))

        raw_coverages = extracted.invalid_value("coverages")
        if raw_coverages is not None:
            checks.append(self._malformed_container_check(raw_coverages))

        for malformed in match_result.malformed_coverages:
            checks.append(self._malformed_coverage_check(malformed))

        checks.extend(self.evaluate_structural(
            extracted, as_of, match_result.pairs, project, subcontractor,
        ))
        return checks

    # -------------------------------------------------------------------------
    # Requirement checks
    # -------------------------------------------------------------------------

    def evaluate_requirement(
        self,
        pair: RequirementMatch,
        extracted: ExtractedData,
    ) -> list[Check]:
        """Evaluate one requirement against its matched coverage."""
        requirement = pair.requirement

        if pair.malformed:
            return [Check(
                check_type=CheckType.MALFORMED_INPUT,
                description=f"Requirement #{pair.index + 1}",
                status=CheckStatus.WARNING,
                details="Requirement has no coverage type and was not evaluated",
                requirement_index=pair.index,
                required_value="Coverage type",
                actual_value="Not set",
            )]

        coverage_type = pair.coverage_type
        label = format_coverage_type(coverage_type)

        if pair.coverage is None and extracted.invalid_value("coverages") is not None:
            # The coverage list itself was unreadable, so absence is unknown
            return [Check(
                check_type=CheckType.MALFORMED_INPUT,
                description=f"{label} coverage",
                status=CheckStatus.WARNING,
                details=f"{label} ({coverage_type}) not evaluated: coverages could not be read",
                coverage_type=coverage_type,
                requirement_index=pair.index,
                required_value=format_currency(requirement.minimum_limit) or "Required",
                actual_value="Unreadable",
            )]

        if pair.coverage is None:
            return [Check(
                check_type=CheckType.COVERAGE_MISSING,
                description=f"{label} coverage",
                status=CheckStatus.FAIL,
                details=f"{label} ({coverage_type}) is required but not found in certificate",
                coverage_type=coverage_type,
                requirement_index=pair.index,
                required_value=format_currency(requirement.minimum_limit) or "Required",
                actual_value="Not found",
            )]

        coverage = pair.coverage
        failures: list[Check] = []
        consulted: list[str] = []

        limit_check = self._check_limit(pair, coverage, consulted)
        if limit_check is not None:
            failures.append(limit_check)

        excess_check = self._check_excess(pair, coverage, consulted)
        if excess_check is not None:
            failures.append(excess_check)

        if requirement.principal_indemnity_required:
            consulted.append(f"{coverage_type}_principal_indemnity")
            if not coverage.principal_indemnity:
                failures.append(Check(
                    check_type=CheckType.PRINCIPAL_INDEMNITY_MISSING,
                    description=f"{label} principal indemnity",
                    status=CheckStatus.FAIL,
                    details="Principal indemnity extension required but not present",
                    coverage_type=coverage_type,
                    requirement_index=pair.index,
                    fields=(f"{coverage_type}_principal_indemnity",),
                    required_value="Yes",
                    actual_value=_yes_no(coverage.principal_indemnity),
                ))

        if requirement.cross_liability_required:
            consulted.append(f"{coverage_type}_cross_liability")
            if not coverage.cross_liability:
                failures.append(Check(
                    check_type=CheckType.CROSS_LIABILITY_MISSING,
                    description=f"{label} cross liability",
                    status=CheckStatus.FAIL,
                    details="Cross liability clause required but not present",
                    coverage_type=coverage_type,
                    requirement_index=pair.index,
                    fields=(f"{coverage_type}_cross_liability",),
                    required_value="Yes",
                    actual_value=_yes_no(coverage.cross_liability),
                ))

        if failures:
            return failures

        low = self._low_confidence(extracted, consulted)
        if low:
            return [Check(
                check_type=CheckType.LOW_CONFIDENCE_FIELD,
                description=f"{label} requirement",
                status=CheckStatus.WARNING,
                details=(
                    f"{label} meets requirements but relies on low-confidence "
                    f"fields: {', '.join(low)}"
                ),
                coverage_type=coverage_type,
                requirement_index=pair.index,
                fields=tuple(low),
            )]

        return [Check(
            check_type=CheckType.COVERAGE_REQUIREMENT,
            description=f"{label} requirement",
            status=CheckStatus.PASS,
            details=self._pass_details(requirement, coverage, label),
            coverage_type=coverage_type,
            requirement_index=pair.index,
            fields=tuple(consulted),
        )]

    def _check_limit(
        self,
        pair: RequirementMatch,
        coverage: Coverage,
        consulted: list[str],
    ) -> Optional[Check]:
        coverage_type = pair.coverage_type
        label = format_coverage_type(coverage_type)
        field_key = f"{coverage_type}_limit"
        try:
            minimum = _amount(pair.requirement, "minimum_limit", "requirement")
            if minimum is None:
                return None
            consulted.append(field_key)
            limit = _amount(coverage, "limit", "certificate")
        except _Unparseable as e:
            return self._unparseable_check(pair, e, f"{label} limit", field_key)

        if limit is None:
            return Check(
                check_type=CheckType.DATA_UNPARSEABLE,
                description=f"{label} limit",
                status=CheckStatus.FAIL,
                details="Limit not stated on certificate; cannot compare to minimum",
                coverage_type=coverage_type,
                requirement_index=pair.index,
                fields=(field_key,),
                required_value=format_currency(minimum),
                actual_value="Not stated",
            )
        if limit < minimum:
            return Check(
                check_type=CheckType.LIMIT_INSUFFICIENT,
                description=f"{label} limit",
                status=CheckStatus.FAIL,
                details=(
                    f"Limit {format_currency(limit)} is below required "
                    f"{format_currency(minimum)} ({pair.requirement.limit_type.value})"
                ),
                coverage_type=coverage_type,
                requirement_index=pair.index,
                fields=(field_key,),
                required_value=format_currency(minimum),
                actual_value=format_currency(limit),
            )
        return None

    def _check_excess(
        self,
        pair: RequirementMatch,
        coverage: Coverage,
        consulted: list[str],
    ) -> Optional[Check]:
        coverage_type = pair.coverage_type
        label = format_coverage_type(coverage_type)
        field_key = f"{coverage_type}_excess"
        try:
            maximum = _amount(pair.requirement, "maximum_excess", "requirement")
            if maximum is None:
                return None
            consulted.append(field_key)
            excess = _amount(coverage, "excess", "certificate")
        except _Unparseable as e:
            return self._unparseable_check(pair, e, f"{label} excess", field_key)

        if excess is not None and excess > maximum:
            return Check(
                check_type=CheckType.EXCESS_EXCEEDED,
                description=f"{label} excess",
                status=CheckStatus.FAIL,
                details=(
                    f"Excess {format_currency(excess)} exceeds maximum "
                    f"{format_currency(maximum)}"
                ),
                coverage_type=coverage_type,
                requirement_index=pair.index,
                fields=(field_key,),
                required_value=f"Max {format_currency(maximum)}",
                actual_value=format_currency(excess),
            )
        return None

    def _unparseable_check(
        self,
        pair: RequirementMatch,
        error: _Unparseable,
        description: str,
        field_key: str,
    ) -> Check:
        logger.warning(
            "Unparseable %s on %s for %s: %s",
            error.field_name, error.side, pair.coverage_type, error.raw,
        )
        return Check(
            check_type=CheckType.DATA_UNPARSEABLE,
            description=description,
            status=CheckStatus.FAIL,
            details=f"{error.field_name} on {error.side} is not numeric: {error.raw}",
            coverage_type=pair.coverage_type,
            requirement_index=pair.index,
            fields=(field_key,),
            required_value="Numeric amount" if error.side == "certificate" else None,
            actual_value=error.raw,
        )

    def _malformed_container_check(self, raw: str) -> Check:
        logger.warning("Coverages is not a list: %s", raw)
        return Check(
            check_type=CheckType.MALFORMED_INPUT,
            description="Extracted coverages",
            status=CheckStatus.WARNING,
            details=f"Coverages is not a list: {raw}; no coverage was evaluated",
            required_value="List of coverages",
            actual_value=raw,
        )

    def _malformed_coverage_check(self, malformed: MalformedCoverage) -> Check:
        return Check(
            check_type=CheckType.MALFORMED_INPUT,
            description=f"Extracted coverage #{malformed.position + 1}",
            status=CheckStatus.WARNING,
            details=f"{malformed.reason}; entry was skipped",
            required_value="Coverage type",
            actual_value="Not stated",
        )

    def _pass_details(
        self,
        requirement: InsuranceRequirement,
        coverage: Coverage,
        label: str,
    ) -> str:
        parts = []
        if requirement.minimum_limit is not None:
            parts.append(
                f"limit {format_currency(coverage.limit)} meets "
                f"{format_currency(requirement.minimum_limit)}"
            )
        if requirement.maximum_excess is not None:
            parts.append(f"excess within {format_currency(requirement.maximum_excess)}")
        if requirement.principal_indemnity_required:
            parts.append("principal indemnity present")
        if requirement.cross_liability_required:
            parts.append("cross liability present")
        if not parts:
            return f"{label} coverage present"
        return f"{label}: " + ", ".join(parts)

    def _low_confidence(self, extracted: ExtractedData, keys: Sequence[str]) -> list[str]:
        """Consulted fields whose confidence is below the floor."""
        floor = self.thresholds.field_confidence_floor
        low = []
        for key in keys:
            score = extracted.field_confidence(key)
            if score is not None and score < floor:
                low.append(key)
        return low

    # -------------------------------------------------------------------------
    # Structural checks
    # -------------------------------------------------------------------------

    def evaluate_structural(
        self,
        extracted: ExtractedData,
        as_of: date,
        pairs: Sequence[RequirementMatch] = (),
        project: Optional[ProjectContext] = None,
        subcontractor: Optional[SubcontractorIdentity] = None,
    ) -> list[Check]:
        """
        Evaluate the fixed per-document checks.

        The policy currency check is always present. Project period, WC
        scheme and entity checks run only when their context is supplied.
        """
        checks = [self._check_currency(extracted, as_of)]

        if project is not None and project.end_date is not None and extracted.period_end:
            checks.append(self._check_project_period(extracted, project))

        if project is not None and project.state:
            checks.extend(self._check_workers_comp_state(pairs, project))

        if subcontractor is not None:
            checks.extend(self._check_entity(extracted, subcontractor))

        return checks

    def _check_currency(self, extracted: ExtractedData, as_of: date) -> Check:
        period_end = extracted.period_end
        if period_end is None:
            raw = extracted.invalid_value("period_end")
            return Check(
                check_type=CheckType.DATA_UNPARSEABLE,
                description="Policy currency",
                status=CheckStatus.FAIL,
                details=(
                    f"Policy period end could not be read: {raw}" if raw
                    else "Policy period end not stated; currency cannot be confirmed"
                ),
                fields=PERIOD_END_FIELDS[:1],
                required_value=f"Current on {as_of.isoformat()}",
                actual_value=raw or "Not stated",
            )

        if period_end < as_of:
            return Check(
                check_type=CheckType.POLICY_EXPIRED,
                description="Policy currency",
                status=CheckStatus.FAIL,
                details=f"Policy expired on {period_end.isoformat()}",
                fields=PERIOD_END_FIELDS[:1],
                required_value=as_of.isoformat(),
                actual_value=period_end.isoformat(),
            )

        days_left = (period_end - as_of).days
        window = self.thresholds.expiry_warning_days
        if window > 0 and days_left <= window:
            return Check(
                check_type=CheckType.POLICY_EXPIRING_SOON,
                description="Policy currency",
                status=CheckStatus.WARNING,
                details=f"Policy expires in {days_left} days ({period_end.isoformat()})",
                fields=PERIOD_END_FIELDS[:1],
                required_value=f"More than {window} days remaining",
                actual_value=period_end.isoformat(),
            )

        score = extracted.field_confidence(*PERIOD_END_FIELDS)
        if score is not None and score < self.thresholds.field_confidence_floor:
            return Check(
                check_type=CheckType.LOW_CONFIDENCE_FIELD,
                description="Policy currency",
                status=CheckStatus.WARNING,
                details=(
                    f"Policy current until {period_end.isoformat()} but the "
                    f"period end was read with low confidence"
                ),
                fields=PERIOD_END_FIELDS[:1],
            )

        return Check(
            check_type=CheckType.POLICY_EXPIRED,
            description="Policy currency",
            status=CheckStatus.PASS,
            details=f"Policy current until {period_end.isoformat()}",
            fields=PERIOD_END_FIELDS[:1],
        )

    def _check_project_period(self, extracted: ExtractedData, project: ProjectContext) -> Check:
        period_end = extracted.period_end
        end_date = project.end_date
        if period_end < end_date:
            return Check(
                check_type=CheckType.POLICY_EXPIRES_BEFORE_PROJECT,
                description="Project period coverage",
                status=CheckStatus.FAIL,
                details=f"Policy expires before project end date ({end_date.isoformat()})",
                required_value=f"Valid until {end_date.isoformat()}",
                actual_value=f"Expires {period_end.isoformat()}",
            )
        return Check(
            check_type=CheckType.PROJECT_COVERAGE,
            description="Project period coverage",
            status=CheckStatus.PASS,
            details=f"Policy covers project period (ends {end_date.isoformat()})",
        )

    def _check_workers_comp_state(
        self,
        pairs: Sequence[RequirementMatch],
        project: ProjectContext,
    ) -> list[Check]:
        checks = []
        for pair in pairs:
            if pair.coverage_type != WORKERS_COMP or pair.coverage is None:
                continue
            scheme = pair.coverage.state
            if not scheme:
                continue
            if scheme != project.state:
                checks.append(Check(
                    check_type=CheckType.WORKERS_COMP_STATE_MISMATCH,
                    description="Workers' Compensation state coverage",
                    status=CheckStatus.FAIL,
                    details=f"WC scheme is for {scheme} but project is in {project.state}",
                    coverage_type=WORKERS_COMP,
                    requirement_index=pair.index,
                    required_value=f"{project.state} scheme",
                    actual_value=f"{scheme} scheme",
                ))
            else:
                checks.append(Check(
                    check_type=CheckType.WORKERS_COMP_STATE,
                    description="Workers' Compensation state coverage",
                    status=CheckStatus.PASS,
                    details=f"WC scheme ({scheme}) matches project state",
                    coverage_type=WORKERS_COMP,
                    requirement_index=pair.index,
                ))
        return checks

    def _check_entity(
        self,
        extracted: ExtractedData,
        subcontractor: SubcontractorIdentity,
    ) -> list[Check]:
        failures: list[Check] = []
        consulted: list[str] = []

        if subcontractor.name:
            consulted.append("insured_party_name")
            if normalize_entity_name(extracted.insured_party_name) != normalize_entity_name(subcontractor.name):
                failures.append(Check(
                    check_type=CheckType.ENTITY_NAME_MISMATCH,
                    description="Insured party name",
                    status=CheckStatus.FAIL,
                    details=(
                        f"Certificate names {extracted.insured_party_name or 'no insured party'}, "
                        f"expected {subcontractor.name}"
                    ),
                    fields=("insured_party_name",),
                    required_value=subcontractor.name,
                    actual_value=extracted.insured_party_name or "Not stated",
                ))

        extracted_abn = normalize_abn(extracted.insured_party_abn)
        if subcontractor.abn:
            consulted.append("insured_party_abn")
            if extracted_abn != normalize_abn(subcontractor.abn):
                failures.append(Check(
                    check_type=CheckType.ABN_MISMATCH,
                    description="Insured party ABN",
                    status=CheckStatus.FAIL,
                    details=(
                        f"Certificate ABN {extracted.insured_party_abn or 'not stated'} "
                        f"does not match {subcontractor.abn}"
                    ),
                    fields=("insured_party_abn",),
                    required_value=subcontractor.abn,
                    actual_value=extracted.insured_party_abn or "Not stated",
                ))

        if extracted_abn:
            error = abn_checksum_error(extracted_abn)
            if error is not None:
                failures.append(Check(
                    check_type=CheckType.ABN_INVALID,
                    description="Insured party ABN checksum",
                    status=CheckStatus.FAIL,
                    details=error,
                    fields=("insured_party_abn",),
                    required_value="Valid ABN",
                    actual_value=extracted.insured_party_abn,
                ))

        if failures:
            return failures

        low = self._low_confidence(extracted, consulted)
        if low:
            return [Check(
                check_type=CheckType.LOW_CONFIDENCE_FIELD,
                description="Insured entity",
                status=CheckStatus.WARNING,
                details=f"Insured entity matches but relies on low-confidence fields: {', '.join(low)}",
                fields=tuple(low),
            )]
        return [Check(
            check_type=CheckType.ENTITY_VERIFICATION,
            description="Insured entity",
            status=CheckStatus.PASS,
            details=f"Certificate names {extracted.insured_party_name or subcontractor.name}",
            fields=tuple(consulted),
        )]
