"""
CocPilot Verifier

Entry point of the verification engine. Runs one certificate through the
pipeline and returns an immutable Verification.

Pipeline:
    requirements + extracted data
        -> RequirementMatcher      (pairs)
        -> CheckEvaluator          (checks)
        -> DeficiencyAggregator    (deficiencies)
        -> ConfidenceFraudGate     (gate result)
        -> VerdictResolver         (pass | fail | review)

The engine is pure: it reads no clock (the caller passes as_of), performs
no I/O and keeps no state between calls. Persisting the Verification,
sending deficiency notices and updating the subcontractor rollup are the
caller's job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from .. import __version__
from ..canon import compute_input_hash, compute_requirements_hash
from ..config import DEFAULT_THRESHOLDS, VerificationThresholds
from ..exceptions import ExtractionAbsentError, VerificationInputError
from ..models import (
    CheckType,
    ExtractedData,
    InsuranceRequirement,
    ProjectContext,
    SubcontractorIdentity,
    Verification,
)
from .check_evaluator import CheckEvaluator
from .confidence_gate import ConfidenceFraudGate
from .deficiency_aggregator import DeficiencyAggregator
from .requirement_matcher import RequirementMatcher
from .verdict_resolver import VerdictResolver


logger = logging.getLogger(__name__)

RequirementsInput = Iterable[Union[InsuranceRequirement, Mapping[str, Any]]]
ExtractedInput = Union[ExtractedData, Mapping[str, Any], None]


# =============================================================================
# Input Coercion
# =============================================================================

def _coerce_as_of(as_of: Any) -> date:
    if isinstance(as_of, datetime):
        return as_of.date()
    if isinstance(as_of, date):
        return as_of
    raise VerificationInputError(
        message="as_of must be a date or datetime",
        details={"as_of": repr(as_of)},
    )


def _coerce_requirements(requirements: Any) -> list[InsuranceRequirement]:
    if requirements is None:
        raise VerificationInputError(message="requirements list is required")
    if isinstance(requirements, (str, bytes, Mapping)):
        raise VerificationInputError(
            message="requirements must be a list",
            details={"type": type(requirements).__name__},
        )

    result = []
    for index, item in enumerate(requirements):
        if isinstance(item, InsuranceRequirement):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(InsuranceRequirement.from_dict(item))
        else:
            logger.warning("Requirement %d is not an object: %r", index, item)
            result.append(InsuranceRequirement(coverage_type=None))
    return result


def _coerce_extracted(extracted_data: Any) -> Optional[ExtractedData]:
    if extracted_data is None or isinstance(extracted_data, ExtractedData):
        return extracted_data
    if isinstance(extracted_data, Mapping):
        return ExtractedData.from_dict(extracted_data)
    raise VerificationInputError(
        message="extracted_data must be an object or null",
        details={"type": type(extracted_data).__name__},
    )


def _coerce_context(value: Any, cls: type, name: str) -> Any:
    if value is None or isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        return cls.from_dict(value)
    raise VerificationInputError(
        message=f"{name} must be an object",
        details={"type": type(value).__name__},
    )


# =============================================================================
# Verification Engine
# =============================================================================

@dataclass
class VerificationEngine:
    """
    Verifies certificates of currency against project requirements.

    Holds the thresholds and the pipeline components so a service can build
    one engine at startup and reuse it for every document.

    Usage:
        engine = VerificationEngine()
        verification = engine.verify(
            requirements=project_requirements,
            extracted_data=document.extracted_data,
            as_of=date(2026, 3, 1),
        )
        if verification.status == VerificationStatus.FAIL:
            send_deficiency_notice(verification.deficiencies)
    """

    thresholds: VerificationThresholds = DEFAULT_THRESHOLDS

    matcher: RequirementMatcher = field(default_factory=RequirementMatcher)
    aggregator: DeficiencyAggregator = field(default_factory=DeficiencyAggregator)
    resolver: VerdictResolver = field(default_factory=VerdictResolver)
    evaluator: Optional[CheckEvaluator] = None
    gate: Optional[ConfidenceFraudGate] = None

    def __post_init__(self) -> None:
        if self.evaluator is None:
            self.evaluator = CheckEvaluator(thresholds=self.thresholds)
        if self.gate is None:
            self.gate = ConfidenceFraudGate(thresholds=self.thresholds)

    def verify(
        self,
        requirements: RequirementsInput,
        extracted_data: ExtractedInput,
        as_of: Union[date, datetime],
        *,
        project: Union[ProjectContext, Mapping[str, Any], None] = None,
        subcontractor: Union[SubcontractorIdentity, Mapping[str, Any], None] = None,
    ) -> Verification:
        """
        Verify one certificate.

        Args:
            requirements: The project's requirement snapshot; may be empty
            extracted_data: Extraction payload, or None if extraction failed
            as_of: Date the policy must be current on
            project: Optional project end date and state
            subcontractor: Optional expected insured name and ABN

        Returns:
            The Verification for this document

        Raises:
            VerificationInputError: If requirements is None or an argument
                has the wrong kind
        """
        as_of_date = _coerce_as_of(as_of)
        reqs = _coerce_requirements(requirements)
        project_ctx = _coerce_context(project, ProjectContext, "project")
        identity = _coerce_context(subcontractor, SubcontractorIdentity, "subcontractor")
        extracted = _coerce_extracted(extracted_data)

        requirements_hash = compute_requirements_hash(reqs)
        input_hash = compute_input_hash(reqs, extracted, as_of_date, project_ctx, identity)

        if extracted is None:
            error = ExtractionAbsentError(message="Extraction produced no data; routing to review")
            logger.warning(str(error), extra={"input_hash": input_hash[:12]})
            verification = self.resolver.extraction_failed(
                as_of_date,
                input_hash=input_hash,
                requirements_hash=requirements_hash,
                engine_version=__version__,
            )
            self._log_verdict(verification)
            return verification

        match_result = self.matcher.match(reqs, extracted.coverages)
        checks = self.evaluator.evaluate(
            match_result, extracted, as_of_date, project_ctx, identity,
        )
        deficiencies = self.aggregator.aggregate(checks)
        gate_result = self.gate.evaluate(extracted)
        status = self.resolver.resolve(gate_result, deficiencies)

        flagged: list[str] = []
        for check in checks:
            if check.check_type == CheckType.LOW_CONFIDENCE_FIELD:
                flagged.extend(f for f in check.fields if f not in flagged)

        verification = Verification(
            status=status,
            confidence_score=extracted.extraction_confidence or Decimal(0),
            extracted_data=extracted,
            checks=tuple(checks),
            deficiencies=tuple(deficiencies),
            verified_at=as_of_date,
            gate=gate_result,
            flagged_fields=tuple(flagged),
            input_hash=input_hash,
            requirements_hash=requirements_hash,
            engine_version=__version__,
        )
        self._log_verdict(verification)
        return verification

    def _log_verdict(self, verification: Verification) -> None:
        logger.info(
            "Verification %s", verification.status.value,
            extra={
                "status": verification.status.value,
                "gate": verification.gate.outcome.value,
                "checks": len(verification.checks),
                "deficiencies": len(verification.deficiencies),
                "input_hash": verification.input_hash[:12],
            },
        )


def verify(
    requirements: RequirementsInput,
    extracted_data: ExtractedInput,
    as_of: Union[date, datetime],
    *,
    project: Union[ProjectContext, Mapping[str, Any], None] = None,
    subcontractor: Union[SubcontractorIdentity, Mapping[str, Any], None] = None,
    thresholds: Optional[VerificationThresholds] = None,
) -> Verification:
    """
    Verify one certificate with a temporary engine.

    See VerificationEngine.verify.
    """
    engine = VerificationEngine(thresholds=thresholds or DEFAULT_THRESHOLDS)
    return engine.verify(
        requirements,
        extracted_data,
        as_of,
        project=project,
        subcontractor=subcontractor,
    )
