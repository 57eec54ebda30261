"""
CocPilot Extraction Models

Typed view of the payload produced by the external AI extraction service.

Every field is optional: the extractor omits what it cannot read, and the
engine must never crash on a partial payload. Values that are present but
unusable (a limit that came back as text, a date that is not a date) are
kept out of the typed fields and listed in invalid_fields instead, so the
check evaluator can report them precisely.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..exceptions import InvalidNumericComparisonError, MalformedInputError
from ..normalize import (
    parse_date,
    parse_flag,
    parse_optional_amount,
    parse_score,
)
from .enums import RiskLevel
from .requirements import _amount_out


def _score_out(value: Optional[Decimal]) -> Any:
    return _amount_out(value)


# =============================================================================
# Coverage
# =============================================================================

@dataclass(frozen=True)
class Coverage:
    """
    One coverage line read from the certificate.

    Attributes:
        type: Coverage type as extracted (matched after normalization)
        limit: Limit of indemnity
        excess: Excess/deductible
        principal_indemnity: Principal indemnity extension present
        cross_liability: Cross liability clause present
        limit_type: How the certificate expresses the limit
        state: Scheme state, for workers' compensation
        invalid_fields: (field, raw value) pairs that could not be parsed
    """
    type: Optional[str]
    limit: Optional[Decimal] = None
    excess: Optional[Decimal] = None
    principal_indemnity: Optional[bool] = None
    cross_liability: Optional[bool] = None
    limit_type: Optional[str] = None
    state: Optional[str] = None
    invalid_fields: tuple[tuple[str, str], ...] = ()

    def invalid_value(self, field_name: str) -> Optional[str]:
        """Raw value of a field that failed to parse, if it did."""
        for name, raw in self.invalid_fields:
            if name == field_name:
                return raw
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Coverage:
        invalid: list[tuple[str, str]] = []
        amounts: dict[str, Optional[Decimal]] = {}
        for name in ("limit", "excess"):
            raw = data.get(name)
            try:
                amounts[name] = parse_optional_amount(raw, name)
            except InvalidNumericComparisonError:
                amounts[name] = None
                invalid.append((name, repr(raw)))

        coverage_type = data.get("type")
        state = data.get("state")
        return cls(
            type=str(coverage_type) if coverage_type is not None else None,
            limit=amounts["limit"],
            excess=amounts["excess"],
            principal_indemnity=parse_flag(data.get("principal_indemnity")),
            cross_liability=parse_flag(data.get("cross_liability")),
            limit_type=data.get("limit_type"),
            state=str(state).strip().upper() if state else None,
            invalid_fields=tuple(invalid),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type,
            "limit": _amount_out(self.limit),
            "excess": _amount_out(self.excess),
            "principal_indemnity": self.principal_indemnity,
            "cross_liability": self.cross_liability,
        }
        if self.limit_type is not None:
            result["limit_type"] = self.limit_type
        if self.state is not None:
            result["state"] = self.state
        if self.invalid_fields:
            result["invalid_fields"] = dict(self.invalid_fields)
        return result


# =============================================================================
# Fraud Analysis
# =============================================================================

@dataclass(frozen=True)
class FraudAnalysis:
    """
    Fraud screening result attached to the extraction.

    Attributes:
        risk_score: 0-100, higher is more suspicious
        risk_level: Banded risk, derived from risk_score when absent
        is_blocked: Document must not be accepted
        recommendation: Screening recommendation text
    """
    risk_score: Optional[Decimal] = None
    risk_level: Optional[RiskLevel] = None
    is_blocked: bool = False
    recommendation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FraudAnalysis:
        raw_score = data.get("risk_score", data.get("overall_risk_score"))
        raw_level = data.get("risk_level")
        try:
            risk_level = RiskLevel(str(raw_level).lower()) if raw_level else None
        except ValueError:
            risk_level = None
        return cls(
            risk_score=parse_score(raw_score),
            risk_level=risk_level,
            is_blocked=bool(parse_flag(data.get("is_blocked"))),
            recommendation=data.get("recommendation"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_score": _score_out(self.risk_score),
            "risk_level": self.risk_level.value if self.risk_level else None,
            "is_blocked": self.is_blocked,
            "recommendation": self.recommendation,
        }


# =============================================================================
# Extracted Data
# =============================================================================

_DATE_ALIASES = {
    "period_start": ("period_start", "period_of_insurance_start"),
    "period_end": ("period_end", "period_of_insurance_end"),
}


@dataclass(frozen=True)
class ExtractedData:
    """
    Policy data extracted from one uploaded certificate.

    Attributes:
        insured_party_name: Named insured
        insured_party_abn: Named insured's ABN
        insurer_name: Issuing insurer
        policy_number: Policy number
        period_start: Period of insurance start
        period_end: Period of insurance end
        coverages: Coverage lines in extraction order
        extraction_confidence: Overall confidence, 0-1
        field_confidences: Per-field confidence, 0-100
        fraud_analysis: Fraud screening, if it ran
        invalid_fields: (field, raw value) pairs that could not be parsed
    """
    insured_party_name: Optional[str] = None
    insured_party_abn: Optional[str] = None
    insurer_name: Optional[str] = None
    policy_number: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    coverages: tuple[Coverage, ...] = ()
    extraction_confidence: Optional[Decimal] = None
    field_confidences: dict[str, Decimal] = field(default_factory=dict, hash=False)
    fraud_analysis: Optional[FraudAnalysis] = None
    invalid_fields: tuple[tuple[str, str], ...] = ()

    def field_confidence(self, *keys: str) -> Optional[Decimal]:
        """First confidence found among the given keys (aliases)."""
        for key in keys:
            if key in self.field_confidences:
                return self.field_confidences[key]
        return None

    def invalid_value(self, field_name: str) -> Optional[str]:
        """Raw value of a field that failed to parse, if it did."""
        for name, raw in self.invalid_fields:
            if name == field_name:
                return raw
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExtractedData:
        """
        Build from the extraction service payload.

        Accepts the period_of_insurance_* keys as aliases and
        keeps coverage entries that are not objects as untyped coverages.
        """
        invalid: list[tuple[str, str]] = []

        dates: dict[str, Optional[date]] = {}
        for name, aliases in _DATE_ALIASES.items():
            raw = next((data[a] for a in aliases if data.get(a) is not None), None)
            try:
                dates[name] = parse_date(raw, name)
            except MalformedInputError:
                dates[name] = None
                invalid.append((name, repr(raw)))

        coverages: list[Coverage] = []
        raw_coverages = data.get("coverages") or []
        if not isinstance(raw_coverages, (list, tuple)):
            invalid.append(("coverages", repr(raw_coverages)))
            raw_coverages = []
        for index, raw_coverage in enumerate(raw_coverages):
            if isinstance(raw_coverage, Mapping):
                coverages.append(Coverage.from_dict(raw_coverage))
            else:
                # Kept as an untyped coverage so it is reported, not dropped
                invalid.append((f"coverages[{index}]", repr(raw_coverage)))
                coverages.append(Coverage(type=None, invalid_fields=(("entry", repr(raw_coverage)),)))

        field_confidences: dict[str, Decimal] = {}
        raw_confidences = data.get("field_confidences") or {}
        if not isinstance(raw_confidences, Mapping):
            invalid.append(("field_confidences", repr(raw_confidences)))
            raw_confidences = {}
        for key, raw in raw_confidences.items():
            score = parse_score(raw)
            if score is not None:
                field_confidences[str(key)] = score

        raw_fraud = data.get("fraud_analysis")
        fraud = FraudAnalysis.from_dict(raw_fraud) if isinstance(raw_fraud, Mapping) else None

        def text(key: str) -> Optional[str]:
            value = data.get(key)
            return str(value) if value is not None else None

        return cls(
            insured_party_name=text("insured_party_name"),
            insured_party_abn=text("insured_party_abn"),
            insurer_name=text("insurer_name"),
            policy_number=text("policy_number"),
            period_start=dates["period_start"],
            period_end=dates["period_end"],
            coverages=tuple(coverages),
            extraction_confidence=parse_score(data.get("extraction_confidence")),
            field_confidences=field_confidences,
            fraud_analysis=fraud,
            invalid_fields=tuple(invalid),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "insured_party_name": self.insured_party_name,
            "insured_party_abn": self.insured_party_abn,
            "insurer_name": self.insurer_name,
            "policy_number": self.policy_number,
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
            "coverages": [c.to_dict() for c in self.coverages],
            "extraction_confidence": _score_out(self.extraction_confidence),
            "field_confidences": {
                k: _score_out(v) for k, v in sorted(self.field_confidences.items())
            },
            "fraud_analysis": self.fraud_analysis.to_dict() if self.fraud_analysis else None,
        }
        if self.invalid_fields:
            result["invalid_fields"] = dict(self.invalid_fields)
        return result
