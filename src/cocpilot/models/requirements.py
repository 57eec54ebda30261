"""
CocPilot Requirement Models

What a project demands of its subcontractors' insurance, plus the optional
project and subcontractor context some structural checks compare against.

Key components:
- InsuranceRequirement: One coverage a project requires
- ProjectContext: Project end date and state (for period and WC checks)
- SubcontractorIdentity: Who the certificate should name

Requirements are snapshots: the engine never reads them live, and a
Verification keeps the hash of the list it was evaluated against.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..exceptions import InvalidNumericComparisonError, MalformedInputError
from ..normalize import parse_date, parse_flag, parse_optional_amount
from .enums import LimitType


def _amount_out(value: Optional[Decimal]) -> Any:
    """Render an amount as a JSON number."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# =============================================================================
# Insurance Requirement
# =============================================================================

@dataclass(frozen=True)
class InsuranceRequirement:
    """
    A coverage a project requires from every subcontractor.

    Attributes:
        coverage_type: Coverage category (e.g., "public_liability")
        minimum_limit: Lowest acceptable limit, None for no minimum
        limit_type: How the limit is expressed
        maximum_excess: Highest acceptable excess, None for no cap
        principal_indemnity_required: Policy must indemnify the principal
        cross_liability_required: Policy must carry a cross liability clause
        id: Identifier from the requirements store, if any
        invalid_fields: (field, raw value) pairs that could not be parsed
    """
    coverage_type: Optional[str]
    minimum_limit: Optional[Decimal] = None
    limit_type: LimitType = LimitType.PER_OCCURRENCE
    maximum_excess: Optional[Decimal] = None
    principal_indemnity_required: bool = False
    cross_liability_required: bool = False
    id: Optional[str] = None
    invalid_fields: tuple[tuple[str, str], ...] = ()

    def invalid_value(self, field_name: str) -> Optional[str]:
        """Raw value of a field that failed to parse, if it did."""
        for name, raw in self.invalid_fields:
            if name == field_name:
                return raw
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InsuranceRequirement:
        """
        Build a requirement from a store row or template entry.

        Never raises on bad values: unparseable amounts are recorded in
        invalid_fields and reported by the check evaluator.
        """
        invalid: list[tuple[str, str]] = []
        amounts: dict[str, Optional[Decimal]] = {}
        for name in ("minimum_limit", "maximum_excess"):
            raw = data.get(name)
            try:
                amounts[name] = parse_optional_amount(raw, name)
            except InvalidNumericComparisonError:
                amounts[name] = None
                invalid.append((name, repr(raw)))

        try:
            limit_type = LimitType(data.get("limit_type") or LimitType.PER_OCCURRENCE.value)
        except ValueError:
            limit_type = LimitType.PER_OCCURRENCE
            invalid.append(("limit_type", repr(data.get("limit_type"))))

        coverage_type = data.get("coverage_type")
        return cls(
            coverage_type=str(coverage_type) if coverage_type is not None else None,
            minimum_limit=amounts["minimum_limit"],
            limit_type=limit_type,
            maximum_excess=amounts["maximum_excess"],
            principal_indemnity_required=bool(parse_flag(data.get("principal_indemnity_required"))),
            cross_liability_required=bool(parse_flag(data.get("cross_liability_required"))),
            id=str(data["id"]) if data.get("id") is not None else None,
            invalid_fields=tuple(invalid),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {
            "coverage_type": self.coverage_type,
            "minimum_limit": _amount_out(self.minimum_limit),
            "limit_type": self.limit_type.value,
            "maximum_excess": _amount_out(self.maximum_excess),
            "principal_indemnity_required": self.principal_indemnity_required,
            "cross_liability_required": self.cross_liability_required,
        }
        if self.id is not None:
            result["id"] = self.id
        if self.invalid_fields:
            result["invalid_fields"] = dict(self.invalid_fields)
        return result


# =============================================================================
# Verification Context
# =============================================================================

@dataclass(frozen=True)
class ProjectContext:
    """
    Project facts used by the period and workers' compensation checks.

    Attributes:
        end_date: Project completion date; the policy must run past it
        state: Australian state code (e.g., "NSW"); the WC scheme must match
    """
    end_date: Optional[date] = None
    state: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectContext:
        try:
            end_date = parse_date(data.get("end_date"), "end_date")
        except MalformedInputError:
            end_date = None
        state = data.get("state")
        return cls(
            end_date=end_date,
            state=str(state).strip().upper() if state else None,
            id=str(data["id"]) if data.get("id") is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "state": self.state,
            "id": self.id,
        }


@dataclass(frozen=True)
class SubcontractorIdentity:
    """The entity the certificate is expected to name."""
    name: Optional[str] = None
    abn: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubcontractorIdentity:
        name = data.get("name")
        abn = data.get("abn")
        return cls(
            name=str(name) if name is not None else None,
            abn=str(abn) if abn is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "abn": self.abn}
