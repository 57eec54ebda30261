"""Response schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel


class CheckOut(BaseModel):
    """An itemized check."""
    check_type: str
    description: str
    status: str  # pass|fail|warning
    details: str
    coverage_type: Optional[str] = None
    requirement_index: Optional[int] = None
    fields: list[str] = []


class DeficiencyOut(BaseModel):
    """A deficiency for the notice."""
    type: str
    severity: str  # critical|major|minor
    severity_label: str
    description: str
    required_value: Optional[str] = None
    actual_value: Optional[str] = None
    coverage_type: Optional[str] = None


class GateOut(BaseModel):
    """Confidence & fraud gate decision."""
    outcome: str  # clear|force_review|force_fail
    reasons: list[str] = []


class VerificationResponse(BaseModel):
    """Response from certificate verification."""
    # Verdict
    status: str  # pass|fail|review
    status_label: str
    compliance_status: str  # compliant|non_compliant|pending
    requires_deficiency_notice: bool

    # Confidence
    confidence_score: float
    confidence_band: str  # high|medium|low

    # Detail
    checks: list[CheckOut]
    deficiencies: list[DeficiencyOut]
    gate: GateOut
    flagged_fields: list[str] = []
    extracted_data: Optional[dict[str, Any]] = None

    # Provenance
    verified_at: str
    template_id: Optional[str] = None
    input_hash: str
    requirements_hash: str
    engine_version: str


class TemplateSummary(BaseModel):
    """Summary of a requirement template."""
    id: str
    name: str
    project_type: str
    version: str
    description: Optional[str] = None
    coverage_types: list[str]
    template_hash: str


class TemplateRequirement(BaseModel):
    """A requirement as stored in a template."""
    coverage_type: str
    coverage_name: str
    minimum_limit: Optional[float] = None
    limit_type: str
    maximum_excess: Optional[float] = None
    principal_indemnity_required: bool
    cross_liability_required: bool


class TemplateDetail(TemplateSummary):
    """Full requirement template."""
    requirements: list[TemplateRequirement]


class HealthResponse(BaseModel):
    """Service health."""
    healthy: bool
    engine_version: str
    templates_loaded: int
