"""Request schemas for the API."""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class RequirementInput(BaseModel):
    """
    One insurance requirement.

    Amounts are passed through untouched so the engine can report values it
    cannot compare instead of the request being rejected.
    """
    coverage_type: Optional[str] = Field(None, description="Coverage category, e.g., 'public_liability'")
    minimum_limit: Any = Field(None, description="Lowest acceptable limit")
    limit_type: Optional[str] = Field(None, description="per_occurrence|aggregate|per_claim|statutory")
    maximum_excess: Any = Field(None, description="Highest acceptable excess")
    principal_indemnity_required: bool = Field(False, description="Principal indemnity required")
    cross_liability_required: bool = Field(False, description="Cross liability required")
    id: Optional[str] = Field(None, description="Requirement ID from the caller's store")


class ProjectInput(BaseModel):
    """Project facts for the period and workers' compensation checks."""
    end_date: Optional[date] = Field(None, description="Project end date (ISO format: YYYY-MM-DD)")
    state: Optional[str] = Field(None, description="Australian state code, e.g., 'NSW'")
    id: Optional[str] = None


class SubcontractorInput(BaseModel):
    """The entity the certificate should name."""
    name: Optional[str] = None
    abn: Optional[str] = None


class VerifyRequest(BaseModel):
    """Request to verify a certificate of currency."""
    requirements: Optional[list[RequirementInput]] = Field(
        None, description="Project requirements, in check order"
    )
    template_id: Optional[str] = Field(
        None, description="Use a standard requirement template instead of requirements"
    )
    extracted_data: Optional[dict[str, Any]] = Field(
        ..., description="Extraction payload, or null if extraction failed"
    )
    as_of: date = Field(..., description="Date the policy must be current on")
    project: Optional[ProjectInput] = None
    subcontractor: Optional[SubcontractorInput] = None

    @model_validator(mode="after")
    def validate_requirement_source(self) -> "VerifyRequest":
        """Exactly one of requirements or template_id."""
        if self.requirements is None and not self.template_id:
            raise ValueError("Either 'requirements' or 'template_id' is required")
        if self.requirements is not None and self.template_id:
            raise ValueError("Provide 'requirements' or 'template_id', not both")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "requirements": [
                        {
                            "coverage_type": "public_liability",
                            "minimum_limit": 20000000,
                            "maximum_excess": 10000,
                            "principal_indemnity_required": True,
                            "cross_liability_required": True,
                        },
                    ],
                    "extracted_data": {
                        "insured_party_name": "Acme Scaffolding Pty Ltd",
                        "period_end": "2027-06-30",
                        "coverages": [
                            {
                                "type": "public_liability",
                                "limit": 20000000,
                                "excess": 5000,
                                "principal_indemnity": True,
                                "cross_liability": True,
                            },
                        ],
                        "extraction_confidence": 0.92,
                        "field_confidences": {"public_liability_limit": 95},
                    },
                    "as_of": "2026-10-19",
                }
            ]
        }
    }
