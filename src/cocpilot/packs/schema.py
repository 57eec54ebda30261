"""
CocPilot Requirement Template Schemas

Pydantic models for validating requirement template YAML/JSON files.

A template is a named, versioned list of insurance requirements for a type
of project (commercial, residential, civil, fitout). Companies start a
project from a template and then edit the requirement list.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

LimitTypeValue = Literal["per_occurrence", "aggregate", "per_claim", "statutory"]

ProjectTypeValue = Literal["commercial", "residential", "civil", "fitout", "other"]


# =============================================================================
# Requirement Schemas
# =============================================================================

class RequirementSchema(BaseModel):
    """Schema for one insurance requirement within a template."""
    coverage_type: str = Field(..., description="Coverage category (e.g., 'public_liability')")
    minimum_limit: Optional[Decimal] = Field(None, ge=0, description="Lowest acceptable limit")
    limit_type: LimitTypeValue = Field("per_occurrence", description="How the limit is expressed")
    maximum_excess: Optional[Decimal] = Field(None, ge=0, description="Highest acceptable excess")
    principal_indemnity_required: bool = Field(False, description="Principal indemnity extension")
    cross_liability_required: bool = Field(False, description="Cross liability clause")

    @field_validator("coverage_type")
    @classmethod
    def normalize_coverage_type(cls, v: str) -> str:
        """Coverage types are stored lower-case with underscores."""
        v = v.strip().lower().replace("-", "_").replace(" ", "_")
        if not v:
            raise ValueError("coverage_type must not be empty")
        return v

    model_config = {
        "extra": "forbid",
    }


class RequirementTemplateSchema(BaseModel):
    """
    Root schema for a requirement template file.

    Example YAML:
        schema_version: "1.0.0"
        id: template-commercial
        name: Commercial Construction
        project_type: commercial
        version: "1.0"
        requirements:
          - coverage_type: public_liability
            minimum_limit: 20000000
            maximum_excess: 10000
            principal_indemnity_required: true
            cross_liability_required: true
    """
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")

    # Identity
    id: str = Field(..., description="Unique template identifier")
    name: str = Field(..., description="Human-readable template name")
    project_type: ProjectTypeValue = Field(..., description="Project type the template suits")
    version: str = Field("1.0", description="Template content version")
    description: Optional[str] = Field(None, description="When to use this template")

    requirements: list[RequirementSchema] = Field(
        ...,
        min_length=1,
        description="Required coverages, in check order",
    )

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_requirement_template(data: dict[str, Any]) -> RequirementTemplateSchema:
    """
    Validate a template dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RequirementTemplateSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True if the template's schema major version matches ours."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    pack_major = pack_version.split(".")[0]
    current_major = SCHEMA_VERSION.split(".")[0]
    return pack_major == current_major
