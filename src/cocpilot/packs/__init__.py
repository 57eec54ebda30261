"""
CocPilot Requirement Templates

Schema validation and loading for requirement templates.

Requirement templates are YAML or JSON files that define the standard
insurance requirements for a type of construction project. The standard
set (commercial, residential, civil, fitout) ships with the package.

Usage:
    from cocpilot.packs import RequirementTemplateLoader, load_standard_templates

    loader = load_standard_templates()
    template = loader.get_template("template-commercial")

    # Or load a company's own template
    custom = RequirementTemplateLoader().load("path/to/template.yaml")
"""
from __future__ import annotations

from .loader import (
    DEFAULT_TEMPLATES_DIR,
    RequirementTemplateLoader,
    load_requirement_template,
    load_standard_templates,
    validate_reference_integrity,
)
from .schema import (
    SCHEMA_VERSION,
    RequirementSchema,
    RequirementTemplateSchema,
    check_schema_version,
    validate_requirement_template,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "DEFAULT_TEMPLATES_DIR",
    "RequirementTemplateLoader",
    "load_requirement_template",
    "load_standard_templates",
    # Validation
    "validate_requirement_template",
    "validate_reference_integrity",
    "check_schema_version",
    # Schemas
    "RequirementSchema",
    "RequirementTemplateSchema",
]
