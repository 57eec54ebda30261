"""
CocPilot Requirement Template Loader

Loads and validates requirement templates from YAML or JSON files.

Converts Pydantic schema models to CocPilot domain models.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import (
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateValidationError,
    TemplateVersionMismatch,
)
from ..models import InsuranceRequirement, LimitType, RequirementTemplate
from .schema import (
    SCHEMA_VERSION,
    RequirementSchema,
    RequirementTemplateSchema,
    check_schema_version,
    validate_requirement_template,
)


logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIXES = {".yaml", ".yml", ".json"}


# =============================================================================
# Reference Integrity Validation
# =============================================================================

def validate_reference_integrity(template: RequirementTemplate, path: str = "") -> None:
    """
    Validate that a template is internally consistent.

    Checks:
    - Each coverage type appears at most once (the matcher pairs one
      coverage per requirement, so a repeat would be checked twice)

    Raises:
        ValueError: If any integrity check fails
    """
    errors = []
    seen: set[str] = set()
    for index, requirement in enumerate(template.requirements):
        if requirement.coverage_type in seen:
            errors.append(
                f"requirements[{index}]: duplicate coverage_type '{requirement.coverage_type}'"
            )
        seen.add(requirement.coverage_type)

    if errors:
        location = f" in {path}" if path else ""
        raise ValueError(
            f"Reference integrity errors{location}:\n" + "\n".join(f"  - {e}" for e in errors)
        )


# =============================================================================
# Schema to Domain Model Converters
# =============================================================================

def _convert_requirement(schema: RequirementSchema) -> InsuranceRequirement:
    return InsuranceRequirement(
        coverage_type=schema.coverage_type,
        minimum_limit=schema.minimum_limit,
        limit_type=LimitType(schema.limit_type),
        maximum_excess=schema.maximum_excess,
        principal_indemnity_required=schema.principal_indemnity_required,
        cross_liability_required=schema.cross_liability_required,
    )


def _convert_template(schema: RequirementTemplateSchema) -> RequirementTemplate:
    return RequirementTemplate(
        id=schema.id,
        name=schema.name,
        project_type=schema.project_type,
        version=schema.version,
        requirements=tuple(_convert_requirement(r) for r in schema.requirements),
        description=schema.description,
    )


# =============================================================================
# Requirement Template Loader
# =============================================================================

class RequirementTemplateLoader:
    """
    Loads requirement templates from YAML or JSON files.

    Usage:
        loader = RequirementTemplateLoader()
        loader.load_directory()  # bundled standard templates
        template = loader.get_template("template-commercial")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject templates with incompatible schema versions
        """
        self.strict_version = strict_version
        self._templates: dict[str, RequirementTemplate] = {}

    def load(self, path: Union[str, Path]) -> RequirementTemplate:
        """
        Load a requirement template from a file.

        Args:
            path: Path to YAML or JSON file

        Returns:
            Loaded RequirementTemplate

        Raises:
            TemplateLoadError: If file cannot be read
            TemplateValidationError: If validation fails
            TemplateVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise TemplateLoadError(
                message=f"Failed to load requirement template: {e}",
                details={"path": str(path), "error": str(e)},
            )

        if not isinstance(data, dict):
            raise TemplateLoadError(
                message="Requirement template must be a mapping",
                details={"path": str(path), "type": type(data).__name__},
            )

        return self._register(data, str(path))

    def load_from_string(self, content: str, format: str = "yaml") -> RequirementTemplate:
        """
        Load a requirement template from a string.

        Args:
            content: YAML or JSON string
            format: "yaml" or "json"
        """
        try:
            if format.lower() == "json":
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (ValueError, yaml.YAMLError) as e:
            raise TemplateLoadError(
                message=f"Failed to parse requirement template: {e}",
                details={"format": format, "error": str(e)},
            )
        if not isinstance(data, dict):
            raise TemplateLoadError(
                message="Requirement template must be a mapping",
                details={"type": type(data).__name__},
            )
        return self._register(data, "<string>")

    def load_directory(self, directory: Union[str, Path, None] = None) -> list[RequirementTemplate]:
        """
        Load every template file in a directory, in file name order.

        Args:
            directory: Directory to scan; defaults to the bundled templates
        """
        directory = Path(directory) if directory is not None else DEFAULT_TEMPLATES_DIR
        if not directory.is_dir():
            raise TemplateLoadError(
                message=f"Template directory not found: {directory}",
                details={"path": str(directory)},
            )

        templates = [
            self.load(path)
            for path in sorted(directory.iterdir())
            if path.suffix.lower() in TEMPLATE_SUFFIXES
        ]
        logger.info("Loaded %d requirement templates from %s", len(templates), directory)
        return templates

    def _register(self, data: dict[str, Any], path: str) -> RequirementTemplate:
        # Check schema version
        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise TemplateVersionMismatch(
                message=f"Schema version mismatch: template has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        # Validate against schema
        try:
            schema = validate_requirement_template(data)
        except ValidationError as e:
            raise TemplateValidationError(
                message=f"Requirement template validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": path},
            )

        template = _convert_template(schema)

        # Validate reference integrity
        try:
            validate_reference_integrity(template, path)
        except ValueError as e:
            raise TemplateValidationError(
                message="Reference integrity validation failed",
                details={"errors": str(e), "path": path},
            )

        self._templates[template.id] = template
        return template

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    def get_template(self, template_id: str) -> RequirementTemplate:
        """
        Get a cached template by ID.

        Raises:
            TemplateNotFoundError: If no template with that ID is loaded
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(
                message=f"Requirement template not found: {template_id}",
                details={"template_id": template_id},
            )
        return template

    def find_template(self, template_id: str) -> Optional[RequirementTemplate]:
        """Get a cached template by ID, or None."""
        return self._templates.get(template_id)

    def list_templates(self) -> list[str]:
        """List IDs of all loaded templates."""
        return list(self._templates.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_requirement_template(path: Union[str, Path]) -> RequirementTemplate:
    """
    Load a requirement template from a file.

    Convenience function that creates a temporary loader.
    """
    return RequirementTemplateLoader().load(path)


def load_standard_templates() -> RequirementTemplateLoader:
    """Loader pre-populated with the bundled standard templates."""
    loader = RequirementTemplateLoader()
    loader.load_directory(DEFAULT_TEMPLATES_DIR)
    return loader
