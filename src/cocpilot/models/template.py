"""
CocPilot Requirement Template Model

A named starting set of requirements for a type of project.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .requirements import InsuranceRequirement


@dataclass(frozen=True)
class RequirementTemplate:
    """
    A standard requirement list for a project type.

    Attributes:
        id: Template identifier (e.g., "template-commercial")
        name: Display name
        project_type: commercial | residential | civil | fitout | other
        version: Template content version
        requirements: Requirements, in check order
        description: When to use this template
    """
    id: str
    name: str
    project_type: str
    version: str
    requirements: tuple[InsuranceRequirement, ...]
    description: Optional[str] = None

    @property
    def coverage_types(self) -> list[str]:
        return [r.coverage_type for r in self.requirements if r.coverage_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "project_type": self.project_type,
            "version": self.version,
            "description": self.description,
            "requirements": [r.to_dict() for r in self.requirements],
        }
