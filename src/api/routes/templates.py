"""Requirement template endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas.responses import TemplateDetail, TemplateRequirement, TemplateSummary
from cocpilot.canon import compute_template_hash
from cocpilot.models import RequirementTemplate
from cocpilot.packs import RequirementTemplateLoader
from cocpilot.presentation import format_coverage_type

router = APIRouter(prefix="/templates", tags=["Templates"])

# Shared loader instance (set by main.py)
loader: Optional[RequirementTemplateLoader] = None


def set_loader(l: RequirementTemplateLoader):
    global loader
    loader = l


def _summary_fields(template: RequirementTemplate) -> dict:
    return {
        "id": template.id,
        "name": template.name,
        "project_type": template.project_type,
        "version": template.version,
        "description": template.description,
        "coverage_types": template.coverage_types,
        "template_hash": compute_template_hash(template),
    }


@router.get("", response_model=list[TemplateSummary])
async def list_templates(project_type: Optional[str] = None):
    """
    List the standard requirement templates.

    Optionally filter by project type: commercial, residential, civil, fitout
    """
    templates = [loader.get_template(t) for t in loader.list_templates()]
    if project_type:
        templates = [t for t in templates if t.project_type == project_type]
    return [TemplateSummary(**_summary_fields(t)) for t in templates]


@router.get("/{template_id}", response_model=TemplateDetail)
async def get_template(template_id: str):
    """Get a requirement template with its full requirement list."""
    template = loader.find_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Template '{template_id}' not found")

    return TemplateDetail(
        **_summary_fields(template),
        requirements=[
            TemplateRequirement(
                coverage_type=r.coverage_type,
                coverage_name=format_coverage_type(r.coverage_type),
                minimum_limit=float(r.minimum_limit) if r.minimum_limit is not None else None,
                limit_type=r.limit_type.value,
                maximum_excess=float(r.maximum_excess) if r.maximum_excess is not None else None,
                principal_indemnity_required=r.principal_indemnity_required,
                cross_liability_required=r.cross_liability_required,
            )
            for r in template.requirements
        ],
    )
