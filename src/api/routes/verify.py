"""Certificate verification endpoint."""

import logging
import time
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas.requests import VerifyRequest
from api.schemas.responses import VerificationResponse
from cocpilot.compliance import compliance_status_for, requires_deficiency_notice
from cocpilot.engine import VerificationEngine
from cocpilot.exceptions import TemplateNotFoundError, VerificationInputError
from cocpilot.models import Verification
from cocpilot.packs import RequirementTemplateLoader
from cocpilot.presentation import confidence_band, severity_presentation, status_presentation

logger = logging.getLogger("cocpilot.api")

router = APIRouter(tags=["Verification"])

# Shared instances (set by main.py)
loader: Optional[RequirementTemplateLoader] = None
engine: Optional[VerificationEngine] = None


def set_loader(l: RequirementTemplateLoader, e: VerificationEngine):
    global loader, engine
    loader = l
    engine = e


def build_response(verification: Verification, template_id: Optional[str] = None) -> VerificationResponse:
    """Shape a Verification for the API, with display labels."""
    data = verification.to_dict()
    for deficiency, raw in zip(verification.deficiencies, data["deficiencies"]):
        raw["severity_label"] = severity_presentation(deficiency.severity).label

    # extraction_confidence is 0-1, bands are on the 0-100 field scale
    band = confidence_band(verification.confidence_score * 100, engine.thresholds)

    return VerificationResponse(
        status=data["status"],
        status_label=status_presentation(verification.status).label,
        compliance_status=compliance_status_for(verification).value,
        requires_deficiency_notice=requires_deficiency_notice(verification),
        confidence_score=float(verification.confidence_score),
        confidence_band=band,
        checks=data["checks"],
        deficiencies=data["deficiencies"],
        gate=data["gate"],
        flagged_fields=data["flagged_fields"],
        extracted_data=data["extracted_data"],
        verified_at=data["verified_at"],
        template_id=template_id,
        input_hash=data["input_hash"],
        requirements_hash=data["requirements_hash"],
        engine_version=data["engine_version"],
    )


@router.post("/verify", response_model=VerificationResponse)
async def verify_certificate(request: VerifyRequest):
    """
    Verify a certificate of currency against project requirements.

    Requirements come either inline or from a standard template. Pass
    extracted_data as null when extraction failed; the result is then a
    review verdict.

    The service is stateless: persisting the result, updating the
    subcontractor's compliance status and sending deficiency notices are
    left to the caller.
    """
    start = time.perf_counter()

    if request.template_id:
        try:
            template = loader.get_template(request.template_id)
        except TemplateNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message)
        requirements = list(template.requirements)
    else:
        requirements = [r.model_dump() for r in request.requirements]

    try:
        verification = engine.verify(
            requirements,
            request.extracted_data,
            request.as_of,
            project=request.project.model_dump() if request.project else None,
            subcontractor=request.subcontractor.model_dump() if request.subcontractor else None,
        )
    except VerificationInputError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())

    logger.info(
        "Verified certificate",
        extra={
            "status": verification.status.value,
            "input_hash_short": verification.input_hash[:12],
            "template_id": request.template_id,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        },
    )
    return build_response(verification, request.template_id)
