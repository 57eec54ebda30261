"""
CocPilot API

Stateless certificate of currency verification service.

Environment Variables:
    COC_LOG_LEVEL: Logging level (default: INFO)
    COC_TEMPLATES_DIR: Directory of requirement templates (default: bundled)
    COC_DOCS_ENABLED: Enable /docs and /redoc (default: true)
    COC_CORS_ORIGINS: Comma-separated allowed origins
    COC_FIELD_CONFIDENCE_FLOOR, COC_EXTRACTION_CONFIDENCE_FLOOR, ...:
        Decision thresholds, see cocpilot.config
"""

import json
import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import templates, verify
from api.schemas.responses import HealthResponse
from cocpilot import __version__
from cocpilot.config import VerificationThresholds
from cocpilot.engine import VerificationEngine
from cocpilot.packs import DEFAULT_TEMPLATES_DIR, RequirementTemplateLoader


# =============================================================================
# Configuration
# =============================================================================

COC_LOG_LEVEL = os.getenv("COC_LOG_LEVEL", "INFO")
COC_TEMPLATES_DIR = os.getenv("COC_TEMPLATES_DIR", str(DEFAULT_TEMPLATES_DIR))
COC_DOCS_ENABLED = os.getenv("COC_DOCS_ENABLED", "true").lower() == "true"
COC_CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("COC_CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]


# =============================================================================
# Logging
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    EXTRA_FIELDS = (
        "status",
        "gate",
        "checks",
        "deficiencies",
        "input_hash",
        "input_hash_short",
        "template_id",
        "requirement_id",
        "duration_ms",
    )

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        return json.dumps(log_entry, default=str)


# Configure logging
logger = logging.getLogger("cocpilot")
logger.setLevel(getattr(logging, COC_LOG_LEVEL.upper(), logging.INFO))
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)


# =============================================================================
# Shared State
# =============================================================================

loader = RequirementTemplateLoader()
engine = VerificationEngine(thresholds=VerificationThresholds.from_env())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load requirement templates on startup."""
    loaded = loader.load_directory(COC_TEMPLATES_DIR)
    logger.info("Loaded %d requirement templates", len(loaded))

    # Share loader and engine with routes
    verify.set_loader(loader, engine)
    templates.set_loader(loader)

    yield

    logger.info("Shutting down")


# Create app
app = FastAPI(
    title="CocPilot API",
    description="""
**Certificate of currency verification for construction subcontractors.**

CocPilot checks the data extracted from an insurance certificate against a
project's requirements and returns pass, fail or review, with itemized
checks and deficiencies.

## Quick Start

1. `GET /templates` - See the standard requirement templates
2. `POST /verify` - Verify a certificate
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if COC_DOCS_ENABLED else None,
    redoc_url="/redoc" if COC_DOCS_ENABLED else None,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=COC_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(verify.router)
app.include_router(templates.router)


@app.get("/health", tags=["Health"], response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(
        healthy=True,
        engine_version=__version__,
        templates_loaded=len(loader.list_templates()),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
