"""
CocPilot Exception Hierarchy

Domain-specific exceptions for certificate of currency verification.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: COC_<CATEGORY>_<SPECIFIC>

Most engine errors never reach the caller: the parsers raise them and the
check evaluator turns them into Checks. Only VerificationInputError (a caller
bug, e.g. no requirement list at all) and the template pack errors propagate.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CocPilotError(Exception):
    """
    Base exception for all CocPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (COC_*)
        details: Additional context about the error
        document_id: Associated COC document ID if applicable
    """
    message: str
    code: str = "COC_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    document_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.document_id:
            parts.append(f"(document: {self.document_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.document_id:
            result["document_id"] = self.document_id
        return result


# =============================================================================
# Verification Input Errors
# =============================================================================

@dataclass
class VerificationInputError(CocPilotError):
    """Required structural argument missing or of the wrong kind."""
    code: str = "COC_VERIFICATION_INPUT_ERROR"


@dataclass
class MalformedInputError(CocPilotError):
    """Requirement or coverage record is missing a mandatory field."""
    code: str = "COC_MALFORMED_INPUT"


@dataclass
class ExtractionAbsentError(CocPilotError):
    """Extraction step produced no data for the document."""
    code: str = "COC_EXTRACTION_ABSENT"


@dataclass
class InvalidNumericComparisonError(CocPilotError):
    """A limit or excess value cannot be read as a currency amount."""
    code: str = "COC_INVALID_NUMERIC_COMPARISON"


# =============================================================================
# Requirement Template Errors
# =============================================================================

@dataclass
class TemplateLoadError(CocPilotError):
    """Failed to load requirement template pack from file."""
    code: str = "COC_TEMPLATE_LOAD_ERROR"


@dataclass
class TemplateValidationError(CocPilotError):
    """Requirement template pack schema validation failed."""
    code: str = "COC_TEMPLATE_VALIDATION_ERROR"


@dataclass
class TemplateVersionMismatch(CocPilotError):
    """Template pack schema version doesn't match expected version."""
    code: str = "COC_TEMPLATE_VERSION_MISMATCH"


@dataclass
class TemplateNotFoundError(CocPilotError):
    """Requested requirement template not found."""
    code: str = "COC_TEMPLATE_NOT_FOUND"
