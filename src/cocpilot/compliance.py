"""
Subcontractor compliance rollup.

The engine decides per document; the caller keeps a compliance status per
project subcontractor. These helpers make that mapping in one place.
"""
from __future__ import annotations

from .models import ComplianceStatus, Verification, VerificationStatus


_COMPLIANCE_BY_STATUS = {
    VerificationStatus.PASS: ComplianceStatus.COMPLIANT,
    VerificationStatus.FAIL: ComplianceStatus.NON_COMPLIANT,
    VerificationStatus.REVIEW: ComplianceStatus.PENDING,
}


def compliance_status_for(verification: Verification) -> ComplianceStatus:
    """Subcontractor compliance status implied by a verification."""
    return _COMPLIANCE_BY_STATUS[verification.status]


def requires_deficiency_notice(verification: Verification) -> bool:
    """
    True when the broker and subcontractor should be notified.

    Only failed verifications with at least one deficiency qualify. Review
    outcomes wait for a human decision.
    """
    return verification.status == VerificationStatus.FAIL and bool(verification.deficiencies)
