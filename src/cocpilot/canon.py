"""
Canonical JSON Serialization

Provides deterministic JSON serialization for hashing and comparison.
Based on RFC 8785 (JSON Canonicalization Scheme) principles:
- Sorted keys (lexicographic)
- No whitespace
- Consistent number formatting
- UTF-8 encoding

The same verification inputs always produce the same hash, which is what
lets a stored Verification be replayed and compared bit for bit.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional
from uuid import UUID


def _default_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for non-standard types.

    Handles:
    - datetime/date: ISO 8601 format
    - UUID: string representation
    - Decimal: string (preserves precision)
    - Enum: value
    - dataclass: dict (via to_dict when the model defines one)
    - set/frozenset: sorted list
    """
    if isinstance(obj, datetime):
        if obj.tzinfo is not None:
            return obj.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        return obj.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, tuple):
        return list(obj)
    if isinstance(obj, bytes):
        return obj.hex()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize object to canonical JSON as UTF-8 bytes."""
    return canonical_json(obj).encode("utf-8")


def content_hash(obj: Any) -> str:
    """
    Compute SHA-256 hash of canonical JSON representation.

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()


def content_hash_short(obj: Any, length: int = 12) -> str:
    """Compute truncated SHA-256 hash for display purposes."""
    return content_hash(obj)[:length]


def compute_requirements_hash(requirements: Iterable[Any]) -> str:
    """
    Hash a project's requirement list as a snapshot.

    Order is kept: requirement order drives check order, so two lists with
    the same entries in a different order are different snapshots.
    """
    return content_hash([_as_dict(r) for r in requirements])


def compute_input_hash(
    requirements: Iterable[Any],
    extracted_data: Any,
    as_of: date,
    project: Optional[Any] = None,
    subcontractor: Optional[Any] = None,
) -> str:
    """
    Hash everything a verification run depends on.

    Two runs with the same input hash must produce identical checks,
    deficiencies and status.
    """
    return content_hash({
        "requirements": [_as_dict(r) for r in requirements],
        "extracted_data": _as_dict(extracted_data) if extracted_data is not None else None,
        "as_of": as_of,
        "project": _as_dict(project) if project is not None else None,
        "subcontractor": _as_dict(subcontractor) if subcontractor is not None else None,
    })


def _as_dict(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return obj


def compute_template_hash(template: Any) -> str:
    """
    Compute SHA-256 hash of a requirement template in canonical JSON form.

    Covers the rule-bearing fields only (id, version and requirements), so
    a renamed template keeps its hash. Requirement order is kept.

    Args:
        template: A RequirementTemplate instance

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    return content_hash({
        "id": template.id,
        "version": template.version,
        "requirements": [_as_dict(r) for r in template.requirements],
    })
