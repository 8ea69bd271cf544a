"""Client-side draft numbers.

A draft number is a display hint, not an authoritative identifier: two
drafts of the same type created by the same tenant within the same
millisecond collide, and the backend's uniqueness constraint decides.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..models.base import DocumentType
from .profiles import get_profile


def generate(prefix: str, tenant_id: int, now: datetime, with_millis: bool = False) -> str:
    """Return ``{prefix}-{tenant}{DDMMYYYY}{HHMMSS}[fff]`` for ``now``.

    The calendar fields of ``now`` are used as given, without any timezone
    conversion.
    """
    number = f"{prefix}-{tenant_id}{now:%d%m%Y%H%M%S}"
    if with_millis:
        number += f"{now.microsecond // 1000:03d}"
    return number


def generate_for(
    document_type: DocumentType,
    tenant_id: int,
    now: Optional[datetime] = None,
) -> str:
    """Generate a fresh number using the prefix and millisecond rule of the type."""
    profile = get_profile(document_type)
    return generate(
        profile.prefix,
        tenant_id,
        now or datetime.now(),
        with_millis=profile.with_millis,
    )


__all__ = ["generate", "generate_for"]
