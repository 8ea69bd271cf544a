"""单据提交 - 校验、组装报文并一次性提交到后端。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from ..config import Settings, get_settings
from ..engine.draft import Draft
from ..engine.validation import IssueCode, ValidationIssue
from ..models.serialization import build_payload
from .client import (
    GENERIC_ERROR_MESSAGE,
    BackendAPIError,
    create_client,
    invoke_with_client,
    request_json,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """提交结果；失败时草稿保持不变，用户可修改后重新提交"""

    success: bool
    message: str = ""
    data: Optional[Any] = None
    issue: Optional[ValidationIssue] = None
    server_number: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def _server_number(data: Any, number_field: str) -> Optional[str]:
    """后端分配的编号（优先取单据编号字段，其次 id）"""
    if not isinstance(data, dict):
        return None
    for key in (number_field, "document_number", "id"):
        value = data.get(key)
        if value not in (None, ""):
            return str(value)
    return None


async def submit_draft(
    draft: Draft,
    client: Optional[httpx.Client] = None,
    *,
    post: bool = False,
    settings: Optional[Settings] = None,
) -> SubmissionResult:
    """
    Validate ``draft`` and send it to the backend as one request.

    Nothing is sent when validation fails. A backend or network failure is
    reported as a ``BackendRejected`` issue carrying the backend's message,
    and the draft is left as it was. A draft that is already submitted or
    has a request in flight is refused, so a double click sends one request.

    Parameters
    ----------
    client:
        Optional httpx client to reuse; a temporary one is created and closed
        otherwise.
    post:
        Ask the backend to post a ledger voucher immediately instead of
        saving it unposted.
    """
    settings = settings or get_settings()
    document = draft.document
    number = document.document_number

    if draft.is_submitted:
        return SubmissionResult(False, f"{number} has already been submitted")
    if draft.in_flight:
        return SubmissionResult(False, f"{number} is already being submitted")

    result = draft.validate(settings.balance_tolerance)
    if not result.ok:
        return SubmissionResult(False, result.message, issue=result.issue)

    profile = draft.profile
    payload = build_payload(
        document,
        result,
        is_posted=post,
        client_reference=draft.idempotency_key,
    )
    try:
        active_client = client or create_client(settings)
    except (ValueError, OSError) as exc:
        logger.error("Cannot reach the backend for %s: %s", number, exc)
        message = str(exc) or GENERIC_ERROR_MESSAGE
        return SubmissionResult(
            False,
            message,
            issue=ValidationIssue(IssueCode.BACKEND_REJECTED, message),
        )

    revision = draft.revision
    draft.in_flight = True
    logger.info("Submitting %s to %s", number, profile.endpoint)
    try:
        body = await invoke_with_client(
            request_json,
            active_client,
            "POST",
            profile.endpoint,
            json=payload,
            headers={"Idempotency-Key": draft.idempotency_key},
        )
    except BackendAPIError as exc:
        logger.warning("Backend rejected %s: %s", number, exc)
        return SubmissionResult(
            False,
            exc.message,
            data=exc.details,
            issue=ValidationIssue(IssueCode.BACKEND_REJECTED, exc.message),
        )
    finally:
        if draft.revision == revision:
            draft.in_flight = False
        if client is None:
            active_client.close()

    data = body.get("data")
    server_number = _server_number(data, profile.number_field)
    if draft.revision != revision:
        logger.warning("Draft was reset while %s was being submitted; keeping the new draft", number)
    else:
        draft.mark_submitted(server_number)
    logger.info("Submitted %s (server number: %s)", number, server_number or "-")
    return SubmissionResult(
        True,
        body.get("message") or "Saved successfully",
        data=data,
        server_number=server_number,
        warnings=result.warnings,
    )


__all__ = ["SubmissionResult", "submit_draft"]
