"""记账后端 REST 客户端封装。"""

from __future__ import annotations

from .client import (
    BackendAPIError,
    create_client,
    extract_error_message,
    invoke_with_client,
    parse_response,
    request_json,
)
from .submission import SubmissionResult, submit_draft

__all__ = [
    "BackendAPIError",
    "SubmissionResult",
    "create_client",
    "extract_error_message",
    "invoke_with_client",
    "parse_response",
    "request_json",
    "submit_draft",
]
