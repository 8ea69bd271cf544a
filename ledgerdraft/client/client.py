"""httpx 客户端封装，适配记账后端的 REST 接口。"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

import httpx

from ..config import Settings, get_settings
from ..storage.token_storage import load_token

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "Request to the accounting backend failed"


@dataclass
class BackendAPIError(Exception):
    """统一封装后端返回的错误（HTTP 错误或 success=false）。"""

    status: Optional[int]
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        code = self.status if self.status is not None else "-"
        return f"[{code}] {self.message}"


def _normalise_base_url(base_url: str) -> str:
    """确保 base_url 以 `/` 结尾，避免路径连接异常。"""
    return base_url if base_url.endswith("/") else f"{base_url}/"


def extract_error_message(body: Any, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    从响应体中取出可展示的错误信息。

    依次尝试 ``message``、``detail``（字符串，或 FastAPI 风格的
    ``[{"msg": ...}]`` 列表），都没有时返回 ``fallback``。
    """
    if not isinstance(body, dict):
        return fallback
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    detail = body.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    if isinstance(detail, list) and detail:
        parts = [
            item.get("msg") if isinstance(item, dict) and item.get("msg") else str(item)
            for item in detail
        ]
        return ", ".join(parts)
    return fallback


def _wrap_http_error(exc: httpx.HTTPError) -> BackendAPIError:
    """将 httpx 异常转换为自定义异常，便于统一处理。"""
    response = getattr(exc, "response", None)
    status = response.status_code if response is not None else None
    return BackendAPIError(status=status, message=str(exc) or GENERIC_ERROR_MESSAGE)


def create_client(
    settings: Optional[Settings] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    token: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """根据配置初始化同步 httpx 客户端。

    Token 优先级：显式参数 > ``LEDGERDRAFT_API_TOKEN`` > 本地保存的会话。
    """
    settings = settings or get_settings()
    resolved_base_url = base_url or settings.base_url
    if not resolved_base_url:
        raise ValueError(
            "LEDGERDRAFT_API_BASE_URL 未提供，请在环境变量或 .env 文件中进行配置。"
        )
    resolved_timeout = timeout if timeout is not None else settings.http_timeout

    headers = {
        "Accept": "application/json",
        "X-Tenant-ID": str(settings.tenant_id),
    }
    resolved_token = token or settings.api_token
    if not resolved_token:
        session = load_token(settings.token_file)
        resolved_token = session.get("token", "") if session else ""
    if resolved_token:
        headers["Authorization"] = f"Bearer {resolved_token}"

    client_kwargs: Dict[str, Any] = {
        "base_url": _normalise_base_url(resolved_base_url),
        "timeout": resolved_timeout,
        "headers": headers,
    }
    if transport is not None:
        client_kwargs["transport"] = transport
    return httpx.Client(**client_kwargs)


def parse_response(response: httpx.Response) -> Dict[str, Any]:
    """
    解析 ``{success, message, data}`` 格式的响应。

    没有 ``success`` 字段的 2xx 响应视为成功，整个响应体作为 ``data``。
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_error:
        raise BackendAPIError(
            status=response.status_code,
            message=extract_error_message(body),
            details=body,
        )
    if not isinstance(body, dict):
        raise BackendAPIError(
            status=response.status_code,
            message="Unexpected response from the accounting backend",
            details=body,
        )
    if "success" not in body:
        return {"success": True, "message": "", "data": body}
    if not body["success"]:
        raise BackendAPIError(
            status=response.status_code,
            message=extract_error_message(body),
            details=body,
        )
    return body


def request_json(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """发送请求并返回解析后的响应体；失败时抛出 :class:`BackendAPIError`。"""
    try:
        response = client.request(method, path, json=json, headers=headers)
    except httpx.HTTPError as exc:
        raise _wrap_http_error(exc) from exc
    logger.debug("%s %s -> %s", method, path, response.status_code)
    return parse_response(response)


async def invoke_with_client(
    func: Callable[..., T],
    /,
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    在线程池中执行同步 httpx 请求，并统一异常处理。

    Parameters
    ----------
    func:
        阻塞调用，如 :func:`request_json`。
    args, kwargs:
        透传给目标方法的参数。
    """

    def _runner() -> T:
        try:
            return func(*args, **kwargs)
        except httpx.HTTPError as exc:
            raise _wrap_http_error(exc) from exc

    return await asyncio.to_thread(_runner)


__all__ = [
    "BackendAPIError",
    "create_client",
    "extract_error_message",
    "invoke_with_client",
    "parse_response",
    "request_json",
]
