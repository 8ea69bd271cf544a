"""Simple JSON-based session storage for the backend auth token."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Union

PathLike = Union[str, Path]


def _resolve(path: Optional[PathLike]) -> Path:
    if path is not None:
        return Path(path)
    from ..config import get_settings

    return get_settings().token_file


def load_token(path: Optional[PathLike] = None) -> Optional[Dict[str, object]]:
    """Load the saved session.

    Returns:
        Dict with keys token, tenant_id, username, or None when no usable
        session is stored
    """
    session_file = _resolve(path)
    if not session_file.exists():
        return None

    with session_file.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            return None

    if not isinstance(data, dict) or not data.get("token"):
        return None
    return {
        "token": str(data["token"]),
        "tenant_id": data.get("tenant_id"),
        "username": data.get("username", ""),
    }


def save_token(
    token: str,
    *,
    tenant_id: Optional[int] = None,
    username: str = "",
    path: Optional[PathLike] = None,
) -> Path:
    """Persist the session to the JSON file."""
    if not token:
        raise ValueError("token must not be empty")
    session_file = _resolve(path)
    session_file.parent.mkdir(parents=True, exist_ok=True)
    with session_file.open("w", encoding="utf-8") as f:
        json.dump(
            {"token": token, "tenant_id": tenant_id, "username": username},
            f,
            ensure_ascii=False,
            indent=2,
        )
    return session_file


def clear_token(path: Optional[PathLike] = None) -> bool:
    """Remove the saved session; returns whether a file was deleted."""
    session_file = _resolve(path)
    if not session_file.exists():
        return False
    session_file.unlink()
    return True


__all__ = ["clear_token", "load_token", "save_token"]
