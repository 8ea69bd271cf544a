"""Configuration utilities for environment-based settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(dotenv_path: Optional[str] = None) -> None:
    """Load environment variables from a .env file without overriding existing values."""
    path = Path(dotenv_path or ".env")
    load_dotenv(dotenv_path=str(path), override=False)


# 默认HTTP超时时间（秒）
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_BASE_URL = "http://localhost:8000"
# 借贷平衡容差（货币单位）
DEFAULT_BALANCE_TOLERANCE = Decimal("0.01")
DEFAULT_TOKEN_FILE = Path.home() / ".ledgerdraft" / "session.json"


@dataclass(frozen=True)
class Settings:
    """Structured configuration values for the accounting backend."""

    base_url: str
    api_token: str = ""
    tenant_id: int = 1
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    balance_tolerance: Decimal = DEFAULT_BALANCE_TOLERANCE
    token_file: Path = DEFAULT_TOKEN_FILE
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_token)


def _positive_float(raw: str, default: float) -> float:
    if not raw:
        return default
    try:
        parsed = float(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _positive_int(raw: str, default: int) -> int:
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _tolerance(raw: str) -> Decimal:
    if not raw:
        return DEFAULT_BALANCE_TOLERANCE
    try:
        parsed = Decimal(raw)
    except InvalidOperation:
        return DEFAULT_BALANCE_TOLERANCE
    return parsed if parsed >= 0 else DEFAULT_BALANCE_TOLERANCE


@lru_cache(maxsize=1)
def get_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Return cached settings, ensuring environment variables are loaded once."""
    load_env(dotenv_path)
    token_file = os.getenv("LEDGERDRAFT_TOKEN_FILE", "")
    return Settings(
        base_url=os.getenv("LEDGERDRAFT_API_BASE_URL", DEFAULT_BASE_URL),
        api_token=os.getenv("LEDGERDRAFT_API_TOKEN", ""),
        tenant_id=_positive_int(os.getenv("LEDGERDRAFT_TENANT_ID", ""), 1),
        http_timeout=_positive_float(
            os.getenv("LEDGERDRAFT_HTTP_TIMEOUT", ""), DEFAULT_HTTP_TIMEOUT
        ),
        balance_tolerance=_tolerance(os.getenv("LEDGERDRAFT_BALANCE_TOLERANCE", "")),
        token_file=Path(token_file).expanduser() if token_file else DEFAULT_TOKEN_FILE,
        log_level=os.getenv("LEDGERDRAFT_LOG_LEVEL", "INFO").upper(),
    )
