"""本地存储 - 仅保存后端认证会话"""

from .token_storage import clear_token, load_token, save_token

__all__ = ["clear_token", "load_token", "save_token"]
