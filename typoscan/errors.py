"""typoscan の例外定義。

- ConfigError: 設定ファイルの構文エラー/未知キー/型不一致(致命的)
- ValidationError: Symbol/Word の厳密コンストラクタの検証失敗(呼び出し元で回復可能)
"""
from __future__ import annotations


class TyposcanError(Exception):
    pass


class ConfigError(TyposcanError, ValueError):
    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class ValidationError(TyposcanError, ValueError):
    NONE_FOUND = "none-found"
    PADDING = "padding"
    MULTIPLE = "multiple"

    _MESSAGES = {
        NONE_FOUND: "no token found",
        PADDING: "leading padding found",
        MULTIPLE: "more than one token found",
    }

    def __init__(self, kind: str, token: str, what: str = "symbol"):
        self.kind = kind
        self.token = token
        self.what = what
        super().__init__(f"Invalid {what} ({self._MESSAGES[kind]}): {token!r}")


__all__ = ["TyposcanError", "ConfigError", "ValidationError"]
