"""検出結果(Message)と出力先(Report)。

Report は Message を1件ずつ受け取る同期的な呼び出し可能オブジェクト。
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, TextIO

from .dictionary import Correction


@dataclass(frozen=True)
class Message:
    path: str
    line: bytes
    line_num: int  # 1始まり。ファイル名の検査では 0
    col_num: int  # 行頭からのバイト位置
    word: str
    correction: Correction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line_num": self.line_num,
            "col_num": self.col_num,
            "word": self.word,
            "kind": self.correction.kind,
            "suggestions": list(self.correction.suggestions),
        }


Report = Callable[[Message], None]


def _describe(msg: Message) -> str:
    if msg.correction.is_invalid:
        return f"`{msg.word}` is disallowed"
    return f"`{msg.word}` -> " + ", ".join(f"`{s}`" for s in msg.correction.suggestions)


def print_silent(msg: Message) -> None:
    pass


def print_brief(msg: Message, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if msg.line_num == 0:
        print(f"{msg.path}: {_describe(msg)}", file=out)
    else:
        print(f"{msg.path}:{msg.line_num}:{msg.col_num}: {_describe(msg)}", file=out)


def print_long(msg: Message, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if msg.line_num == 0:
        print(f"error: {_describe(msg)} in file name", file=out)
        print(f"  --> {msg.path}", file=out)
        return
    line = msg.line.decode("utf-8", errors="replace").rstrip("\r\n")
    # キャレット位置は表示幅ではなく復号後の文字数で合わせる
    prefix = msg.line[: msg.col_num].decode("utf-8", errors="replace")
    gutter = " " * len(str(msg.line_num))
    print(f"error: {_describe(msg)}", file=out)
    print(f"  --> {msg.path}:{msg.line_num}:{msg.col_num}", file=out)
    print(f"{gutter} |", file=out)
    print(f"{msg.line_num} | {line}", file=out)
    print(f"{gutter} | {' ' * len(prefix)}{'^' * len(msg.word)}", file=out)
    print(f"{gutter} |", file=out)


def print_json(msg: Message, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print(json.dumps(msg.to_dict(), ensure_ascii=False), file=out)


class Collector:
    """Message をリストに溜めるだけの Report(テスト/並列実行のバッファ用)。"""

    def __init__(self) -> None:
        self.messages: List[Message] = []

    def __call__(self, msg: Message) -> None:
        self.messages.append(msg)

    def __len__(self) -> int:
        return len(self.messages)


REPORTERS: Dict[str, Report] = {
    "silent": print_silent,
    "brief": print_brief,
    "long": print_long,
    "json": print_json,
}

__all__ = ["Message", "Report", "Collector", "REPORTERS", "print_silent", "print_brief", "print_long", "print_json"]
