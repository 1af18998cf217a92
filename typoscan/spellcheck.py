from __future__ import annotations
"""
語彙ファイルに基づくあいまい一致の候補提示
- rapidfuzz による類似度で、語彙の中から最も近い語を返す
- 同梱の誤記テーブルに無い未知語に対する最後の手段として Dictionary から使う

語彙ファイル形式:
- プレーンテキスト: 1行1語（UTF-8）。コメント行は先頭#で無視。
- JSON: {"words": ["correct", "words", ...]}
"""
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 90


def load_dict(paths: Iterable[str | Path]) -> List[str]:
    words: List[str] = []
    for p in paths:
        path = Path(p)
        if path.suffix.lower() == '.json':
            data = json.loads(path.read_text(encoding='utf-8'))
            ws = data.get('words', []) if isinstance(data, dict) else []
            words.extend(str(w) for w in ws)
        else:
            for line in path.read_text(encoding='utf-8', errors='ignore').splitlines():
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                words.append(line)
        logger.debug("loaded vocabulary %s", path)
    # 重複除去(大文字小文字は区別しない)
    return sorted({w.lower() for w in words})


def closest_word(word: str, vocabulary: List[str], threshold: int = DEFAULT_THRESHOLD) -> Optional[str]:
    """vocabulary 中で word に最も近い語。しきい値未満・完全一致・1文字語は None。"""
    if len(word) <= 1 or not vocabulary:
        return None
    cand = process.extractOne(word, vocabulary, scorer=fuzz.WRatio, score_cutoff=threshold)
    if not cand:
        return None
    best, _score, _ = cand
    if best == word:
        return None
    return best


__all__ = ["load_dict", "closest_word", "DEFAULT_THRESHOLD"]
