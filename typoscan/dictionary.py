"""誤記の判定と訂正候補の提示(Corrector の既定実装)。

判定順序:
1. ユーザー辞書 (extend-identifiers: 識別子そのまま / extend-words: 単語・大文字小文字無視)
2. 同梱の誤記テーブル (lexicon.TYPOS)
3. 方言つづり (locale に方言がある場合のみ。例: en-gb で "color" -> "colour")
4. 語彙ファイルによるあいまい一致 (vocabulary 指定時のみ、rapidfuzz)

ユーザー辞書で値がキーと同じものは「正しい語」(Correction.valid())として扱い、以降の判定を打ち切る。
呼び出し側は None と valid をどちらも「報告しない」として扱う。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from .config import DictConfig, Locale
from .lexicon import TYPOS, VARIANT_INDEX
from .spellcheck import DEFAULT_THRESHOLD, closest_word
from .tokens import split_symbol


@dataclass(frozen=True)
class Correction:
    VALID = "valid"
    INVALID = "invalid"
    CORRECT = "correct"

    kind: str
    suggestions: Tuple[str, ...] = ()

    @classmethod
    def valid(cls) -> "Correction":
        return cls(cls.VALID)

    @classmethod
    def invalid(cls) -> "Correction":
        return cls(cls.INVALID)

    @classmethod
    def correct(cls, *suggestions: str) -> "Correction":
        return cls(cls.CORRECT, tuple(suggestions))

    @classmethod
    def parse(cls, text: str) -> "Correction":
        # "" -> 候補なしの誤り / "a,b" -> 候補2つ
        parts = [p.strip() for p in text.split(",") if p.strip()]
        if not parts:
            return cls.invalid()
        return cls.correct(*parts)

    @property
    def is_valid(self) -> bool:
        return self.kind == self.VALID

    @property
    def is_invalid(self) -> bool:
        return self.kind == self.INVALID

    def __str__(self) -> str:
        if self.is_valid:
            return "<valid>"
        if self.is_invalid:
            return "<invalid>"
        return ", ".join(self.suggestions)


class Corrector(Protocol):
    def correct_ident(self, ident: str) -> Optional[Correction]:
        ...

    def correct_word(self, word: str) -> Optional[Correction]:
        ...


def _match_case(template: str, text: str) -> str:
    if len(template) > 1 and template.isupper():
        return text.upper()
    if template[:1].isupper():
        return text[:1].upper() + text[1:]
    return text


def _overrides(pairs: Iterable[Tuple[str, str]], fold_case: bool) -> Dict[str, Correction]:
    table: Dict[str, Correction] = {}
    for key, value in pairs:
        k = key.lower() if fold_case else key
        v = value.lower() if fold_case else value
        # 値がキーと同じ = 正しい語
        table[k] = Correction.valid() if v == k else Correction.parse(value)
    return table


class Dictionary:
    def __init__(
        self,
        locale: Locale = Locale.EN,
        extend_identifiers: Optional[Mapping[str, str]] = None,
        extend_words: Optional[Mapping[str, str]] = None,
        vocabulary: Optional[Iterable[str]] = None,
        fuzzy_threshold: int = DEFAULT_THRESHOLD,
    ):
        self.locale = locale
        self.category = locale.category
        self._identifiers = _overrides((extend_identifiers or {}).items(), fold_case=False)
        self._words = _overrides((extend_words or {}).items(), fold_case=True)
        self._vocabulary: List[str] = sorted({w.lower() for w in (vocabulary or ())})
        self._known = frozenset(self._vocabulary)
        self.fuzzy_threshold = fuzzy_threshold

    @classmethod
    def from_config(cls, config: DictConfig, vocabulary: Optional[Iterable[str]] = None) -> "Dictionary":
        return cls(
            locale=config.effective_locale(),
            extend_identifiers=dict(config.effective_extend_identifiers()),
            extend_words=dict(config.effective_extend_words()),
            vocabulary=vocabulary,
        )

    def correct_ident(self, ident: str) -> Optional[Correction]:
        if ident in self._identifiers:
            return self._identifiers[ident]
        words = list(split_symbol(ident, 0))
        if len(words) == 1 and words[0].token == ident:
            return self.correct_word(ident)
        return None

    def correct_word(self, word: str) -> Optional[Correction]:
        key = word.lower()
        if key in self._words:
            correction = self._words[key]
        elif key in TYPOS:
            correction = Correction.parse(TYPOS[key])
        elif key in VARIANT_INDEX:
            correction = self._correct_variant(key)
        elif self._vocabulary and key not in self._known:
            best = closest_word(key, self._vocabulary, self.fuzzy_threshold)
            correction = Correction.correct(best) if best else None
        else:
            correction = None
        if correction is None or correction.kind != Correction.CORRECT:
            return correction
        return Correction.correct(*(_match_case(word, s) for s in correction.suggestions))

    def _correct_variant(self, key: str) -> Optional[Correction]:
        if self.category is None:
            return None
        preferred = VARIANT_INDEX[key][self.category]
        if preferred == key:
            return None
        return Correction.correct(preferred)


__all__ = ["Correction", "Corrector", "Dictionary"]
