"""識別子トークンの抽出(Symbol)と、大文字小文字の遷移による単語分割(Word)。

- Symbol: 英字(Unicode の Alphabetic 属性)/10進数字/アンダースコアの最大連続。オフセットはバイト単位
- Word: Symbol を camelCase / PascalCase / 略語 / 数字混在 で区切った部分列

入力は生のバイト列。UTF-8 として復号できない候補は黙って除外する(エラーにはしない)。
抽出・分割はいずれも遅延イテレータで、途中で読むのをやめればそこで止まる。
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Union

import regex

from .config import TokenizerConfig
from .errors import ValidationError

# 候補範囲: ASCII の単語バイトまたは非 ASCII バイトの連続(ここで復号を試みる)
_CANDIDATE_RE = regex.compile(rb"[\w\x80-\xff]+")
_LETTER = r"\p{Alphabetic}"
_DIGIT = r"\p{Nd}"
# 復号後の識別子文字の最大連続。² や ‿ などの非メンバー文字で区切られる
_SYMBOL_RE = regex.compile(r"[" + _LETTER + _DIGIT + r"_]+")
_HEX_RE = regex.compile(r"0[xX][0-9a-fA-F_]+")

_DIGITS = frozenset("0123456789")


def _is_member(c: str) -> bool:
    return _SYMBOL_RE.fullmatch(c) is not None


def _class_escape(chars: str) -> str:
    # 文字クラス [...] の中に置くため、英数字以外はすべてエスケープする
    return "".join(c if c.isalnum() else "\\" + c for c in chars)


def _iter_candidates(content: bytes, pattern: regex.Pattern) -> Iterator[tuple[int, str]]:
    for m in pattern.finditer(content):
        try:
            text = m.group(0).decode("utf-8")
        except UnicodeDecodeError:
            # 壊れた UTF-8 を含む候補はまるごと捨てる
            continue
        yield m.start(), text


def _byte_offset(text: str, index: int) -> int:
    return len(text[:index].encode("utf-8"))


@dataclass(frozen=True)
class Symbol:
    token: str
    offset: int

    @classmethod
    def new(cls, token: str, offset: int = 0) -> "Symbol":
        """token がちょうど1個の識別子であることを検証して Symbol を作る。

        Raises:
            ValidationError: 識別子が無い / 先頭に余分な文字がある / 2個以上ある
        """
        itr = cls.parse(token)
        item = next(itr, None)
        if item is None:
            raise ValidationError(ValidationError.NONE_FOUND, token, "symbol")
        if item.offset != 0:
            raise ValidationError(ValidationError.PADDING, token, "symbol")
        if next(itr, None) is not None:
            raise ValidationError(ValidationError.MULTIPLE, token, "symbol")
        return cls(item.token, item.offset + offset)

    @classmethod
    def parse(cls, content: Union[bytes, str]) -> Iterator["Symbol"]:
        if isinstance(content, str):
            content = content.encode("utf-8")
        for start, text in _iter_candidates(content, _CANDIDATE_RE):
            for m in _SYMBOL_RE.finditer(text):
                yield cls(m.group(0), start + _byte_offset(text, m.start()))

    def split(self) -> Iterator["Word"]:
        return split_symbol(self.token, self.offset)


@dataclass(frozen=True)
class Word:
    token: str
    offset: int

    @classmethod
    def new(cls, token: str, offset: int = 0) -> "Word":
        Symbol.new(token, offset)
        itr = split_symbol(token, 0)
        item = next(itr, None)
        if item is None:
            raise ValidationError(ValidationError.NONE_FOUND, token, "word")
        if item.offset != 0:
            raise ValidationError(ValidationError.PADDING, token, "word")
        if next(itr, None) is not None:
            raise ValidationError(ValidationError.MULTIPLE, token, "word")
        return cls(item.token, item.offset + offset)


class WordMode(enum.Enum):
    """分割アルゴリズムの状態。

    現在の単語の中で最後に見た大文字/小文字の種別を追跡する。
    単語開始以降に大文字/小文字が無ければ BOUNDARY。
    """

    BOUNDARY = enum.auto()
    LOWERCASE = enum.auto()
    UPPERCASE = enum.auto()
    NUMBER = enum.auto()

    @classmethod
    def classify(cls, c: str) -> "WordMode":
        if c.islower():
            return cls.LOWERCASE
        if c.isupper():
            return cls.UPPERCASE
        if c in _DIGITS:
            return cls.NUMBER
        # 大文字小文字の区別が無い文字(_ や ' や漢字など)は区切り扱い
        return cls.BOUNDARY


_CASED = (WordMode.LOWERCASE, WordMode.UPPERCASE)


def _ends_word(cur: WordMode, nxt: WordMode) -> bool:
    # cur が現在の単語の最後の文字になる遷移
    return (
        nxt is WordMode.BOUNDARY
        or (cur in _CASED and nxt is WordMode.NUMBER)
        or (cur is WordMode.NUMBER and nxt in _CASED)
        or (cur is WordMode.LOWERCASE and nxt is WordMode.UPPERCASE)
    )


def split_symbol(symbol: str, offset: int) -> Iterator[Word]:
    """Symbol 文字列を単語に分割する。offset は symbol 先頭の絶対バイト位置。

    例: "PDFLoader" -> PDF, Loader / "GL11Version" -> GL, 11, Version
    """

    def word(begin: int, end: int) -> Word:
        return Word(symbol[begin:end], offset + _byte_offset(symbol, begin))

    start = 0
    start_mode = WordMode.BOUNDARY
    last = len(symbol) - 1
    for i, c in enumerate(symbol):
        cur_mode = WordMode.classify(c)
        if cur_mode is WordMode.BOUNDARY:
            if start == i:
                start += 1
            continue

        if i == last:
            # 末尾に残った文字列を最後の単語とする
            yield word(start, i + 1)
            break

        next_mode = WordMode.classify(symbol[i + 1])
        if _ends_word(cur_mode, next_mode):
            yield word(start, i + 1)
            start = i + 1
            start_mode = WordMode.BOUNDARY
        elif (start_mode, cur_mode, next_mode) == (WordMode.UPPERCASE, WordMode.UPPERCASE, WordMode.LOWERCASE):
            # 略語の直後の大文字は次の単語の先頭 ("PDFLoader" の L)
            yield word(start, i)
            start = i
            start_mode = WordMode.BOUNDARY
        else:
            start_mode = cur_mode


class Tokenizer:
    """TokenizerConfig で挙動を変えられる識別子抽出器。

    識別子は「英字 / (許可時)数字 / leading_chars」で始まり、
    「英字 / (許可時)数字 / include_chars」が続く。
    末尾は英字・数字・アンダースコアに限る("'recieve'" の閉じ引用符は含めない)。
    ignore_hex が有効なら ``0x1F`` のような16進数リテラルは丸ごと飛ばす。
    """

    def __init__(
        self,
        ignore_hex: bool = True,
        leading_digits: bool = False,
        leading_chars: str = "_",
        include_digits: bool = True,
        include_chars: str = "_'",
    ):
        self.ignore_hex = ignore_hex
        self.leading_digits = leading_digits
        self.leading_chars = leading_chars
        self.include_digits = include_digits
        self.include_chars = include_chars

        extra = "".join(sorted(set(leading_chars) | set(include_chars)))
        ascii_extra = "".join(c for c in extra if c.isascii())
        self._candidate_re = regex.compile(
            rb"[\w\x80-\xff" + _class_escape(ascii_extra).encode("ascii") + rb"]+"
        )
        self._run_re = regex.compile(r"[" + _LETTER + _DIGIT + r"_" + _class_escape(extra) + r"]+")
        tail_chars = "".join(c for c in include_chars if _is_member(c))
        self._ident_re = regex.compile(
            "(?:" + self._alternatives(leading_digits, leading_chars) + ")"
            "(?:(?:" + self._alternatives(include_digits, include_chars) + ")*"
            "(?:" + self._alternatives(include_digits, tail_chars) + "))?"
        )

    @staticmethod
    def _alternatives(digits: bool, chars: str) -> str:
        parts = [_LETTER]
        if digits:
            parts.append(_DIGIT)
        if chars:
            parts.append("[" + _class_escape(chars) + "]")
        return "|".join(parts)

    @classmethod
    def from_config(cls, config: TokenizerConfig) -> "Tokenizer":
        return cls(
            ignore_hex=config.effective_ignore_hex(),
            leading_digits=config.effective_identifier_leading_digits(),
            leading_chars=config.effective_identifier_leading_chars(),
            include_digits=config.effective_identifier_include_digits(),
            include_chars=config.effective_identifier_include_chars(),
        )

    def parse_bytes(self, content: bytes) -> Iterator[Symbol]:
        for start, text in _iter_candidates(content, self._candidate_re):
            for run in self._run_re.finditer(text):
                if self.ignore_hex and _HEX_RE.fullmatch(run.group(0)):
                    continue
                for m in self._ident_re.finditer(text, run.start(), run.end()):
                    token = m.group(0)
                    # 記号だけの一致 (leading_chars="$" の "$" など) は識別子ではない
                    if not any(_is_member(c) for c in token):
                        continue
                    yield Symbol(token, start + _byte_offset(text, m.start()))

    def parse_str(self, content: str) -> Iterator[Symbol]:
        return self.parse_bytes(content.encode("utf-8"))

    def __repr__(self) -> str:
        return (
            f"Tokenizer(ignore_hex={self.ignore_hex!r}, leading_digits={self.leading_digits!r}, "
            f"leading_chars={self.leading_chars!r}, include_digits={self.include_digits!r}, "
            f"include_chars={self.include_chars!r})"
        )


__all__ = ["Symbol", "Word", "WordMode", "split_symbol", "Tokenizer"]
