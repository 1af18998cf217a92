"""typoscan
ソースコード/テキスト中の識別子から英単語の誤記を検出するライブラリ。

主な提供機能:
- 生のバイト列から識別子(Symbol)を抽出し、camelCase/略語/数字混在を単語(Word)に分割
- typos.toml などの多層設定の読み込みとカスケード既定値による解決
- 同梱の誤記テーブル + ユーザー辞書 + 方言つづりによる訂正候補の提示
- CLI インターフェース
"""
from .config import Config, Locale, merge
from .tokens import Symbol, Word, Tokenizer
from .dictionary import Correction, Dictionary
from .report import Message
from .checker import check_text, check_bytes, process_file, check_paths

__all__ = [
    "Config",
    "Locale",
    "merge",
    "Symbol",
    "Word",
    "Tokenizer",
    "Correction",
    "Dictionary",
    "Message",
    "check_text",
    "check_bytes",
    "process_file",
    "check_paths",
]

__version__ = "0.1.0"
