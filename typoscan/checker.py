"""高レベル API: テキスト/ファイル/パス群に対する誤記検出

- ファイル全体をバイト列で読み込み、改行(\\n)で物理行に分割
- 行ごとに識別子(Symbol)を抽出し、識別子全体を Corrector に問い合わせる
- 訂正候補があれば Message を Report へ1件ずつ渡す(行・桁の昇順)
- パス走査は Walk 設定に従い、ファイル単位でスレッド並列化可能
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .config import Config
from .dictionary import Correction, Corrector, Dictionary
from .file_scanner import is_probably_text, iter_files, read_bytes
from .report import Collector, Message, Report
from .tokens import Symbol, Tokenizer, Word

logger = logging.getLogger(__name__)


@dataclass
class ScanSummary:
    files: int = 0
    messages: int = 0
    errors: int = 0


def iter_lines(content: bytes) -> Iterator[bytes]:
    """改行を含めたまま1行ずつ返す。末尾の改行の後ろに空行は作らない。"""
    start = 0
    while start < len(content):
        end = content.find(b"\n", start)
        if end < 0:
            yield content[start:]
            return
        yield content[start:end + 1]
        start = end + 1


def _symbols(content: bytes, tokenizer: Optional[Tokenizer]) -> Iterator[Symbol]:
    if tokenizer is None:
        return Symbol.parse(content)
    return tokenizer.parse_bytes(content)


def check_bytes(
    content: bytes,
    dictionary: Corrector,
    report: Report,
    path: str = "-",
    tokenizer: Optional[Tokenizer] = None,
) -> int:
    count = 0
    for line_idx, line in enumerate(iter_lines(content)):
        line_num = line_idx + 1
        for symbol in _symbols(line, tokenizer):
            # 識別子はそのまま問い合わせる(単語分割は check_words で)
            correction = dictionary.correct_ident(symbol.token)
            if correction is None or correction.is_valid:
                continue
            report(Message(
                path=path,
                line=line,
                line_num=line_num,
                col_num=symbol.offset,
                word=symbol.token,
                correction=correction,
            ))
            count += 1
    return count


def process_file(
    path: str | Path,
    dictionary: Corrector,
    report: Report,
    tokenizer: Optional[Tokenizer] = None,
) -> int:
    # 読み込みに失敗した場合は1件も報告せずに OSError を送出
    content = read_bytes(Path(path))
    return check_bytes(content, dictionary, report, path=str(path), tokenizer=tokenizer)


def check_filename(
    path: str | Path,
    dictionary: Corrector,
    report: Report,
    tokenizer: Optional[Tokenizer] = None,
) -> int:
    name = Path(path).name
    count = 0
    for symbol in _symbols(name.encode("utf-8"), tokenizer):
        correction = dictionary.correct_ident(symbol.token)
        if correction is None or correction.is_valid:
            continue
        report(Message(
            path=str(path),
            line=b"",
            line_num=0,
            col_num=symbol.offset,
            word=symbol.token,
            correction=correction,
        ))
        count += 1
    return count


def check_words(symbol: Symbol, dictionary: Corrector) -> Iterator[Tuple[Word, Correction]]:
    """複合識別子を単語に分割して、誤記と判定された単語だけを返す。"""
    for word in symbol.split():
        correction = dictionary.correct_word(word.token)
        if correction is not None and not correction.is_valid:
            yield word, correction


def check_text(
    text: str,
    dictionary: Optional[Corrector] = None,
    tokenizer: Optional[Tokenizer] = None,
    path: str = "-",
) -> List[Message]:
    collector = Collector()
    check_bytes(text.encode("utf-8"), dictionary or Dictionary(), collector, path=path, tokenizer=tokenizer)
    return collector.messages


def _scan_one(
    path: Path,
    config: Config,
    dictionary: Corrector,
    tokenizer: Tokenizer,
) -> Tuple[List[Message], Optional[OSError]]:
    engine = config.default
    collector = Collector()
    try:
        if engine.effective_check_filename():
            check_filename(path, dictionary, collector, tokenizer=tokenizer)
        if engine.effective_check_file():
            content = read_bytes(path)
            if not engine.effective_binary() and not is_probably_text(content):
                logger.debug("skipping binary file %s", path)
            else:
                check_bytes(content, dictionary, collector, path=str(path), tokenizer=tokenizer)
    except OSError as e:
        # 失敗したファイルのメッセージは捨てる
        return [], e
    return collector.messages, None


def check_paths(
    paths: Iterable[str],
    config: Config,
    report: Report,
    jobs: int = 1,
    dictionary: Optional[Corrector] = None,
    tokenizer: Optional[Tokenizer] = None,
) -> ScanSummary:
    engine = config.default
    if dictionary is None:
        dictionary = Dictionary.from_config(engine.dict_config())
    if tokenizer is None:
        tokenizer = Tokenizer.from_config(engine.tokenizer_config())

    files = list(iter_files(paths, config.files))
    summary = ScanSummary(files=len(files))
    logger.info("checking %s file(s)", len(files))

    def flush(path: Path, messages: List[Message], error: Optional[OSError]) -> None:
        if error is not None:
            logger.warning("%s: %s", path, error)
            summary.errors += 1
            return
        for msg in messages:
            report(msg)
        summary.messages += len(messages)

    # 並列/直列実行(報告順は常に走査順)
    if jobs and jobs > 1:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            futs = [(f, ex.submit(_scan_one, f, config, dictionary, tokenizer)) for f in files]
            for f, fut in futs:
                flush(f, *fut.result())
    else:
        for f in files:
            flush(f, *_scan_one(f, config, dictionary, tokenizer))

    return summary


__all__ = [
    "ScanSummary",
    "iter_lines",
    "check_bytes",
    "check_text",
    "process_file",
    "check_filename",
    "check_words",
    "check_paths",
]
