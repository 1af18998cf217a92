from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List

import yaml

from .checker import check_bytes, check_paths, iter_lines
from .config import Config, DictConfig, EngineConfig, Locale, TokenizerConfig, Walk, merge
from .dictionary import Dictionary
from .errors import ConfigError
from .file_scanner import iter_files, read_bytes
from .report import REPORTERS
from .spellcheck import load_dict
from .tokens import Tokenizer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="typoscan",
        description="ソースコード/テキスト中の識別子を抽出し、英単語の誤記を検出します"
    )
    p.add_argument("paths", nargs="*", default=["."], help="走査するファイル/ディレクトリ ('-' で標準入力)")
    p.add_argument("--config", help="設定ファイル(TOML/YAML/JSON)。カレントディレクトリの typos.toml の上に重ねる")
    p.add_argument("--isolated", action="store_true", help="カレントディレクトリの設定ファイルを読まない")
    p.add_argument("--format", choices=sorted(REPORTERS), default="long", help="出力形式 (既定: long)")
    p.add_argument("--locale", choices=Locale.variants(), help="英語の方言 (既定: en = 方言を問わない)")
    # 三値: 未指定(None)なら設定ファイル/既定値に従う
    p.add_argument("--binary", dest="binary", action="store_true", default=None, help="バイナリファイルも検査する")
    p.add_argument("--no-binary", dest="binary", action="store_false", help="バイナリファイルを検査しない")
    p.add_argument("--check-filenames", dest="check_filename", action="store_true", default=None, help="ファイル名を検査する")
    p.add_argument("--no-check-filenames", dest="check_filename", action="store_false", help="ファイル名を検査しない")
    p.add_argument("--check-files", dest="check_file", action="store_true", default=None, help="ファイル内容を検査する")
    p.add_argument("--no-check-files", dest="check_file", action="store_false", help="ファイル内容を検査しない")
    p.add_argument("--hex", dest="ignore_hex", action="store_false", default=None, help="16進数リテラルも検査する")
    p.add_argument("--no-hex", dest="ignore_hex", action="store_true", help="16進数リテラルを検査しない")
    p.add_argument("--hidden", action="store_true", help="隠しファイル/ディレクトリも走査する")
    p.add_argument("--no-ignore", action="store_true", help="無視ファイルをすべて無視する")
    p.add_argument("--no-ignore-dot", action="store_true", help=".ignore を尊重しない")
    p.add_argument("--no-ignore-vcs", action="store_true", help=".gitignore 等を尊重しない")
    p.add_argument("--no-ignore-global", action="store_true", help="グローバルな除外ファイルを尊重しない")
    p.add_argument("--no-ignore-parent", action="store_true", help="親ディレクトリの無視ファイルを尊重しない")
    p.add_argument("--dict", action="append", dest="dict_files", metavar="FILE", help="あいまい一致に使う語彙ファイル(複数可): txt(1行1語)/json({words:[...]})")
    p.add_argument("--jobs", type=int, default=1, help="並列実行のワーカー数")
    p.add_argument("--dump-config", metavar="FILE", help="解決済みの設定を YAML で書き出して終了 ('-' で標準出力)")
    p.add_argument("--identifiers", action="store_true", help="検査せずに抽出した識別子を列挙する")
    p.add_argument("--words", action="store_true", help="検査せずに識別子を分割した単語を列挙する")
    p.add_argument("-v", "--verbose", action="count", default=0, help="ログを詳細にする (-vv でデバッグ)")
    return p


def _overlay_from_args(args: argparse.Namespace) -> Config:
    walk = Walk()
    if args.hidden:
        walk.ignore_hidden = False
    if args.no_ignore:
        walk.ignore_files = False
    if args.no_ignore_dot:
        walk.ignore_dot = False
    if args.no_ignore_vcs:
        walk.ignore_vcs = False
    if args.no_ignore_global:
        walk.ignore_global = False
    if args.no_ignore_parent:
        walk.ignore_parent = False
    engine = EngineConfig(
        binary=args.binary,
        check_filename=args.check_filename,
        check_file=args.check_file,
    )
    if args.ignore_hex is not None:
        engine.tokenizer = TokenizerConfig(ignore_hex=args.ignore_hex)
    if args.locale:
        engine.dictionary = DictConfig(locale=Locale.parse(args.locale))
    return Config(files=walk, default=engine)


def load_config(args: argparse.Namespace) -> Config:
    # 既定値 <- カレントディレクトリの設定 <- --config <- コマンドライン引数
    config = Config.from_defaults()
    if not args.isolated:
        found = Config.from_dir(Path.cwd())
        if found is not None:
            config = merge(config, found)
    if args.config:
        config = merge(config, Config.from_file(args.config))
    return merge(config, _overlay_from_args(args))


def _dump_config(config: Config, dest: str) -> None:
    text = yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True)
    if dest == "-":
        sys.stdout.write(text)
    else:
        Path(dest).write_text(text, encoding="utf-8")


def _list_tokens(paths: List[str], config: Config, tokenizer: Tokenizer, words: bool) -> int:
    errors = 0
    for path in iter_files(paths, config.files):
        try:
            content = read_bytes(path)
        except OSError as e:
            print(f"[warn] {path}: {e}", file=sys.stderr)
            errors += 1
            continue
        for line_idx, line in enumerate(iter_lines(content)):
            for symbol in tokenizer.parse_bytes(line):
                items = symbol.split() if words else [symbol]
                for item in items:
                    print(f"{path}:{line_idx + 1}:{item.offset}: {item.token}")
    return 2 if errors else 0


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args)
    except (ConfigError, OSError) as e:
        print(f"[error] failed to load config: {e}", file=sys.stderr)
        return 2

    if args.dump_config:
        _dump_config(config, args.dump_config)
        return 0

    tokenizer = Tokenizer.from_config(config.default.tokenizer_config())
    if args.identifiers or args.words:
        return _list_tokens(args.paths, config, tokenizer, words=args.words)

    # 語彙ファイル読み込み(失敗しても同梱テーブルだけで続行)
    vocabulary = None
    if args.dict_files:
        try:
            vocabulary = load_dict(args.dict_files)
        except (OSError, ValueError) as e:
            print(f"[warn] failed to load dictionary: {e}", file=sys.stderr)
    dictionary = Dictionary.from_config(config.default.dict_config(), vocabulary=vocabulary)
    report = REPORTERS[args.format]

    if args.paths == ["-"]:
        found = check_bytes(sys.stdin.buffer.read(), dictionary, report, path="-", tokenizer=tokenizer)
        return 1 if found else 0

    summary = check_paths(
        args.paths,
        config,
        report,
        jobs=args.jobs,
        dictionary=dictionary,
        tokenizer=tokenizer,
    )
    if summary.errors:
        return 2
    if summary.messages:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
