from __future__ import annotations
"""
語彙ファイルのブートストラップ用スクリプト。
- リポジトリ内のファイルを走査し、識別子を単語に分割して頻度辞書を生成。
- 生成物は 1行1語 のプレーンテキスト(dict.txt)として出力し、typoscan --dict に渡せる。

使い方(例):
  python tools/build_dict.py . --out dict.txt --min-freq 3

注意:
- バイナリらしいファイルは自動でスキップされます。
- 数字だけの単語と1文字の単語は採用しません。
"""
import argparse
from collections import Counter
from typing import Iterable

# 自パッケージのユーティリティを利用
from typoscan.config import Walk
from typoscan.file_scanner import is_probably_text, iter_files, read_bytes
from typoscan.tokens import Symbol


def gather_words(paths: Iterable[str], walk: Walk | None = None) -> Counter:
    cnt: Counter = Counter()
    for p in iter_files(paths, walk):
        try:
            data = read_bytes(p)
        except OSError:
            continue
        if not is_probably_text(data):
            continue
        for symbol in Symbol.parse(data):
            for word in symbol.split():
                tok = word.token
                if len(tok) > 1 and not tok.isdigit():
                    cnt[tok.lower()] += 1
    return cnt


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('paths', nargs='+', help='走査するファイル/ディレクトリ')
    ap.add_argument('--out', default='dict.txt', help='出力ファイル(既定: dict.txt)')
    ap.add_argument('--min-freq', type=int, default=2, help='採用する最小出現回数(既定:2)')
    ap.add_argument('--hidden', action='store_true', help='隠しファイル/ディレクトリも走査する')
    args = ap.parse_args()

    walk = Walk(ignore_hidden=False) if args.hidden else None
    cnt = gather_words(args.paths, walk)
    words = sorted(w for w, c in cnt.items() if c >= args.min_freq)
    with open(args.out, 'w', encoding='utf-8') as f:
        f.write("\n".join(words))
    print(f"Wrote {len(words)} words to {args.out}")


if __name__ == '__main__':
    main()
