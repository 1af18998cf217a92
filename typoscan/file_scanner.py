"""任意拡張子ファイルの走査ユーティリティ。

- 拡張子フィルタは行わず、バイナリらしいものは呼び出し側で判定(ヒューリスティック)。
- Walk 設定に従って隠しファイル/.ignore/.gitignore/グローバル除外/親ディレクトリの除外を適用。
- 除外パターンは gitignore のサブセット(コメント, 否定 !, 末尾 / でディレクトリ限定,
  先頭 / でアンカー, * ? は階層ごとに fnmatch で評価し ** は0個以上の階層に一致)。
"""
from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .config import Walk

logger = logging.getLogger(__name__)

BINARY_BYTES = set(range(0, 9)) | {11, 12} | set(range(14, 32))

DOT_IGNORE = ".ignore"
VCS_IGNORE = ".gitignore"
VCS_DIR = ".git"


def is_probably_text(data: bytes, threshold: float = 0.30) -> bool:
    if not data:
        return True
    if b"\x00" in data[:8000]:
        return False
    non_text = sum(b in BINARY_BYTES for b in data)
    ratio = non_text / len(data)
    return ratio < threshold


def read_bytes(path: Path) -> bytes:
    # OSError はそのまま呼び出し側へ
    return Path(path).read_bytes()


def _match_segments(parts: List[str], pats: List[str]) -> bool:
    # パス区切りごとに照合する。"**" は0個以上の階層に一致
    if not pats:
        return not parts
    if pats[0] == "**":
        return any(_match_segments(parts[i:], pats[1:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], pats[0]) and _match_segments(parts[1:], pats[1:])


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    base: Path
    negate: bool = False
    dir_only: bool = False
    anchored: bool = False

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        try:
            rel = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        if self.anchored:
            return _match_segments(rel.split("/"), self.pattern.split("/"))
        # スラッシュを含まないパターンはどの階層の名前にも一致
        return fnmatch.fnmatchcase(path.name, self.pattern)


def parse_ignore_lines(lines: Iterable[str], base: Path) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip() or line.startswith("#"):
            continue
        line = line.rstrip()
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        anchored = "/" in line
        line = line.lstrip("/")
        if line.startswith("**/"):
            # 先頭の **/ は「どの階層でも」と同じ
            line = line[3:]
            anchored = "/" in line
        if not line:
            continue
        rules.append(IgnoreRule(pattern=line, base=base, negate=negate, dir_only=dir_only, anchored=anchored))
    return rules


def load_ignore_file(path: Path, base: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        logger.warning("failed to read ignore file %s: %s", path, e)
        return []
    logger.debug("using ignore file %s", path)
    return parse_ignore_lines(text.splitlines(), base)


def global_ignore_file() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    root = Path(config_home) if config_home else Path.home() / ".config"
    return root / "git" / "ignore"


def _dir_rules(directory: Path, walk: Walk) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    if walk.effective_ignore_vcs():
        rules.extend(load_ignore_file(directory / VCS_IGNORE, directory))
        rules.extend(load_ignore_file(directory / VCS_DIR / "info" / "exclude", directory))
    if walk.effective_ignore_dot():
        # .ignore は .gitignore より優先(後に評価)
        rules.extend(load_ignore_file(directory / DOT_IGNORE, directory))
    return rules


def is_ignored(path: Path, is_dir: bool, rules: List[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(path, is_dir):
            ignored = not rule.negate
    return ignored


def _root_rules(root: Path, walk: Walk) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    if walk.effective_ignore_global():
        rules.extend(load_ignore_file(global_ignore_file(), root))
    if walk.effective_ignore_parent():
        for parent in reversed(root.parents):
            rules.extend(_dir_rules(parent, walk))
    return rules


def walk_dir(top: Path, walk: Walk) -> Iterator[Path]:
    # ルール評価は絶対パスで行い、返すパスは top からの相対表記を保つ
    root = top.resolve()
    inherited = {root: _root_rules(root, walk) + _dir_rules(root, walk)}
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rules = inherited.pop(current)
        kept = []
        for name in sorted(dirnames):
            child = current / name
            # os.walk はシンボリックリンク先に降りないので対象外
            if name == VCS_DIR or child.is_symlink():
                continue
            if walk.effective_ignore_hidden() and name.startswith("."):
                continue
            if is_ignored(child, True, rules):
                logger.debug("ignored directory %s", child)
                continue
            inherited[child] = rules + _dir_rules(child, walk)
            kept.append(name)
        dirnames[:] = kept
        for name in sorted(filenames):
            child = current / name
            if walk.effective_ignore_hidden() and name.startswith("."):
                continue
            if is_ignored(child, False, rules):
                continue
            yield top / child.relative_to(root)


def iter_files(paths: Iterable[str | os.PathLike[str]], walk: Optional[Walk] = None) -> Iterator[Path]:
    walk = walk if walk is not None else Walk()
    for p in paths:
        path = Path(p)
        if path.is_file():
            # 明示指定されたファイルは除外ルールに関わらず対象
            yield path
        elif path.is_dir():
            yield from walk_dir(path, walk)
        else:
            logger.warning("no such file or directory: %s", path)


__all__ = [
    "iter_files",
    "walk_dir",
    "read_bytes",
    "is_probably_text",
    "IgnoreRule",
    "parse_ignore_lines",
    "is_ignored",
    "global_ignore_file",
]
