"""設定(typos.toml など)の読み込みと多層マージ。

構成:
- Config: ルート文書。``files`` (Walk) と ``default`` (EngineConfig)
- Walk: ファイル走査時の無視ルール。粗いスイッチ(ignore_files)から細かいスイッチへ連鎖する
- EngineConfig: バイナリ/ファイル名/ファイル内容の検査可否 + TokenizerConfig + DictConfig

各フィールドは「未設定(None)」を許し、effective_* アクセサで既定値まで遅延解決する。
複数の設定文書は ``merge(base, overlay)`` で右優先に合成する。

文書はスキーマ閉包: 未知キー・型不一致は ConfigError で読み込み全体を中断する。
"""
from __future__ import annotations

import copy
import json
import logging
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_FILES = ("typos.toml", "_typos.toml", ".typos.toml")

_ENCODINGS = ("utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be")


class Category(Enum):
    AMERICAN = "american"
    BRITISH_ISE = "british-ise"
    CANADIAN = "canadian"
    AUSTRALIAN = "australian"


class Locale(Enum):
    EN = "en"
    EN_US = "en-us"
    EN_GB = "en-gb"
    EN_CA = "en-ca"
    EN_AU = "en-au"

    @property
    def category(self) -> Optional[Category]:
        # en は方言を問わない(None)
        return _LOCALE_CATEGORIES[self]

    @classmethod
    def variants(cls) -> Tuple[str, ...]:
        return tuple(loc.value for loc in cls)

    @classmethod
    def parse(cls, text: str) -> "Locale":
        try:
            return cls(text)
        except ValueError:
            raise ValueError("valid values: " + ", ".join(cls.variants())) from None

    def __str__(self) -> str:
        return self.value


_LOCALE_CATEGORIES = {
    Locale.EN: None,
    Locale.EN_US: Category.AMERICAN,
    Locale.EN_GB: Category.BRITISH_ISE,
    Locale.EN_CA: Category.CANADIAN,
    Locale.EN_AU: Category.AUSTRALIAN,
}


def _first_set(*candidates: Optional[Any], default: Any) -> Any:
    # 優先順に並べた候補のうち最初に設定されているもの
    for value in candidates:
        if value is not None:
            return value
    return default


@dataclass
class Walk:
    ignore_hidden: Optional[bool] = None  # 隠しファイル/ディレクトリを飛ばす
    ignore_files: Optional[bool] = None  # 無視ファイル全般を尊重する(粗いスイッチ)
    ignore_dot: Optional[bool] = None  # .ignore
    ignore_vcs: Optional[bool] = None  # .gitignore / .git/info/exclude
    ignore_global: Optional[bool] = None  # グローバルな git excludes
    ignore_parent: Optional[bool] = None  # 親ディレクトリの無視ファイル

    @classmethod
    def from_defaults(cls) -> "Walk":
        empty = cls()
        return cls(
            ignore_hidden=empty.effective_ignore_hidden(),
            ignore_files=True,
            ignore_dot=empty.effective_ignore_dot(),
            ignore_vcs=empty.effective_ignore_vcs(),
            ignore_global=empty.effective_ignore_global(),
            ignore_parent=empty.effective_ignore_parent(),
        )

    def update(self, source: "Walk") -> None:
        if source.ignore_hidden is not None:
            self.ignore_hidden = source.ignore_hidden
        if source.ignore_files is not None:
            # 粗いスイッチの上書きは細かい上書きをリセットし、連鎖全体に伝播させる
            self.ignore_files = source.ignore_files
            self.ignore_dot = None
            self.ignore_vcs = None
            self.ignore_global = None
            self.ignore_parent = None
        if source.ignore_dot is not None:
            self.ignore_dot = source.ignore_dot
        if source.ignore_vcs is not None:
            self.ignore_vcs = source.ignore_vcs
            self.ignore_global = None
        if source.ignore_global is not None:
            self.ignore_global = source.ignore_global
        if source.ignore_parent is not None:
            self.ignore_parent = source.ignore_parent

    def effective_ignore_hidden(self) -> bool:
        return _first_set(self.ignore_hidden, default=True)

    def effective_ignore_dot(self) -> bool:
        return _first_set(self.ignore_dot, self.ignore_files, default=True)

    def effective_ignore_vcs(self) -> bool:
        return _first_set(self.ignore_vcs, self.ignore_files, default=True)

    def effective_ignore_global(self) -> bool:
        return _first_set(self.ignore_global, self.ignore_vcs, self.ignore_files, default=True)

    def effective_ignore_parent(self) -> bool:
        return _first_set(self.ignore_parent, self.ignore_files, default=True)


@dataclass
class TokenizerConfig:
    ignore_hex: Optional[bool] = None  # 16進数リテラルらしき識別子を検査しない
    identifier_leading_digits: Optional[bool] = None  # 数字始まりの識別子を許す
    identifier_leading_chars: Optional[str] = None  # 識別子の先頭に許す追加文字
    identifier_include_digits: Optional[bool] = None  # 識別子中の数字を許す
    identifier_include_chars: Optional[str] = None  # 識別子中に許す追加文字

    @classmethod
    def from_defaults(cls) -> "TokenizerConfig":
        empty = cls()
        return cls(
            ignore_hex=empty.effective_ignore_hex(),
            identifier_leading_digits=empty.effective_identifier_leading_digits(),
            identifier_leading_chars=empty.effective_identifier_leading_chars(),
            identifier_include_digits=empty.effective_identifier_include_digits(),
            identifier_include_chars=empty.effective_identifier_include_chars(),
        )

    def update(self, source: "TokenizerConfig") -> None:
        for name in (
            "ignore_hex",
            "identifier_leading_digits",
            "identifier_leading_chars",
            "identifier_include_digits",
            "identifier_include_chars",
        ):
            value = getattr(source, name)
            if value is not None:
                setattr(self, name, value)

    def effective_ignore_hex(self) -> bool:
        return _first_set(self.ignore_hex, default=True)

    def effective_identifier_leading_digits(self) -> bool:
        return _first_set(self.identifier_leading_digits, default=False)

    def effective_identifier_leading_chars(self) -> str:
        return _first_set(self.identifier_leading_chars, default="_")

    def effective_identifier_include_digits(self) -> bool:
        return _first_set(self.identifier_include_digits, default=True)

    def effective_identifier_include_chars(self) -> str:
        return _first_set(self.identifier_include_chars, default="_'")


@dataclass
class DictConfig:
    locale: Optional[Locale] = None
    extend_identifiers: Dict[str, str] = field(default_factory=dict)
    extend_words: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_defaults(cls) -> "DictConfig":
        return cls(locale=cls().effective_locale())

    def update(self, source: "DictConfig") -> None:
        if source.locale is not None:
            self.locale = source.locale
        self.extend_identifiers.update(source.extend_identifiers)
        self.extend_words.update(source.extend_words)

    def effective_locale(self) -> Locale:
        return _first_set(self.locale, default=Locale.EN)

    def effective_extend_identifiers(self) -> Iterator[Tuple[str, str]]:
        return iter(self.extend_identifiers.items())

    def effective_extend_words(self) -> Iterator[Tuple[str, str]]:
        return iter(self.extend_words.items())


@dataclass
class EngineConfig:
    binary: Optional[bool] = None  # バイナリファイルも検査する
    check_filename: Optional[bool] = None  # ファイル名を検査する
    check_file: Optional[bool] = None  # ファイル内容を検査する
    tokenizer: Optional[TokenizerConfig] = None
    dictionary: Optional[DictConfig] = None

    @classmethod
    def from_defaults(cls) -> "EngineConfig":
        empty = cls()
        return cls(
            binary=empty.effective_binary(),
            check_filename=empty.effective_check_filename(),
            check_file=empty.effective_check_file(),
            tokenizer=TokenizerConfig.from_defaults(),
            dictionary=DictConfig.from_defaults(),
        )

    def update(self, source: "EngineConfig") -> None:
        if source.binary is not None:
            self.binary = source.binary
        if source.check_filename is not None:
            self.check_filename = source.check_filename
        if source.check_file is not None:
            self.check_file = source.check_file
        if source.tokenizer is not None:
            tokenizer = self.tokenizer or TokenizerConfig()
            tokenizer.update(source.tokenizer)
            self.tokenizer = tokenizer
        if source.dictionary is not None:
            dictionary = self.dictionary or DictConfig()
            dictionary.update(source.dictionary)
            self.dictionary = dictionary

    def effective_binary(self) -> bool:
        return _first_set(self.binary, default=False)

    def effective_check_filename(self) -> bool:
        return _first_set(self.check_filename, default=True)

    def effective_check_file(self) -> bool:
        return _first_set(self.check_file, default=True)

    def tokenizer_config(self) -> TokenizerConfig:
        return self.tokenizer if self.tokenizer is not None else TokenizerConfig()

    def dict_config(self) -> DictConfig:
        return self.dictionary if self.dictionary is not None else DictConfig()


@dataclass
class Config:
    files: Walk = field(default_factory=Walk)
    default: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_defaults(cls) -> "Config":
        return cls(files=Walk.from_defaults(), default=EngineConfig.from_defaults())

    def update(self, source: "Config") -> None:
        self.files.update(source.files)
        self.default.update(source.default)

    # --- 読み込み ---

    @classmethod
    def from_dir(cls, cwd: str | Path) -> Optional["Config"]:
        path = find_project_file(Path(cwd), PROJECT_FILES)
        if path is None:
            return None
        logger.debug("loading config %s", path)
        return cls.from_file(path)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        p = Path(path)
        raw = p.read_bytes()
        text: str | None = None
        for enc in _ENCODINGS:
            try:
                text = raw.decode(enc)
                break
            except UnicodeDecodeError:
                continue
        if text is None:
            raise ConfigError("unable to decode config file", source=str(p))
        text = text.lstrip("\ufeff")
        suffix = p.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            return cls.from_yaml(text, source=str(p))
        if suffix == ".json":
            return cls.from_json(text, source=str(p))
        return cls.from_toml(text, source=str(p))

    @classmethod
    def from_toml(cls, data: str, source: str | None = None) -> "Config":
        try:
            content = tomllib.loads(data)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid TOML: {e}", source=source) from e
        return cls.from_dict(content, source=source)

    @classmethod
    def from_yaml(cls, data: str, source: str | None = None) -> "Config":
        try:
            content = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML: {e}", source=source) from e
        return cls.from_dict(content if content is not None else {}, source=source)

    @classmethod
    def from_json(cls, data: str, source: str | None = None) -> "Config":
        try:
            content = json.loads(data)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON: {e}", source=source) from e
        return cls.from_dict(content, source=source)

    @classmethod
    def from_dict(cls, data: Any, source: str | None = None) -> "Config":
        table = _expect_table(data, "<root>", source)
        _reject_unknown(table, {"files", "default"}, "<root>", source)
        files = _walk_from_table(_expect_table(table.get("files", {}), "files", source), source)
        default = _engine_from_table(_expect_table(table.get("default", {}), "default", source), source)
        return cls(files=files, default=default)

    def to_dict(self) -> Dict[str, Any]:
        """kebab-case の入れ子 dict に戻す(未設定の値は省く)。"""
        files = {_kebab(k): v for k, v in vars(self.files).items() if v is not None}
        default: Dict[str, Any] = {}
        for name in ("binary", "check_filename", "check_file"):
            value = getattr(self.default, name)
            if value is not None:
                default[_kebab(name)] = value
        if self.default.tokenizer is not None:
            for k, v in vars(self.default.tokenizer).items():
                if v is not None:
                    default[_kebab(k)] = v
        if self.default.dictionary is not None:
            d = self.default.dictionary
            if d.locale is not None:
                default["locale"] = d.locale.value
            if d.extend_identifiers:
                default["extend-identifiers"] = dict(d.extend_identifiers)
            if d.extend_words:
                default["extend-words"] = dict(d.extend_words)
        return {"files": files, "default": default}


def merge(base: Config, overlay: Config) -> Config:
    """base に overlay を右優先で重ねた新しい Config を返す(引数は変更しない)。"""
    merged = copy.deepcopy(base)
    merged.update(overlay)
    return merged


def find_project_file(directory: Path, names: Tuple[str, ...]) -> Optional[Path]:
    for name in names:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


# --- スキーマ検証 ---

_WALK_KEYS = ("ignore_hidden", "ignore_files", "ignore_dot", "ignore_vcs", "ignore_global", "ignore_parent")
_ENGINE_KEYS = ("binary", "check_filename", "check_file")
_TOKENIZER_BOOL_KEYS = ("ignore_hex", "identifier_leading_digits", "identifier_include_digits")
_TOKENIZER_STR_KEYS = ("identifier_leading_chars", "identifier_include_chars")
_DICT_MAP_KEYS = ("extend_identifiers", "extend_words")


def _kebab(name: str) -> str:
    return name.replace("_", "-")


def _expect_table(value: Any, where: str, source: str | None) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where}: expected a table, got {type(value).__name__}", source=source)
    return value


def _reject_unknown(table: Mapping[str, Any], known, where: str, source: str | None) -> None:
    for key in table:
        if key not in known:
            raise ConfigError(f"{where}: unknown field {key!r}", source=source)


def _expect_bool(value: Any, where: str, source: str | None) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: expected a boolean, got {value!r}", source=source)
    return value


def _expect_str(value: Any, where: str, source: str | None) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{where}: expected a string, got {value!r}", source=source)
    return value


def _expect_str_map(value: Any, where: str, source: str | None) -> Dict[str, str]:
    table = _expect_table(value, where, source)
    return {
        _expect_str(k, where, source): _expect_str(v, f"{where}.{k}", source)
        for k, v in table.items()
    }


def _walk_from_table(table: Mapping[str, Any], source: str | None) -> Walk:
    _reject_unknown(table, {_kebab(k) for k in _WALK_KEYS}, "files", source)
    values = {
        name: _expect_bool(table[_kebab(name)], f"files.{_kebab(name)}", source)
        for name in _WALK_KEYS
        if _kebab(name) in table
    }
    return Walk(**values)


def _engine_from_table(table: Mapping[str, Any], source: str | None) -> EngineConfig:
    known = {_kebab(k) for k in _ENGINE_KEYS + _TOKENIZER_BOOL_KEYS + _TOKENIZER_STR_KEYS + _DICT_MAP_KEYS}
    known.add("locale")
    _reject_unknown(table, known, "default", source)

    def where(name: str) -> str:
        return f"default.{_kebab(name)}"

    engine = {
        name: _expect_bool(table[_kebab(name)], where(name), source)
        for name in _ENGINE_KEYS
        if _kebab(name) in table
    }

    tokenizer_values: Dict[str, Any] = {}
    for name in _TOKENIZER_BOOL_KEYS:
        if _kebab(name) in table:
            tokenizer_values[name] = _expect_bool(table[_kebab(name)], where(name), source)
    for name in _TOKENIZER_STR_KEYS:
        if _kebab(name) in table:
            tokenizer_values[name] = _expect_str(table[_kebab(name)], where(name), source)

    dict_values: Dict[str, Any] = {}
    if "locale" in table:
        text = _expect_str(table["locale"], "default.locale", source)
        try:
            dict_values["locale"] = Locale.parse(text)
        except ValueError as e:
            raise ConfigError(f"default.locale: {e}", source=source) from None
    for name in _DICT_MAP_KEYS:
        if _kebab(name) in table:
            dict_values[name] = _expect_str_map(table[_kebab(name)], where(name), source)

    return EngineConfig(
        tokenizer=TokenizerConfig(**tokenizer_values) if tokenizer_values else None,
        dictionary=DictConfig(**dict_values) if dict_values else None,
        **engine,
    )


__all__ = [
    "Category",
    "Locale",
    "Walk",
    "TokenizerConfig",
    "DictConfig",
    "EngineConfig",
    "Config",
    "merge",
    "find_project_file",
    "PROJECT_FILES",
]
