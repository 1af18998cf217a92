import json

import pytest

from typoscan.config import (
    Category,
    Config,
    DictConfig,
    EngineConfig,
    Locale,
    TokenizerConfig,
    Walk,
    merge,
)
from typoscan.errors import ConfigError


def test_empty_config_accessors_are_total():
    config = Config()
    walk = config.files
    assert walk.effective_ignore_hidden() is True
    assert walk.effective_ignore_dot() is True
    assert walk.effective_ignore_vcs() is True
    assert walk.effective_ignore_global() is True
    assert walk.effective_ignore_parent() is True
    engine = config.default
    assert engine.effective_binary() is False
    assert engine.effective_check_filename() is True
    assert engine.effective_check_file() is True
    tok = engine.tokenizer_config()
    assert tok.effective_ignore_hex() is True
    assert tok.effective_identifier_leading_digits() is False
    assert tok.effective_identifier_leading_chars() == "_"
    assert tok.effective_identifier_include_digits() is True
    assert tok.effective_identifier_include_chars() == "_'"
    assert engine.dict_config().effective_locale() is Locale.EN
    assert list(engine.dict_config().effective_extend_words()) == []


def test_ignore_files_false_cascades():
    config = Config.from_toml("[files]\nignore-files = false\n")
    walk = config.files
    assert walk.effective_ignore_dot() is False
    assert walk.effective_ignore_vcs() is False
    assert walk.effective_ignore_global() is False
    assert walk.effective_ignore_parent() is False
    assert walk.effective_ignore_hidden() is True


def test_ignore_files_override_resets_finer_flags():
    merged = merge(Config.from_defaults(), Config(files=Walk(ignore_files=False)))
    # from_defaults では ignore_dot=True が明示されているが、粗いスイッチの上書きで消える
    assert merged.files.ignore_dot is None
    assert merged.files.effective_ignore_dot() is False
    assert merged.files.effective_ignore_global() is False


def test_ignore_files_with_explicit_finer_flag():
    merged = merge(Config.from_defaults(), Config(files=Walk(ignore_files=False, ignore_dot=True)))
    assert merged.files.effective_ignore_dot() is True
    assert merged.files.effective_ignore_vcs() is False


def test_ignore_vcs_override_resets_global():
    base = Config(files=Walk(ignore_global=True))
    merged = merge(base, Config(files=Walk(ignore_vcs=False)))
    assert merged.files.ignore_global is None
    assert merged.files.effective_ignore_global() is False
    assert merged.files.effective_ignore_dot() is True


def test_ignore_global_precedence():
    assert Walk(ignore_files=False, ignore_vcs=True).effective_ignore_global() is True
    assert Walk(ignore_vcs=True, ignore_global=False).effective_ignore_global() is False


def test_merge_takes_overlay_explicit_fields():
    base = Config.from_defaults()
    overlay = Config(default=EngineConfig(
        binary=True,
        dictionary=DictConfig(locale=Locale.EN_GB),
    ))
    merged = merge(base, overlay)
    assert merged.default.binary is True
    assert merged.default.dict_config().effective_locale() is Locale.EN_GB
    assert merged.default.check_file is True
    assert merged.default.tokenizer_config() == TokenizerConfig.from_defaults()
    assert merged.files == Walk.from_defaults()
    # 引数は変更しない
    assert base.default.binary is False
    assert overlay.default.check_file is None


def test_merge_unions_maps():
    base = Config(default=EngineConfig(dictionary=DictConfig(extend_words={"a": "b", "c": "d"})))
    overlay = Config(default=EngineConfig(dictionary=DictConfig(extend_words={"c": "e"})))
    merged = merge(base, overlay)
    assert merged.default.dictionary.extend_words == {"a": "b", "c": "e"}
    assert base.default.dictionary.extend_words == {"a": "b", "c": "d"}


def test_merge_embedded_into_empty():
    merged = merge(Config(), Config(default=EngineConfig(tokenizer=TokenizerConfig(ignore_hex=False))))
    assert merged.default.tokenizer == TokenizerConfig(ignore_hex=False)


def test_from_defaults_is_fully_concrete():
    config = Config.from_defaults()
    assert all(v is not None for v in vars(config.files).values())
    assert config.files.ignore_files is True
    for name in ("binary", "check_filename", "check_file", "tokenizer", "dictionary"):
        assert getattr(config.default, name) is not None
    assert all(v is not None for v in vars(config.default.tokenizer).values())
    assert config.default.dictionary.locale is Locale.EN


def test_to_dict_round_trip():
    config = Config.from_defaults()
    data = config.to_dict()
    assert data["files"]["ignore-files"] is True
    assert data["default"]["identifier-include-chars"] == "_'"
    assert data["default"]["locale"] == "en"
    assert Config.from_dict(data) == config


def test_flattened_default_keys():
    config = Config.from_toml(
        "[default]\n"
        "check-filename = false\n"
        "ignore-hex = false\n"
        "identifier-include-chars = \"_\"\n"
        "locale = \"en-us\"\n"
        "[default.extend-words]\n"
        "teh = \"the\"\n"
        "[default.extend-identifiers]\n"
        "fooBar = \"foo_bar\"\n"
    )
    assert config.default.check_filename is False
    assert config.default.tokenizer.ignore_hex is False
    assert config.default.tokenizer.identifier_include_chars == "_"
    assert config.default.dictionary.locale is Locale.EN_US
    assert config.default.dictionary.extend_words == {"teh": "the"}
    assert config.default.dictionary.extend_identifiers == {"fooBar": "foo_bar"}


def test_no_tokenizer_keys_means_no_tokenizer():
    config = Config.from_toml("[default]\nbinary = true\n")
    assert config.default.tokenizer is None
    assert config.default.dictionary is None


@pytest.mark.parametrize("text", [
    "[other]\nx = 1\n",
    "[files]\nignore-everything = true\n",
    "[default]\nfoo = 1\n",
    "[default]\nignore_hex = true\n",
])
def test_unknown_fields_rejected(text):
    with pytest.raises(ConfigError):
        Config.from_toml(text)


@pytest.mark.parametrize("text", [
    "[default]\nbinary = \"yes\"\n",
    "[default]\nidentifier-leading-chars = 1\n",
    "[default.extend-words]\nteh = 1\n",
    "files = 3\n",
])
def test_wrong_types_rejected(text):
    with pytest.raises(ConfigError):
        Config.from_toml(text)


def test_bad_locale_rejected():
    with pytest.raises(ConfigError) as exc:
        Config.from_toml("[default]\nlocale = \"fr\"\n")
    assert "valid values" in str(exc.value)


def test_malformed_toml_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml("[files\nignore-files = ")


def test_from_yaml():
    config = Config.from_yaml("files:\n  ignore-hidden: false\ndefault:\n  locale: en-au\n")
    assert config.files.effective_ignore_hidden() is False
    assert config.default.dict_config().effective_locale() is Locale.EN_AU


def test_from_yaml_empty_document():
    assert Config.from_yaml("") == Config()


def test_from_file_dispatches_on_suffix(tmp_path):
    p = tmp_path / "conf.json"
    p.write_text(json.dumps({"default": {"binary": True}}), encoding="utf-8")
    assert Config.from_file(p).default.binary is True
    t = tmp_path / "typos.toml"
    t.write_text("[default]\nbinary = true\n", encoding="utf-8")
    assert Config.from_file(t).default.binary is True


def test_from_file_reports_source(tmp_path):
    p = tmp_path / "bad.toml"
    p.write_text("[default]\nnope = true\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc:
        Config.from_file(p)
    assert str(p) in str(exc.value)


def test_from_dir(tmp_path):
    assert Config.from_dir(tmp_path) is None
    (tmp_path / ".typos.toml").write_text("[files]\nignore-hidden = false\n", encoding="utf-8")
    config = Config.from_dir(tmp_path)
    assert config is not None
    assert config.files.ignore_hidden is False


def test_from_dir_prefers_typos_toml(tmp_path):
    (tmp_path / "typos.toml").write_text("[default]\nbinary = true\n", encoding="utf-8")
    (tmp_path / "_typos.toml").write_text("[default]\nbinary = false\n", encoding="utf-8")
    assert Config.from_dir(tmp_path).default.binary is True


def test_locale_categories():
    assert Locale.EN.category is None
    assert Locale.EN_US.category is Category.AMERICAN
    assert Locale.EN_GB.category is Category.BRITISH_ISE
    assert Locale.EN_CA.category is Category.CANADIAN
    assert Locale.EN_AU.category is Category.AUSTRALIAN
    assert Locale.parse("en-gb") is Locale.EN_GB
    assert str(Locale.EN_CA) == "en-ca"
    with pytest.raises(ValueError):
        Locale.parse("en-nz")
