import json

from typoscan.config import DictConfig, Locale
from typoscan.dictionary import Correction, Dictionary
from typoscan.spellcheck import closest_word, load_dict


def test_correct_word_from_builtin_table():
    d = Dictionary()
    assert d.correct_word("rendred") == Correction.correct("rendered")


def test_correct_word_matches_case():
    d = Dictionary()
    assert d.correct_word("Rendred") == Correction.correct("Rendered")
    assert d.correct_word("RENDRED") == Correction.correct("RENDERED")


def test_multiple_suggestions():
    assert Dictionary().correct_word("fo").suggestions == ("of", "for")


def test_invalid_without_suggestion():
    c = Dictionary().correct_word("dont")
    assert c.is_invalid
    assert c.suggestions == ()


def test_unknown_word_is_none():
    assert Dictionary().correct_word("hello") is None


def test_locale_variants():
    assert Dictionary().correct_word("color") is None
    assert Dictionary(locale=Locale.EN_GB).correct_word("color") == Correction.correct("colour")
    assert Dictionary(locale=Locale.EN_GB).correct_word("colour") is None
    assert Dictionary(locale=Locale.EN_US).correct_word("Colour") == Correction.correct("Color")
    assert Dictionary(locale=Locale.EN_CA).correct_word("analyse") == Correction.correct("analyze")


def test_extend_words_outranks_builtin():
    d = Dictionary(extend_words={"rendred": "rendred", "Foo": "bar"})
    assert d.correct_word("rendred") == Correction.valid()
    assert d.correct_word("foo") == Correction.correct("bar")
    assert d.correct_word("FOO") == Correction.correct("BAR")


def test_extend_words_empty_value_is_invalid():
    assert Dictionary(extend_words={"hello": ""}).correct_word("hello").is_invalid


def test_extend_identifiers_exact_match():
    d = Dictionary(extend_identifiers={"fooBar": "foo_bar", "rendred": "rendred"})
    assert d.correct_ident("fooBar") == Correction.correct("foo_bar")
    assert d.correct_ident("foobar") is None
    assert d.correct_ident("rendred").is_valid


def test_correct_ident_whole_symbol_only():
    d = Dictionary()
    assert d.correct_ident("rendred") == Correction.correct("rendered")
    assert d.correct_ident("rendredText") is None
    assert d.correct_ident("_rendred") is None


def test_from_config():
    config = DictConfig(locale=Locale.EN_AU, extend_words={"teh": "teh"})
    d = Dictionary.from_config(config)
    assert d.locale is Locale.EN_AU
    assert d.correct_word("teh").is_valid
    assert d.correct_word("color") == Correction.correct("colour")


def test_fuzzy_vocabulary_fallback():
    d = Dictionary(vocabulary=["configuration", "function"])
    assert d.correct_word("configuraton") == Correction.correct("configuration")
    assert d.correct_word("function") is None
    assert d.correct_word("zzzz") is None


def test_correction_parse():
    assert Correction.parse("").is_invalid
    assert Correction.parse("a, b").suggestions == ("a", "b")
    assert str(Correction.parse("a,b")) == "a, b"
    assert str(Correction.invalid()) == "<invalid>"
    assert str(Correction.valid()) == "<valid>"


def test_load_dict_formats(tmp_path):
    txt = tmp_path / "words.txt"
    txt.write_text("# comment\nAlpha\n\nbeta\n", encoding="utf-8")
    js = tmp_path / "words.json"
    js.write_text(json.dumps({"words": ["gamma", "alpha"]}), encoding="utf-8")
    assert load_dict([txt, js]) == ["alpha", "beta", "gamma"]


def test_closest_word():
    vocab = ["parameter", "property"]
    assert closest_word("paramter", vocab) == "parameter"
    assert closest_word("parameter", vocab) is None
    assert closest_word("x", vocab) is None
    assert closest_word("paramter", []) is None
