import pytest

from typoscan import check_text
from typoscan.checker import (
    check_bytes,
    check_filename,
    check_paths,
    check_words,
    iter_lines,
    process_file,
)
from typoscan.config import Config, EngineConfig, Walk, merge
from typoscan.dictionary import Correction, Dictionary
from typoscan.report import Collector
from typoscan.tokens import Symbol, Tokenizer, Word


class MappingCorrector:
    def __init__(self, table):
        self.table = table

    def correct_ident(self, ident):
        if ident in self.table:
            return Correction.correct(self.table[ident])
        return None

    def correct_word(self, word):
        return self.correct_ident(word)


def test_single_line_file_reports_one_message(tmp_path):
    p = tmp_path / "sample.txt"
    p.write_bytes(b"HTML is rendred here")
    collector = Collector()
    count = process_file(p, MappingCorrector({"rendred": "rendered"}), collector)
    assert count == 1
    (msg,) = collector.messages
    assert msg.word == "rendred"
    assert msg.correction == Correction.correct("rendered")
    assert msg.line_num == 1
    assert msg.col_num == 9
    assert msg.line == b"HTML is rendred here"
    assert msg.path == str(p)


def test_messages_are_ordered_by_line_and_column():
    collector = Collector()
    check_bytes(b"teh cat\nfoo recieve teh\n", Dictionary(), collector)
    assert [(m.line_num, m.col_num, m.word) for m in collector.messages] == [
        (1, 0, "teh"),
        (2, 4, "recieve"),
        (2, 12, "teh"),
    ]
    assert collector.messages[1].line == b"foo recieve teh\n"


def test_compound_identifiers_are_not_split_by_default():
    assert check_text("let rendredText = 1") == []


def test_check_text_with_tokenizer():
    messages = check_text("0xteh teh", tokenizer=Tokenizer())
    assert [(m.word, m.col_num) for m in messages] == [("teh", 6)]


def test_missing_file_raises_without_messages(tmp_path):
    collector = Collector()
    with pytest.raises(OSError):
        process_file(tmp_path / "missing.txt", Dictionary(), collector)
    assert collector.messages == []


def test_check_words_splits_compound_identifier():
    results = list(check_words(Symbol("rendredText", 0), Dictionary()))
    assert results == [(Word("rendred", 0), Correction.correct("rendered"))]


def test_check_filename(tmp_path):
    collector = Collector()
    check_filename(tmp_path / "recieve.txt", Dictionary(), collector)
    (msg,) = collector.messages
    assert msg.word == "recieve"
    assert msg.line_num == 0
    assert msg.line == b""


@pytest.mark.parametrize("content, expected", [
    (b"", []),
    (b"a", [b"a"]),
    (b"a\n", [b"a\n"]),
    (b"a\nb", [b"a\n", b"b"]),
    (b"\n\nx\r\n", [b"\n", b"\n", b"x\r\n"]),
])
def test_iter_lines(content, expected):
    assert list(iter_lines(content)) == expected


def _tree(tmp_path):
    root = tmp_path / "proj"
    (root / "b").mkdir(parents=True)
    (root / ".hidden").mkdir()
    (root / "a.txt").write_text("teh\n", encoding="utf-8")
    (root / "b" / "c.txt").write_text("ok recieve\n", encoding="utf-8")
    (root / ".hidden" / "d.txt").write_text("teh\n", encoding="utf-8")
    (root / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (root / "ignored.log").write_text("teh\n", encoding="utf-8")
    (root / "bin.dat").write_bytes(b"\x00\x01teh\x00")
    return root


def _config(**engine):
    overlay = Config(
        files=Walk(ignore_global=False, ignore_parent=False),
        default=EngineConfig(**engine),
    )
    return merge(Config.from_defaults(), overlay)


def test_check_paths_honors_walk_and_binary(tmp_path):
    root = _tree(tmp_path)
    collector = Collector()
    summary = check_paths([str(root)], _config(), collector)
    assert [(m.path, m.word) for m in collector.messages] == [
        (str(root / "a.txt"), "teh"),
        (str(root / "b" / "c.txt"), "recieve"),
    ]
    assert summary.files == 3
    assert summary.messages == 2
    assert summary.errors == 0


def test_check_paths_binary_enabled(tmp_path):
    root = _tree(tmp_path)
    collector = Collector()
    check_paths([str(root)], _config(binary=True), collector)
    assert [m.word for m in collector.messages] == ["teh", "teh", "recieve"]


def test_check_paths_file_content_disabled(tmp_path):
    root = _tree(tmp_path)
    (root / "teh.txt").write_text("nothing here\n", encoding="utf-8")
    collector = Collector()
    check_paths([str(root)], _config(check_file=False), collector)
    assert [(m.word, m.line_num) for m in collector.messages] == [("teh", 0)]


def test_check_paths_parallel_keeps_order(tmp_path):
    root = tmp_path / "many"
    root.mkdir()
    for i in range(20):
        (root / f"f{i:02d}.txt").write_text(f"line\nteh {i}\n", encoding="utf-8")
    serial, parallel = Collector(), Collector()
    check_paths([str(root)], _config(), serial)
    check_paths([str(root)], _config(), parallel, jobs=4)
    assert [m.path for m in serial.messages] == [m.path for m in parallel.messages]
    assert len(parallel) == 20


def test_check_paths_read_error_is_counted(tmp_path, monkeypatch):
    root = _tree(tmp_path)
    import typoscan.checker as checker

    real_read = checker.read_bytes

    def failing_read(path):
        if path.name == "a.txt":
            raise PermissionError("denied")
        return real_read(path)

    monkeypatch.setattr(checker, "read_bytes", failing_read)
    collector = Collector()
    summary = check_paths([str(root)], _config(), collector)
    assert summary.errors == 1
    assert [m.word for m in collector.messages] == ["recieve"]


def test_valid_override_is_not_reported():
    dictionary = Dictionary(extend_words={"teh": "teh"}, extend_identifiers={"recieve": "recieve"})
    assert check_text("teh recieve", dictionary) == []
    assert list(check_words(Symbol("tehValue", 0), dictionary)) == []


def test_quoted_typo_is_reported_with_tokenizer():
    messages = check_text("msg = 'recieve'\n", tokenizer=Tokenizer())
    assert [(m.word, m.col_num) for m in messages] == [("recieve", 7)]


def test_check_paths_reports_last_word_in_single_quotes(tmp_path):
    root = tmp_path / "quoted"
    root.mkdir()
    (root / "app.py").write_text("print('teh recieve')\n", encoding="utf-8")
    collector = Collector()
    check_paths([str(root)], _config(), collector)
    assert [m.word for m in collector.messages] == ["teh", "recieve"]
