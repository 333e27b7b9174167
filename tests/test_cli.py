import pytest

from mdslides import cli
from mdslides.parser import parse_deck


@pytest.fixture
def deck_file(tmp_path, abc_source):
    path = tmp_path / "talk.md"
    path.write_text(abc_source, encoding="utf-8")
    return path


def test_inspect_prints_outline(deck_file, capsys):
    exit_code = cli.main(["inspect", str(deck_file)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "1. A [notes]" in out
    assert "2. group of 3" in out
    assert "   2.2 B2 [notes]" in out


def test_inspect_reports_warnings(tmp_path, capsys):
    path = tmp_path / "odd.md"
    path.write_text("--\n# A\n", encoding="utf-8")

    assert cli.main(["inspect", str(path)]) == 0
    assert "orphan-vertical-separator" in capsys.readouterr().out


def test_build_writes_html(deck_file, monkeypatch):
    monkeypatch.chdir(deck_file.parent)
    exit_code = cli.main(["build", str(deck_file), "-o", "loop=true", "-o", "bogus=1"])

    page = deck_file.with_suffix(".html").read_text(encoding="utf-8")
    assert exit_code == 0
    assert '"loop": true' in page
    assert '<aside class="notes">' in page


def test_build_rejects_invalid_option(deck_file, monkeypatch, capsys):
    monkeypatch.chdir(deck_file.parent)
    exit_code = cli.main(["build", str(deck_file), "-o", "transition=spin"])

    assert exit_code == 1
    assert "Error:" in capsys.readouterr().err


def test_export_writes_pptx(deck_file, tmp_path):
    pytest.importorskip("pptx")
    output = tmp_path / "handout.pptx"

    assert cli.main(["export", str(deck_file), str(output)]) == 0
    assert output.stat().st_size > 0


def test_missing_input_exits_with_error(tmp_path, capsys):
    assert cli.main(["inspect", str(tmp_path / "nope.md")]) == 1
    assert "not found" in capsys.readouterr().err


def test_describe_empty_deck():
    assert cli.describe(parse_deck("")) == ["(no slides)"]


def test_misshapen_snapshot_exits_with_error(tmp_path, capsys):
    path = tmp_path / "deck.json"
    path.write_text('{"slides": [{"type": "group", "leaves": []}]}', encoding="utf-8")

    assert cli.main(["inspect", str(path)]) == 1
    assert "snapshot" in capsys.readouterr().err
