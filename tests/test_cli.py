import json
import sys

import pytest

from escst import cli

SOURCE = "/*1*/ function /*2*/ foo /*3*/ ( /*4*/ ) /*5*/ { }\n"


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["escst", *args])
    cli.main()


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "scenario.js"
    path.write_text(SOURCE, encoding="utf-8")
    return path


@pytest.mark.parametrize("strategy", ["virtual-node", "extended-label"])
def test_full_run_writes_cst(monkeypatch, capsys, script, strategy):
    run_cli(monkeypatch, str(script), "-s", strategy)

    output = script.with_name("scenario.cst.json")
    cst = json.loads(output.read_text(encoding="utf-8"))
    assert cst["body"][0]["type"] == "FunctionDeclaration"
    assert "Round Trip Successful" in capsys.readouterr().out


def test_explicit_output_path(monkeypatch, script, tmp_path):
    target = tmp_path / "out" / "tree.json"
    run_cli(monkeypatch, str(script), "-o", str(target))
    assert json.loads(target.read_text(encoding="utf-8"))["type"] == "Program"


def test_stage_artifact(monkeypatch, capsys, script):
    run_cli(monkeypatch, str(script), "-c", "1")

    tokens = json.loads(script.with_name("scenario.tokens.json").read_text(encoding="utf-8"))
    assert tokens[0] == {"kind": "Comment-Block", "raw": "/*1*/", "span": tokens[0]["span"], "semantic": False}
    assert "Stage '1 (Token Stream (semantic and extra tokens))' successful" in capsys.readouterr().out


def test_labels(monkeypatch, capsys):
    run_cli(monkeypatch, "--labels", "-s", "extended-label")
    table = json.loads(capsys.readouterr().out)
    assert table["strategy"] == "extended-label"
    assert "insideParams" in table["nodeTypes"]["FunctionDeclaration"]["labels"]


def test_syntax_error_exits(monkeypatch, capsys, tmp_path):
    broken = tmp_path / "broken.js"
    broken.write_text("function () {}", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, str(broken))
    assert excinfo.value.code == 1
    assert "CST ERROR" in capsys.readouterr().err


def test_missing_file_exits(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, str(tmp_path / "missing.js"))
    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_unknown_strategy_rejected_by_argparse(monkeypatch, script):
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, str(script), "-s", "nearest-token")
    assert excinfo.value.code == 2
