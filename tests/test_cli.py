"""Tests for the mooc command-line interface and compile_file."""

import json
from pathlib import Path

import pytest
from mooc.cli import main
from mooc.compiler import compile_file

FIXTURES = Path(__file__).parent / "fixtures"


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestCompileFile:
    def test_writes_unparsed_output(self, tmp_path):
        out = tmp_path / "out" / "valid.out"
        result = compile_file(FIXTURES / "valid.moo", out)
        assert result.ok
        text = out.read_text()
        assert text.startswith("struct Point {\n")
        assert "cin >> count(int);" in text

    def test_errors_skip_output(self, tmp_path, capsys):
        out = tmp_path / "errors.out"
        result = compile_file(FIXTURES / "name_errors.moo", out)
        assert len(result.errors) == 11
        assert not out.exists()
        err = capsys.readouterr().err.splitlines()
        assert err[0] == "3:9 ***ERROR*** Multiply declared identifier"
        assert err[-1] == "16:8 ***ERROR*** Dot-access of a non-struct type"


class TestCli:
    def test_success_prints_to_stdout(self, capsys):
        main([str(FIXTURES / "valid.moo")])
        out = capsys.readouterr().out
        assert "int length(struct Segment s, int scale) {" in out

    def test_no_annotate(self, capsys):
        main([str(FIXTURES / "valid.moo"), "--no-annotate"])
        out = capsys.readouterr().out
        assert "    cin >> count;" in out.splitlines()

    def test_output_file(self, tmp_path, capsys):
        out = tmp_path / "valid.out"
        main([str(FIXTURES / "valid.moo"), "-o", str(out)])
        assert out.exists()
        assert f"Wrote {out}" in capsys.readouterr().out

    def test_semantic_errors_exit_1(self, capsys):
        assert _run([str(FIXTURES / "name_errors.moo")]) == 1
        err = capsys.readouterr().err
        assert "11 error(s) found" in err
        assert "8:8 ***ERROR*** Invalid name of struct type" in err

    def test_syntax_error_exit_1(self, tmp_path, capsys):
        bad = tmp_path / "bad.moo"
        bad.write_text("int x\n")
        assert _run([str(bad)]) == 1
        assert "***ERROR***" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert _run([str(tmp_path / "nope.moo")]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_no_input_prints_help(self, capsys):
        assert _run([]) == 0
        assert "usage: mooc" in capsys.readouterr().out

    def test_dump_symbols(self, capsys):
        main([str(FIXTURES / "valid.moo"), "--dump-symbols"])
        out = capsys.readouterr().out.splitlines()
        assert "=== Symbol Table ===" in out
        table = out[out.index("=== Symbol Table ===") + 1]
        assert "main: ->void" in table
        assert "seg: Segment" in table

    def test_dump_ast(self, tmp_path, capsys):
        src = tmp_path / "tiny.moo"
        src.write_text("int x;\n")
        main([str(src), "--dump-ast"])
        out = capsys.readouterr().out
        ast = json.loads(out[: out.rindex("}") + 1])
        assert ast["_type"] == "Program"
        assert ast["decls"][0]["id"]["name"] == "x"

    def test_version(self, capsys):
        assert _run(["--version"]) == 0
        assert "mooc 0.1.0" in capsys.readouterr().out
