"""CLI tests for reginfo."""

from __future__ import annotations

import io
import json

from reginfo.cli import _run_script, main
from reginfo.commands import build_registry
from reginfo.context import AnalysisContext


def _write_sample(tmp_path, sample_source):
    path = tmp_path / "copy.s"
    path.write_text(sample_source, encoding="utf-8")
    return path


def test_map_option_prints_rewritten_source(tmp_path, sample_source, capsys):
    path = _write_sample(tmp_path, sample_source)
    assert main([str(path), "-m", "d0=d4", "--map", "a0->a3"]) == 0
    out = capsys.readouterr().out
    assert "move.w d4,d1" in out
    assert "lea Table(pc),a3" in out
    assert path.read_text(encoding="utf-8") == sample_source


def test_map_option_writes_output(tmp_path, sample_source, capsys):
    path = _write_sample(tmp_path, sample_source)
    out_path = tmp_path / "out.s"
    assert main([str(path), "-m", "sp=a6", "-o", str(out_path)]) == 0
    assert "-(a6)" in out_path.read_text(encoding="utf-8")
    assert "1 replacements" in capsys.readouterr().out


def test_bad_mapping_is_an_error(tmp_path, sample_source, capsys):
    path = _write_sample(tmp_path, sample_source)
    assert main([str(path), "-m", "d0"]) == 1
    assert "Bad mapping" in capsys.readouterr().out


def test_single_command_json(tmp_path, sample_source, capsys):
    path = _write_sample(tmp_path, sample_source)
    assert main([str(path), "--json", "-c", "refs d0"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "ok"
    assert payload["result"]["input"] is True


def test_unknown_command_fails(tmp_path, sample_source, capsys):
    path = _write_sample(tmp_path, sample_source)
    assert main([str(path), "-c", "frobnicate"]) == 1
    assert "Unknown command" in capsys.readouterr().out


def test_missing_source_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.s"), "-c", "regs"]) == 1
    assert "cannot read" in capsys.readouterr().out


def test_script_executes_commands(tmp_path, sample_source):
    path = _write_sample(tmp_path, sample_source)
    out_path = tmp_path / "renamed.s"
    script = tmp_path / "script.txt"
    script.write_text(
        f"# rename the counter\nload {path}\nmap d0 d4\napply\nsave {out_path}\n",
        encoding="utf-8",
    )
    ctx = AnalysisContext()
    assert _run_script(ctx, build_registry(), str(script)) == 0
    assert "move.w d4,d1" in out_path.read_text(encoding="utf-8")
    assert not ctx.dirty


def test_script_stops_on_failure(tmp_path):
    script = tmp_path / "script.txt"
    script.write_text("regs\n", encoding="utf-8")
    assert _run_script(AnalysisContext(), build_registry(), str(script)) != 0


def test_script_missing_file_returns_error(tmp_path):
    assert _run_script(AnalysisContext(), build_registry(), str(tmp_path / "missing.txt")) != 0


def test_piped_stdin_prints_register_table(monkeypatch, sample_source, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(sample_source))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "First use" in out
    assert "d0" in out
