"""
Command line tests for SIMPLE
"""

import pytest
from pathlib import Path
from main import create_arg_parser, main


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


class TestArguments:

  def test_flags(self):
    args = create_arg_parser().parse_args(["--small-step", "--debug", "prog.simple"])
    assert args.script == "prog.simple"
    assert args.small_step
    assert args.debug
    assert not args.parse

  def test_version(self, capsys):
    with pytest.raises(SystemExit):
      create_arg_parser().parse_args(["--version"])
    assert "SIMPLE" in capsys.readouterr().out


class TestRunScript:
  """Test running script files"""

  def test_prints_value_and_environment(self, capsys):
    main([str(EXAMPLES_DIR / "loop.simple")])
    out = capsys.readouterr().out
    assert "=> 9" in out
    assert "Final environment:" in out
    assert "x = 9" in out

  def test_do_nothing_value_not_printed(self, capsys):
    main([str(EXAMPLES_DIR / "closure.simple")])
    out = capsys.readouterr().out
    assert "=>" not in out
    assert "result = 7" in out

  def test_small_step(self, capsys):
    main(["--small-step", str(EXAMPLES_DIR / "pairs.simple")])
    assert "=> 3" in capsys.readouterr().out

  def test_parse_only(self, capsys):
    main(["--parse", str(EXAMPLES_DIR / "loop.simple")])
    out = capsys.readouterr().out
    assert "x := 1" in out
    assert "while (x < 5) x := x * 3" in out

  def test_missing_script(self, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
      main([str(tmp_path / "missing.simple")])
    assert exc_info.value.code == 1

  def test_directory_script_exits(self, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
      main([str(tmp_path)])
    assert exc_info.value.code == 1
    assert "Cannot read file" in capsys.readouterr().out

  def test_runtime_error_exits(self, capsys, tmp_path):
    script = tmp_path / "bad.simple"
    script.write_text("y := x + 1")
    with pytest.raises(SystemExit) as exc_info:
      main([str(script)])
    assert exc_info.value.code == 1
    assert "Variable x not found" in capsys.readouterr().out

  def test_parse_error_exits(self, capsys, tmp_path):
    script = tmp_path / "bad.simple"
    script.write_text("if (true) 1")
    with pytest.raises(SystemExit) as exc_info:
      main([str(script)])
    assert exc_info.value.code == 1
    assert "Parse error" in capsys.readouterr().out


class TestInteractive:
  """Test the REPL with scripted input"""

  def run_repl(self, monkeypatch, lines):
    inputs = iter(lines)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
    monkeypatch.setattr("main.READLINE_AVAILABLE", False)
    main(["-i"])

  def test_session_environment_persists(self, monkeypatch, capsys):
    self.run_repl(monkeypatch, ["x := 20", "x + 22", ":env", "exit"])
    out = capsys.readouterr().out
    assert "=> 42" in out
    assert "x = 20" in out

  def test_errors_do_not_end_session(self, monkeypatch, capsys):
    self.run_repl(monkeypatch, ["y", "x :=", "1 + 1", "exit"])
    out = capsys.readouterr().out
    assert "Variable y not found" in out
    assert "Parse error" in out
    assert "=> 2" in out

  def test_small_command(self, monkeypatch, capsys):
    self.run_repl(monkeypatch, [":small 2 * 3", "exit"])
    assert "=> 6" in capsys.readouterr().out

  def test_end_of_input(self, monkeypatch, capsys):
    def raise_eof(prompt=""):
      raise EOFError
    monkeypatch.setattr("builtins.input", raise_eof)
    monkeypatch.setattr("main.READLINE_AVAILABLE", False)
    main(["-i"])
    assert "Goodbye!" in capsys.readouterr().out
