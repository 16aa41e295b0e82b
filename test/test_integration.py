"""
Integration tests for SIMPLE
Runs the programs in examples/ end to end through the parser and both engines
"""

import pytest
from pathlib import Path
from environment import env_get, make_environment
from error_handling import UnhandledTerm
from interpreter import evaluate_program
from machine import Machine
from syntax import make_boolean, make_do_nothing, make_number


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def run_example(parser, name):
  node = parser.parse_file(str(EXAMPLES_DIR / name))
  return evaluate_program(node)


class TestExamplePrograms:
  """Test every example with the big-step evaluator"""

  def test_factorial(self, parser):
    value, env = run_example(parser, "factorial.simple")
    assert value == make_number(3628800)
    assert env_get(env, "result") == make_number(3628800)

  def test_closure_capture(self, parser):
    value, env = run_example(parser, "closure.simple")
    assert value == make_do_nothing()
    assert env_get(env, "result") == make_number(7)
    assert env_get(env, "x") == make_number(5)

  def test_currying(self, parser):
    value, env = run_example(parser, "currying.simple")
    assert value == make_number(48)

  def test_loop(self, parser):
    value, env = run_example(parser, "loop.simple")
    assert value == make_number(9)

  def test_pairs(self, parser):
    value, env = run_example(parser, "pairs.simple")
    assert value == make_number(3)
    assert env_get(env, "finished") == make_boolean(True)

  def test_every_example_parses(self, parser):
    for path in sorted(EXAMPLES_DIR.glob("*.simple")):
      parser.parse_file(str(path))


class TestSmallStepExamples:
  """The machine agrees with the evaluator on call-free programs"""

  @pytest.mark.parametrize("name", ["loop.simple", "pairs.simple"])
  def test_agreement(self, parser, name):
    node = parser.parse_file(str(EXAMPLES_DIR / name))
    big_value, big_env = evaluate_program(node)
    small_env = make_environment()
    small_value = Machine(node, small_env).run()
    assert small_value == big_value
    assert small_env == big_env

  def test_calls_need_big_step(self, parser):
    node = parser.parse_file(str(EXAMPLES_DIR / "factorial.simple"))
    with pytest.raises(UnhandledTerm):
      Machine(node).run()


class TestSourcePrograms:
  """Short programs written inline"""

  def test_shadowed_parameter(self, parser):
    node = parser.parse_string("x := 1; f := function (x) x * 10; f(5) + x")
    value, _ = evaluate_program(node)
    assert value == make_number(51)

  def test_function_sees_own_assignments(self, parser):
    code = """
    count := function (n) {
      total := 0;
      while (n > 0) { total := total + n; n := n - 1 };
      total
    };
    count(4)
    """
    value, _ = evaluate_program(parser.parse_string(code))
    assert value == make_number(10)

  def test_list_length(self, parser):
    code = """
    length := function len (l) if (is-do-nothing(l)) 0 else 1 + len(snd(l));
    length(pair(7, pair(8, pair(9, do-nothing))))
    """
    value, _ = evaluate_program(parser.parse_string(code))
    assert value == make_number(3)
