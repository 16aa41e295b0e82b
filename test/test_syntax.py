"""
Tests for SIMPLE term construction, value predicates and display
"""

import pytest
from syntax import (
  format_node,
  is_value,
  make_add,
  make_assign,
  make_boolean,
  make_call,
  make_closure,
  make_do_nothing,
  make_eq,
  make_fun,
  make_gt,
  make_if,
  make_list,
  make_lt,
  make_multiply,
  make_number,
  make_pair,
  make_sequence,
  make_sequence_of,
  make_subtract,
  make_variable,
  make_while,
  pretty_print_node,
)
from environment import make_environment


class TestValues:
  """Test which terms count as normal forms"""

  def test_literals_are_values(self):
    """Numbers, booleans and do-nothing are values"""
    assert is_value(make_number(3))
    assert is_value(make_boolean(False))
    assert is_value(make_do_nothing())

  def test_closure_is_value(self):
    """A closure is a value, the function literal it wraps is not"""
    fun = make_fun("f", "x", make_variable("x"))
    assert not is_value(fun)
    assert is_value(make_closure(make_environment(), fun))

  def test_pair_of_values(self):
    """A pair is a value only when both components are"""
    assert is_value(make_pair(make_number(1), make_number(2)))
    assert not is_value(make_pair(make_number(1), make_add(make_number(1), make_number(1))))
    assert not is_value(make_pair(make_variable("x"), make_number(2)))

  def test_expressions_are_not_values(self):
    """Operations, variables and statements still have work to do"""
    assert not is_value(make_add(make_number(1), make_number(2)))
    assert not is_value(make_variable("x"))
    assert not is_value(make_assign("x", make_number(1)))


class TestConstructors:
  """Test helper constructors"""

  def test_make_list(self):
    """make_list builds a do-nothing terminated pair chain"""
    expected = make_pair(make_number(1),
                         make_pair(make_number(2),
                                   make_pair(make_number(3), make_do_nothing())))
    assert make_list([1, 2, 3]) == expected

  def test_make_empty_list(self):
    assert make_list([]) == make_do_nothing()

  def test_make_sequence_of_nests_right(self):
    """Statements are nested to the right, first statement outermost"""
    a, b, c = make_number(1), make_number(2), make_number(3)
    assert make_sequence_of([a, b, c]) == make_sequence(a, make_sequence(b, c))
    assert make_sequence_of([a]) == a


class TestFormatting:
  """Test one-line rendering of terms"""

  def test_format_number(self):
    assert format_node(make_number(3)) == "3"

  def test_format_literals(self):
    assert format_node(make_boolean(True)) == "true"
    assert format_node(make_boolean(False)) == "false"
    assert format_node(make_do_nothing()) == "do-nothing"

  def test_format_operators(self):
    """Each binary operator renders infix"""
    one, two = make_number(1), make_number(2)
    assert format_node(make_add(one, two)) == "1 + 2"
    assert format_node(make_subtract(one, two)) == "1 - 2"
    assert format_node(make_multiply(one, two)) == "1 * 2"
    assert format_node(make_lt(one, two)) == "1 < 2"
    assert format_node(make_eq(one, two)) == "1 == 2"
    assert format_node(make_gt(one, two)) == "1 > 2"

  def test_format_precedence(self):
    """Lower-precedence operands are parenthesised, higher ones are not"""
    node = make_multiply(make_add(make_number(1), make_number(2)), make_number(3))
    assert format_node(node) == "(1 + 2) * 3"
    node = make_add(make_multiply(make_number(1), make_number(2)), make_number(3))
    assert format_node(node) == "1 * 2 + 3"

  def test_format_right_associative_grouping(self):
    """An equal-precedence right operand keeps its parentheses"""
    node = make_subtract(make_number(1), make_subtract(make_number(2), make_number(3)))
    assert format_node(node) == "1 - (2 - 3)"
    node = make_subtract(make_subtract(make_number(1), make_number(2)), make_number(3))
    assert format_node(node) == "1 - 2 - 3"

  def test_format_statements(self):
    """Assignments, conditionals, loops and sequences"""
    assign = make_assign("x", make_number(1))
    assert format_node(assign) == "x := 1"
    node = make_if(make_variable("c"), assign, make_do_nothing())
    assert format_node(node) == "if (c) x := 1 else do-nothing"
    body = make_sequence(assign, make_assign("y", make_number(2)))
    node = make_while(make_lt(make_variable("x"), make_number(5)), body)
    assert format_node(node) == "while (x < 5) { x := 1; y := 2 }"

  def test_format_functions_and_calls(self):
    """Named, anonymous and zero-argument functions, and calls on them"""
    fun = make_fun("f", "x", make_add(make_variable("x"), make_number(1)))
    assert format_node(fun) == "function f (x) x + 1"
    assert format_node(make_fun("", "", make_number(42))) == "function () 42"
    assert format_node(make_call(make_variable("f"), make_number(4))) == "f (4)"
    assert format_node(make_call(make_variable("f"), make_do_nothing())) == "f ()"
    assert format_node(make_call(fun, make_number(4))) == "(function f (x) x + 1) (4)"

  def test_format_closure(self):
    fun = make_fun("f", "x", make_variable("x"))
    assert format_node(make_closure(make_environment(), fun)) == "closure (function f (x) x)"


class TestPrettyPrint:
  """Test multi-line rendering"""

  def test_sequence_one_statement_per_line(self):
    node = make_sequence(make_assign("x", make_number(1)), make_assign("y", make_number(2)))
    assert pretty_print_node(node) == "x := 1\ny := 2"

  def test_indentation(self):
    assert pretty_print_node(make_number(3), 2) == "    3"

  def test_closure_shows_captured_environment(self):
    """The captured bindings are listed beneath the closure"""
    env = make_environment({'x': make_number(3)})
    closure = make_closure(env, make_fun("f", "y", make_variable("y")))
    text = pretty_print_node(closure)
    assert text.startswith("closure (function f (y) y)")
    assert "x = 3" in text

  def test_long_sequence(self):
    """Long statement chains render without deep recursion"""
    node = make_sequence_of([make_assign(f"x{i}", make_number(i)) for i in range(2000)])
    assert format_node(node).startswith("x0 := 0; x1 := 1; ")
    lines = pretty_print_node(node).split("\n")
    assert len(lines) == 2000
    assert lines[-1] == "x1999 := 1999"
