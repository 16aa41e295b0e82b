"""
Utilities module for SIMPLE interpreter
Value extraction and primitive operators shared by the big-step and small-step engines
"""

from typing import Callable, Dict, Tuple
import operator

from error_handling import TypeMismatch
from syntax import make_boolean, make_number


# ==================== VALUE EXTRACTION UTILITIES ====================

def number_value(node: Dict) -> int:
  """
  Extract the integer payload of a Number term

  Raises:
    TypeMismatch if node is not a Number
  """
  if node['type'] != "NUMBER":
    raise TypeMismatch("number", node)
  return node['value']


def boolean_value(node: Dict) -> bool:
  """
  Extract the payload of a Boolean term, used for if/while conditions

  Raises:
    TypeMismatch if node is not a Boolean
  """
  if node['type'] != "BOOLEAN":
    raise TypeMismatch("boolean", node)
  return node['value']


def pair_components(node: Dict) -> Tuple[Dict, Dict]:
  """
  Split a Pair term into its two components

  Raises:
    TypeMismatch if node is not a Pair
  """
  if node['type'] != "PAIR":
    raise TypeMismatch("pair", node)
  first, second = node['children']
  return first, second


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(op: Callable[[int, int], int]) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for integer arithmetic over Number terms

  Examples:
    simple_add = binary_arithmetic_op(operator.add)
    simple_add(make_number(1), make_number(2)) -> make_number(3)
  """
  def arithmetic(x: Dict, y: Dict) -> Dict:
    return make_number(op(number_value(x), number_value(y)))

  return arithmetic


def binary_comparison_op(op: Callable[[int, int], bool]) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for comparisons of Number terms yielding Boolean terms

  Examples:
    simple_lt = binary_comparison_op(operator.lt)
    simple_lt(make_number(1), make_number(2)) -> make_boolean(True)
  """
  def comparison(x: Dict, y: Dict) -> Dict:
    return make_boolean(op(number_value(x), number_value(y)))

  return comparison


# GT never appears here, it is rewritten to LT before evaluation
BUILTIN_OPERATORS: Dict[str, Callable[[Dict, Dict], Dict]] = {
    'ADD': binary_arithmetic_op(operator.add),
    'SUBTRACT': binary_arithmetic_op(operator.sub),
    'MULTIPLY': binary_arithmetic_op(operator.mul),
    'LT': binary_comparison_op(operator.lt),
    'EQ': binary_comparison_op(operator.eq),
}


def apply_operator(node: Dict, left: Dict, right: Dict) -> Dict:
  """Fold two evaluated operands with the primitive for node's type.

  Operand errors are reported against the whole expression so the message
  shows the offending operation, not just the operand.
  """
  try:
    return BUILTIN_OPERATORS[node['type']](left, right)
  except TypeMismatch as e:
    raise TypeMismatch(e.expected, node) from e
