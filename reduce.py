"""
SIMPLE small-step reduction
Each call to reduce performs exactly one rewrite of a term toward its normal form.
Covers the first-order imperative core; function calls belong to the big-step evaluator.
"""

from typing import Callable, Dict

from environment import env_add, env_get, env_snapshot
from error_handling import TypeMismatch, UnhandledTerm
from syntax import (
  format_node,
  is_do_nothing,
  is_value,
  make_boolean,
  make_closure,
  make_do_nothing,
  make_if,
  make_lt,
  make_node,
  make_sequence,
)
from utilities import apply_operator, boolean_value, pair_components


def reducible(node: Dict) -> bool:
  """False exactly for normal forms"""
  return not is_value(node)


# ============================================================================
# REDUCTION RULES
# ============================================================================

def reduce_binary(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Leftmost-innermost: left operand, then right operand, then fold"""
  left, right = node['children']
  if reducible(left):
    return make_node(node['type'], node['value'], [reduce(left, env, debug), right])
  if reducible(right):
    return make_node(node['type'], node['value'], [left, reduce(right, env, debug)])
  return apply_operator(node, left, right)


def reduce_gt(node: Dict, env: Dict, debug: bool = False) -> Dict:
  left, right = node['children']
  return make_lt(right, left)


def reduce_variable(node: Dict, env: Dict, debug: bool = False) -> Dict:
  return env_get(env, node['value'])


def reduce_assign(node: Dict, env: Dict, debug: bool = False) -> Dict:
  expr = node['children'][0]
  if reducible(expr):
    return make_node("ASSIGN", node['value'], [reduce(expr, env, debug)])
  env_add(env, node['value'], expr)
  return make_do_nothing()


def reduce_if(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Reduce the condition to a boolean, then become the selected (unevaluated) branch"""
  condition, consequence, alternative = node['children']
  if reducible(condition):
    return make_if(reduce(condition, env, debug), consequence, alternative)
  return consequence if boolean_value(condition) else alternative


def reduce_sequence(node: Dict, env: Dict, debug: bool = False) -> Dict:
  first, rest = node['children']
  if is_do_nothing(first):
    return rest
  return make_sequence(reduce(first, env, debug), rest)


def reduce_while(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Unroll one iteration: while (c) b  ->  if (c) { b; while (c) b } else do-nothing"""
  condition, body = node['children']
  return make_if(condition, make_sequence(body, node), make_do_nothing())


def reduce_pair(node: Dict, env: Dict, debug: bool = False) -> Dict:
  first, second = node['children']
  if reducible(first):
    return make_node("PAIR", None, [reduce(first, env, debug), second])
  return make_node("PAIR", None, [first, reduce(second, env, debug)])


def reduce_projection(node: Dict, env: Dict, debug: bool = False) -> Dict:
  operand = node['children'][0]
  if reducible(operand):
    return make_node(node['type'], None, [reduce(operand, env, debug)])
  try:
    first, second = pair_components(operand)
  except TypeMismatch as e:
    raise TypeMismatch("pair", node) from e
  return first if node['type'] == "FST" else second


def reduce_is_do_nothing(node: Dict, env: Dict, debug: bool = False) -> Dict:
  operand = node['children'][0]
  if reducible(operand):
    return make_node("IS_DO_NOTHING", None, [reduce(operand, env, debug)])
  return make_boolean(is_do_nothing(operand))


def reduce_fun(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Capture mirrors the big-step evaluator: an independent snapshot"""
  return make_closure(env_snapshot(env), node)


REDUCTION_RULES: Dict[str, Callable[[Dict, Dict, bool], Dict]] = {
    'ADD': reduce_binary,
    'SUBTRACT': reduce_binary,
    'MULTIPLY': reduce_binary,
    'LT': reduce_binary,
    'EQ': reduce_binary,
    'GT': reduce_gt,
    'VARIABLE': reduce_variable,
    'ASSIGN': reduce_assign,
    'IF': reduce_if,
    'SEQUENCE': reduce_sequence,
    'WHILE': reduce_while,
    'PAIR': reduce_pair,
    'FST': reduce_projection,
    'SND': reduce_projection,
    'IS_DO_NOTHING': reduce_is_do_nothing,
    'FUN': reduce_fun,
}


def reduce(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """
  Perform one rewrite of node in env and return the new term.
  Normal forms cannot be reduced, and CALL is outside the small-step subset;
  both raise UnhandledTerm.
  """
  if not reducible(node):
    raise UnhandledTerm(node, "reduce")

  if debug:
    print(f"Reducing: {format_node(node)}")

  rule = REDUCTION_RULES.get(node['type'])
  if rule is None:
    raise UnhandledTerm(node, "reduce")
  return rule(node, env, debug)
