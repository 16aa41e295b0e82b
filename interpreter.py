"""
SIMPLE Interpreter - big-step evaluation
Computes the value of a term directly by structural recursion.
The environment passed in is the only thing evaluation mutates.
"""

from typing import Dict, Optional, Tuple

from environment import env_add, env_get, env_snapshot, make_environment, pretty_print_env
from error_handling import CallOnNonClosure, TypeMismatch, UnhandledTerm
from semantics import free_variables
from syntax import (
  closure_env,
  closure_fun,
  format_node,
  fun_body,
  fun_name,
  fun_param,
  is_do_nothing,
  make_boolean,
  make_closure,
  make_do_nothing,
  make_lt,
  make_pair,
)
from utilities import apply_operator, boolean_value, pair_components


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def evaluate(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """
  Evaluate a term to a normal form in env.
  Assignments rebind names in env in place; nothing else is mutated.
  """
  if debug:
    print(f"Evaluating: {format_node(node)}")

  node_type = node['type']

  if node_type in ("NUMBER", "BOOLEAN", "DO_NOTHING", "CLOSURE"):
    # Values evaluate to themselves
    return node
  elif node_type in ("ADD", "SUBTRACT", "MULTIPLY", "LT", "EQ"):
    return eval_operation(node, env, debug)
  elif node_type == "GT":
    left, right = node['children']
    return evaluate(make_lt(right, left), env, debug)
  elif node_type == "VARIABLE":
    return env_get(env, node['value'])
  elif node_type == "ASSIGN":
    return eval_assign(node, env, debug)
  elif node_type == "IF":
    return eval_if(node, env, debug)
  elif node_type == "SEQUENCE":
    return eval_sequence(node, env, debug)
  elif node_type == "WHILE":
    return eval_while(node, env, debug)
  elif node_type == "PAIR":
    first, second = node['children']
    return make_pair(evaluate(first, env, debug), evaluate(second, env, debug))
  elif node_type in ("FST", "SND"):
    return eval_projection(node, env, debug)
  elif node_type == "IS_DO_NOTHING":
    return make_boolean(is_do_nothing(evaluate(node['children'][0], env, debug)))
  elif node_type == "FUN":
    # Capture happens once, here, by value
    return make_closure(env_snapshot(env), node)
  elif node_type == "CALL":
    return eval_call(node, env, debug)
  else:
    raise UnhandledTerm(node)


def eval_operation(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Evaluate both operands, left first, and fold them"""
  left, right = node['children']
  left_value = evaluate(left, env, debug)
  right_value = evaluate(right, env, debug)
  return apply_operator(node, left_value, right_value)


def eval_assign(node: Dict, env: Dict, debug: bool = False) -> Dict:
  value = evaluate(node['children'][0], env, debug)
  env_add(env, node['value'], value)
  return make_do_nothing()


def eval_if(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Evaluate exactly one branch"""
  condition, consequence, alternative = node['children']
  if boolean_value(evaluate(condition, env, debug)):
    return evaluate(consequence, env, debug)
  return evaluate(alternative, env, debug)


def eval_sequence(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Run statements in order and return the last one's value.

  The right-nested chain is walked in a loop, so program length does not
  grow the Python stack.
  """
  while node['type'] == "SEQUENCE":
    first, node = node['children']
    evaluate(first, env, debug)
  return evaluate(node, env, debug)


def eval_while(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Loop in Python rather than recursing once per iteration"""
  condition, body = node['children']
  while boolean_value(evaluate(condition, env, debug)):
    evaluate(body, env, debug)
  return make_do_nothing()


def eval_projection(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """fst/snd: the operand must evaluate to a pair, then the chosen component is evaluated"""
  pair = evaluate(node['children'][0], env, debug)
  try:
    first, second = pair_components(pair)
  except TypeMismatch as e:
    raise TypeMismatch("pair", node) from e
  component = first if node['type'] == "FST" else second
  return evaluate(component, env, debug)


# ============================================================================
# FUNCTION CALLS
# ============================================================================

def build_call_frame(closure: Dict, arg: Dict, debug: bool = False) -> Dict:
  """
  Build the fresh environment a call runs in.

  Free variables are looked up in the closure's captured environment, never
  the caller's, which makes scoping lexical. The function's own name is bound
  to the closure so the body can recurse, and the parameter (if any) to arg.
  """
  fun = closure_fun(closure)
  captured = closure_env(closure)

  frame = make_environment()
  for name in sorted(free_variables(fun)):
    env_add(frame, name, env_get(captured, name))
  if fun_name(fun):
    env_add(frame, fun_name(fun), closure)
  if fun_param(fun):
    env_add(frame, fun_param(fun), arg)

  if debug:
    print(f"Call frame for {format_node(fun)}:")
    print(pretty_print_env(frame, 1))

  return frame


def eval_call(node: Dict, env: Dict, debug: bool = False) -> Dict:
  """Apply a closure. The argument is evaluated first, in the caller's environment."""
  callee, arg_expr = node['children']
  arg = evaluate(arg_expr, env, debug)
  closure = evaluate(callee, env, debug)

  if closure['type'] != "CLOSURE":
    raise CallOnNonClosure(closure)
  fun = closure_fun(closure)
  if fun['type'] != "FUN":
    raise TypeMismatch("function", fun)

  frame = build_call_frame(closure, arg, debug)
  return evaluate(fun_body(fun), frame, debug)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def evaluate_program(node: Dict, env: Optional[Dict] = None, debug: bool = False) -> Tuple[Dict, Dict]:
  """
  Evaluate a whole program and return (result_value, final_environment).
  A fresh environment is created when none is given.
  """
  if env is None:
    env = make_environment()
  value = evaluate(node, env, debug)
  return value, env
