"""
SIMPLE Semantics Analysis - Pure Functional Style
Free-variable analysis of function literals, used to build minimal call frames
"""

from typing import Dict, Set

from error_handling import TypeMismatch
from syntax import closure_fun, fun_body, fun_name, fun_param, sequence_statements


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def function_bound_names(fun: Dict) -> Set[str]:
  """Names a function binds for its own body: its name and its parameter"""
  return {name for name in (fun_name(fun), fun_param(fun)) if name}


# ============================================================================
# FREE VARIABLE ANALYSIS
# ============================================================================

def collect_free_variables(node: Dict, bound: Set[str], free: Set[str], debug: bool = False) -> None:
  """Walk node left to right, recording in free every variable read before it is bound.

  bound is extended in place by assignments, which makes the assigned name local
  for the remainder of the walk. Nested functions get their own copy of bound.
  """
  node_type = node['type']

  if node_type == "VARIABLE":
    name = node['value']
    if name not in bound:
      if debug:
        print(f"Free variable: {name}")
      free.add(name)

  elif node_type == "ASSIGN":
    collect_free_variables(node['children'][0], bound, free, debug)
    bound.add(node['value'])

  elif node_type == "FUN":
    inner_bound = bound | function_bound_names(node)
    collect_free_variables(fun_body(node), inner_bound, free, debug)

  elif node_type == "CLOSURE":
    collect_free_variables(closure_fun(node), bound, free, debug)

  elif node_type == "SEQUENCE":
    for statement in sequence_statements(node):
      collect_free_variables(statement, bound, free, debug)

  else:
    # Literals have no children; every other form is walked in order
    for child in node['children']:
      collect_free_variables(child, bound, free, debug)


def free_variables(fun: Dict, debug: bool = False) -> Set[str]:
  """Names referenced in fun's body that are defined outside the function.

  The function's own name, its parameter and any name it assigns are bound.
  Accepts a function literal or a closure wrapping one.
  """
  if fun['type'] == "CLOSURE":
    fun = closure_fun(fun)
  if fun['type'] != "FUN":
    raise TypeMismatch("function", fun)

  free: Set[str] = set()
  collect_free_variables(fun_body(fun), function_bound_names(fun), free, debug)
  return free
