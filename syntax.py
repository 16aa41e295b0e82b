"""
SIMPLE Abstract Syntax - Pure Functional Style
Terms are immutable dictionaries built through constructor functions
Display functions render terms in conventional infix/keyword notation
"""

from typing import Any, Dict, Iterable, List, Optional


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_node(node_type: str, value: Any = None, children: Optional[List[Dict]] = None) -> Dict:
  """Create an immutable term node"""
  return {
      'type': node_type,
      'value': value,
      'children': children or []
  }


def make_number(value: int) -> Dict:
  return make_node("NUMBER", value)


def make_boolean(value: bool) -> Dict:
  return make_node("BOOLEAN", value)


def make_do_nothing() -> Dict:
  return make_node("DO_NOTHING")


def make_is_do_nothing(expr: Dict) -> Dict:
  return make_node("IS_DO_NOTHING", None, [expr])


def make_add(left: Dict, right: Dict) -> Dict:
  return make_node("ADD", None, [left, right])


def make_subtract(left: Dict, right: Dict) -> Dict:
  return make_node("SUBTRACT", None, [left, right])


def make_multiply(left: Dict, right: Dict) -> Dict:
  return make_node("MULTIPLY", None, [left, right])


def make_lt(left: Dict, right: Dict) -> Dict:
  return make_node("LT", None, [left, right])


def make_eq(left: Dict, right: Dict) -> Dict:
  return make_node("EQ", None, [left, right])


def make_gt(left: Dict, right: Dict) -> Dict:
  """Sugar for LT with swapped operands, rewritten before it is ever evaluated"""
  return make_node("GT", None, [left, right])


def make_variable(name: str) -> Dict:
  return make_node("VARIABLE", name)


def make_assign(name: str, expr: Dict) -> Dict:
  return make_node("ASSIGN", name, [expr])


def make_if(condition: Dict, consequence: Dict, alternative: Dict) -> Dict:
  return make_node("IF", None, [condition, consequence, alternative])


def make_sequence(first: Dict, rest: Dict) -> Dict:
  return make_node("SEQUENCE", None, [first, rest])


def make_while(condition: Dict, body: Dict) -> Dict:
  return make_node("WHILE", None, [condition, body])


def make_pair(first: Dict, second: Dict) -> Dict:
  return make_node("PAIR", None, [first, second])


def make_fst(pair: Dict) -> Dict:
  return make_node("FST", None, [pair])


def make_snd(pair: Dict) -> Dict:
  return make_node("SND", None, [pair])


def make_fun(name: str, param: str, body: Dict) -> Dict:
  """Create a function literal. Empty param means a zero-argument function,
  empty name means an anonymous function with no self-binding"""
  return make_node("FUN", {'name': name, 'param': param}, [body])


def make_closure(env: Dict, fun: Dict) -> Dict:
  """Pair a function literal with a snapshot of its defining environment.
  The caller is responsible for passing an independent copy."""
  return make_node("CLOSURE", env, [fun])


def make_call(callee: Dict, arg: Dict) -> Dict:
  return make_node("CALL", None, [callee, arg])


def make_sequence_of(statements: List[Dict]) -> Dict:
  """Right-nest a non-empty list of statements into Sequence nodes"""
  result = statements[-1]
  for statement in reversed(statements[:-1]):
    result = make_sequence(statement, result)
  return result


def make_list(values: Iterable[int]) -> Dict:
  """Build a pair chain terminated by do-nothing, e.g. [1, 2] -> pair (1, pair (2, do-nothing))"""
  result = make_do_nothing()
  for value in reversed(list(values)):
    result = make_pair(make_number(value), result)
  return result


# ============================================================================
# ACCESSORS
# ============================================================================

def fun_name(fun: Dict) -> str:
  return fun['value']['name']


def fun_param(fun: Dict) -> str:
  return fun['value']['param']


def fun_body(fun: Dict) -> Dict:
  return fun['children'][0]


def closure_env(closure: Dict) -> Dict:
  return closure['value']


def closure_fun(closure: Dict) -> Dict:
  return closure['children'][0]


# ============================================================================
# VALUE PREDICATES
# ============================================================================

ATOMIC_VALUE_TYPES = ("NUMBER", "BOOLEAN", "DO_NOTHING", "CLOSURE")


def is_value(node: Dict) -> bool:
  """True for normal forms: literals, closures and pairs of values"""
  node_type = node['type']
  if node_type in ATOMIC_VALUE_TYPES:
    return True
  if node_type == "PAIR":
    return all(is_value(child) for child in node['children'])
  return False


def is_do_nothing(node: Dict) -> bool:
  return node['type'] == "DO_NOTHING"


def sequence_statements(node: Dict) -> List[Dict]:
  """Unroll the right spine of a Sequence chain into a flat list of statements"""
  statements = []
  while node['type'] == "SEQUENCE":
    first, node = node['children']
    statements.append(first)
  statements.append(node)
  return statements


# ============================================================================
# DISPLAY
# ============================================================================

BINARY_OPERATORS = {
    'ADD': '+',
    'SUBTRACT': '-',
    'MULTIPLY': '*',
    'LT': '<',
    'EQ': '==',
    'GT': '>',
}

# Higher binds tighter
PRECEDENCE = {
    'MULTIPLY': 3,
    'ADD': 2,
    'SUBTRACT': 2,
    'LT': 1,
    'EQ': 1,
    'GT': 1,
}

STATEMENT_TYPES = ("ASSIGN", "IF", "WHILE", "SEQUENCE")


def _format_operand(node: Dict, parent_precedence: int, right: bool) -> str:
  text = format_node(node)
  # A function body extends as far right as possible, so it is always bracketed
  if node['type'] in STATEMENT_TYPES or node['type'] == "FUN":
    return f"({text})"
  precedence = PRECEDENCE.get(node['type'])
  if precedence is None:
    return text
  # Operators are left-associative, so an equal-precedence right operand needs parentheses
  if precedence < parent_precedence or (right and precedence == parent_precedence):
    return f"({text})"
  return text


def _format_body(node: Dict) -> str:
  """Bodies of if/while/function wrap sequences in braces"""
  text = format_node(node)
  if node['type'] == "SEQUENCE":
    return f"{{ {text} }}"
  return text


def format_node(node: Dict) -> str:
  """Render a term on one line"""
  node_type = node['type']
  children = node['children']

  if node_type == "NUMBER":
    return str(node['value'])
  elif node_type == "BOOLEAN":
    return "true" if node['value'] else "false"
  elif node_type == "DO_NOTHING":
    return "do-nothing"
  elif node_type in BINARY_OPERATORS:
    precedence = PRECEDENCE[node_type]
    left = _format_operand(children[0], precedence, right=False)
    right = _format_operand(children[1], precedence, right=True)
    return f"{left} {BINARY_OPERATORS[node_type]} {right}"
  elif node_type == "VARIABLE":
    return node['value']
  elif node_type == "ASSIGN":
    return f"{node['value']} := {format_node(children[0])}"
  elif node_type == "IF":
    condition, consequence, alternative = children
    return f"if ({format_node(condition)}) {_format_body(consequence)} else {_format_body(alternative)}"
  elif node_type == "SEQUENCE":
    return "; ".join(format_node(statement) for statement in sequence_statements(node))
  elif node_type == "WHILE":
    return f"while ({format_node(children[0])}) {_format_body(children[1])}"
  elif node_type == "PAIR":
    return f"pair ({format_node(children[0])}, {format_node(children[1])})"
  elif node_type == "FST":
    return f"fst ({format_node(children[0])})"
  elif node_type == "SND":
    return f"snd ({format_node(children[0])})"
  elif node_type == "IS_DO_NOTHING":
    return f"is-do-nothing ({format_node(children[0])})"
  elif node_type == "FUN":
    name = fun_name(node)
    header = f"function {name} " if name else "function "
    return f"{header}({fun_param(node)}) {_format_body(fun_body(node))}"
  elif node_type == "CLOSURE":
    return f"closure ({format_node(closure_fun(node))})"
  elif node_type == "CALL":
    callee, arg = children
    callee_text = format_node(callee)
    if callee['type'] not in ("VARIABLE", "CALL"):
      callee_text = f"({callee_text})"
    arg_text = "" if is_do_nothing(arg) else format_node(arg)
    return f"{callee_text} ({arg_text})"
  else:
    return f"<{node_type}>"


def pretty_print_node(node: Dict, indent: int = 0) -> str:
  """Multi-line rendering that also shows the environment captured by closures"""
  if node['type'] == "CLOSURE":
    from environment import pretty_print_env
    prefix = "  " * indent
    return (f"{prefix}closure ({format_node(closure_fun(node))})\n"
            f"{prefix}env {pretty_print_env(closure_env(node), indent + 1).lstrip()}")
  if node['type'] == "SEQUENCE":
    return "\n".join(pretty_print_node(statement, indent) for statement in sequence_statements(node))
  return "  " * indent + format_node(node)
