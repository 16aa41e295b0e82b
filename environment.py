"""
SIMPLE runtime environment
A flat, mutable name -> term mapping. Closures own deep snapshots, never live references.
"""

import copy
from typing import Dict, List, Optional

from error_handling import UnboundVariable
from syntax import format_node


def make_environment(bindings: Optional[Dict[str, Dict]] = None) -> Dict:
  """Create an environment, optionally pre-populated with name -> term pairs"""
  return {
      'bindings': dict(bindings or {})
  }


def env_get(env: Dict, name: str) -> Dict:
  """Look up a name, failing with UnboundVariable if it was never bound"""
  try:
    return env['bindings'][name]
  except KeyError:
    raise UnboundVariable(name) from None


def env_add(env: Dict, name: str, value: Dict) -> None:
  """Bind or rebind name in place"""
  env['bindings'][name] = value


def env_contains(env: Dict, name: str) -> bool:
  return name in env['bindings']


def env_names(env: Dict) -> List[str]:
  return sorted(env['bindings'])


def env_snapshot(env: Dict) -> Dict:
  """Deep, independent copy used for closure capture"""
  return copy.deepcopy(env)


def pretty_print_env(env: Dict, indent: int = 0) -> str:
  prefix = "  " * indent
  lines = [f"{prefix}{{"]
  for name in env_names(env):
    lines.append(f"{prefix}  {name} = {format_node(env['bindings'][name])}")
  lines.append(f"{prefix}}}")
  return "\n".join(lines)
