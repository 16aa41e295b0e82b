"""
SIMPLE abstract machine - drives the small-step reducer to a normal form
"""

from typing import Dict, Optional

from environment import env_snapshot, make_environment, pretty_print_env
from reduce import reduce, reducible
from syntax import format_node


class Machine:
  """Owns one current term and one environment, and rewrites the term until it is a value"""

  def __init__(self, expression: Dict, environment: Optional[Dict] = None, debug: bool = False):
    self.expression = expression
    self.environment = environment if environment is not None else make_environment()
    self.debug = debug
    self.steps = 0

  def step(self) -> Dict:
    """Apply a single reduction and return the new current term"""
    self.expression = reduce(self.expression, self.environment, self.debug)
    self.steps += 1
    if self.debug:
      self._trace()
    return self.expression

  def run(self) -> Dict:
    """Reduce until a normal form is reached. A non-terminating program never returns."""
    if self.debug:
      self._trace()
    while reducible(self.expression):
      self.step()
    return self.expression

  def get_expression(self) -> Dict:
    return self.expression

  def get_environment(self) -> Dict:
    return env_snapshot(self.environment)

  def _trace(self) -> None:
    print(f"{format_node(self.expression)}, {pretty_print_env(self.environment)}")
