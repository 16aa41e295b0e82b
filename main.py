"""
SIMPLE Programming Language - Main Entry Point
A small imperative language with first-class closures, run big-step or small-step
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from environment import make_environment, pretty_print_env
from error_handling import SimpleParseError, SimpleRuntimeError
from interpreter import evaluate_program
from machine import Machine
from parsing import create_parser, create_debug_parser
from syntax import format_node, is_do_nothing, pretty_print_node


VERSION = "SIMPLE v0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='simple',
      description='SIMPLE Programming Language - imperative core with closures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.simple                # Run a SIMPLE script
  %(prog)s --small-step script.simple   # Run it on the reduction machine
  %(prog)s -i                           # Interactive mode
  %(prog)s --parse script.simple        # Parse and show the term
  %(prog)s --debug script.simple        # Run with evaluation trace
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='SIMPLE script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--small-step',
      action='store_true',
      help='Run with the small-step machine instead of the big-step evaluator'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the term (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def run_program(node: Dict, env: Optional[Dict] = None, small_step: bool = False,
                debug: bool = False):
  """Run a parsed program with the chosen engine, returning (value, environment)"""
  if env is None:
    env = make_environment()
  if small_step:
    machine = Machine(node, env, debug)
    value = machine.run()
    if debug:
      print(f"Reduced in {machine.steps} steps")
    return value, env
  return evaluate_program(node, env, debug)


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a SIMPLE script file and show the term"""
  try:
    parser = create_debug_parser() if debug else create_parser()

    print(f"Parsing {script_path}...")
    node = parser.parse_file(script_path)

    print("=" * 50)
    print(pretty_print_node(node))

  except SimpleParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)


def run_script_file(script_path: str, small_step: bool = False, debug: bool = False) -> None:
  """Run a SIMPLE script file and show its value and final environment"""
  try:
    parser = create_debug_parser() if debug else create_parser()

    if debug:
      print(f"Parsing {script_path}...")
    node = parser.parse_file(script_path)

    value, final_env = run_program(node, small_step=small_step, debug=debug)

    if not is_do_nothing(value):
      print(f"=> {format_node(value)}")
    print("Final environment:")
    print(pretty_print_env(final_env))

  except SimpleParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)
  except SimpleRuntimeError as e:
    print(f"\n{'='*70}")
    print(f"Runtime Error in '{script_path}'")
    print(f"{'='*70}")
    print(f"\nError: {e.message}")
    if e.term is not None and debug:
      print(f"\nTerm:")
      print(pretty_print_node(e.term, 1))
    print(f"\n{'='*70}\n")
    sys.exit(1)
  except RecursionError:
    print(f"Error: Recursion too deep while executing '{script_path}'")
    print(f"  Hint: each SIMPLE call uses Python stack, prefer a while loop over deep recursion")
    sys.exit(1)


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.simple_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = [
      # Keywords
      "if", "else", "while", "function", "true", "false",
      "pair", "fst", "snd", "do-nothing", "is-do-nothing",
      # REPL commands
      ":parse", ":small", ":env", ":help", "exit"
  ]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  # Save history on exit
  import atexit
  atexit.register(readline.write_history_file, history_file)


def print_help() -> None:
  print("REPL Commands:")
  print("  :parse <code>     - Show parsed term")
  print("  :small <code>     - Run code on the small-step machine")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  x := 5                         - Assignment")
  print("  if (x < 3) 1 else 2            - Conditional")
  print("  while (x > 0) x := x - 1       - Loop")
  print("  { a := 1; b := 2 }             - Sequence")
  print("  f := function f (n) n * 2      - Function (name and parameter optional)")
  print("  f(21)                          - Call")
  print("  pair(1, 2), fst(p), snd(p)     - Pairs")


def run_interactive_mode(small_step: bool = False, debug: bool = False) -> None:
  """Run SIMPLE in interactive mode; all input shares one session environment"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  session_env = make_environment()

  while True:
    try:
      code = input("simple> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    command = code.strip()
    if command == "exit":
      break
    if not command:
      continue

    if command == ":help":
      print_help()
      continue

    if command == ":env":
      print("Current environment:")
      print(pretty_print_env(session_env, 1))
      continue

    use_machine = small_step
    if command.startswith(":small "):
      command = command[len(":small "):]
      use_machine = True

    try:
      if command.startswith(":parse "):
        node = parser.parse_string(command[len(":parse "):])
        print(pretty_print_node(node))
        continue

      node = parser.parse_string(command)
      value, session_env = run_program(node, session_env, use_machine, debug)
      if not is_do_nothing(value):
        print(f"=> {format_node(value)}")
    except SimpleParseError as e:
      print(f"Parse error: {e}")
    except SimpleRuntimeError as e:
      print(f"\nRuntime Error:")
      print(f"  {e.message}")
      print()
    except RecursionError:
      print("Runtime Error: recursion too deep")


def main(argv=None) -> None:
  """Main entry point for SIMPLE"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, small_step=args.small_step, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(small_step=args.small_step, debug=args.debug)

  else:
    # No script - start interactive mode
    print("Use 'simple --help' for command line options")
    run_interactive_mode(small_step=args.small_step, debug=args.debug)


if __name__ == "__main__":
  main()
