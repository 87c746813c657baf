"""
Main Entry Point for performance-lints CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `performance_lints.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from performance_lints import __version__
from performance_lints.cli import handlers
from performance_lints.enums import OutputFormat


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="performance-lints: find resources that are never disposed")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Lint a Python file or directory")
  cmd_check.add_argument("path", type=Path, help="Input source file or directory")
  cmd_check.add_argument("--json", action="store_true", help="Print findings as JSON to stdout")
  cmd_check.add_argument(
    "--method",
    dest="methods",
    action="append",
    default=None,
    help="Disposal method name (repeatable). Replaces the configured names.",
  )
  cmd_check.add_argument(
    "--known-type",
    dest="known_types",
    action="append",
    default=None,
    help="Additional disposable type name for unresolved callees (repeatable).",
  )

  args = parser.parse_args(argv)

  if args.command == "check":
    output = OutputFormat.JSON if args.json else OutputFormat.TEXT
    return handlers.handle_check(args.path, output, args.methods, args.known_types)

  return 0


if __name__ == "__main__":
  sys.exit(main())
