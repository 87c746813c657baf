"""
Check Command Handler.

Lints a file or directory tree for undisposed resources and renders the
findings as a Rich table or as JSON.
"""

import json
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from performance_lints.config import LintConfig
from performance_lints.core.engine import LintEngine, LintResult
from performance_lints.enums import OutputFormat
from performance_lints.utils.console import console, log_error, log_info, log_success


def collect_files(path: Path, exclude: List[str]) -> List[Path]:
  """
  Expands `path` into the Python files to lint.

  Args:
      path: A file or directory.
      exclude: Directory names to skip anywhere in the tree.

  Returns:
      List[Path]: Sorted file list.
  """
  if path.is_file():
    return [path]
  skipped = set(exclude)
  return sorted(f for f in path.rglob("*.py") if not skipped.intersection(f.relative_to(path).parts[:-1]))


def handle_check(
  path: Path,
  output: OutputFormat = OutputFormat.TEXT,
  method_names: Optional[List[str]] = None,
  known_types: Optional[List[str]] = None,
) -> int:
  """
  Lints every Python file under `path`.

  Args:
      path: Input source file or directory.
      output: TEXT for a table and summary, JSON for machine-readable stdout.
      method_names: Replaces the configured disposal method names.
      known_types: Extends the known disposable type allow-list.

  Returns:
      int: Exit code (0 if clean, 1 if findings or errors).
  """
  if not path.exists():
    log_error(escape(f"Path not found: {path}"))
    return 1

  try:
    config = LintConfig.load(method_names=method_names, extra_known_types=known_types, search_path=path)
    engine = LintEngine(config)
  except ValueError as e:
    log_error(escape(str(e)))
    return 1

  files = collect_files(path, config.exclude)
  json_mode = output == OutputFormat.JSON

  if not json_mode:
    log_info(f"Checking {len(files)} files...")

  results: List[LintResult] = [engine.run_file(f) for f in files]

  for res in results:
    for err in res.errors:
      log_error(escape(err))

  findings = [finding for res in results for finding in res.findings]
  failed = any(not res.success for res in results)

  if json_mode:
    print(json.dumps([f.model_dump() for f in findings], indent=2))
    return 1 if findings or failed else 0

  if findings:
    table = Table(title="Undisposed Resources")
    table.add_column("Location", style="bold blue")
    table.add_column("Rule", style="bold magenta")
    table.add_column("Message")
    table.add_column("Hint", style="dim")
    for f in findings:
      table.add_row(escape(f"{f.path}:{f.line}:{f.column + 1}"), f.rule_id, f.message, f.correction_hint)
    console.print(table)
  elif not failed:
    log_success(f"No undisposed resources found in {len(files)} files.")

  return 1 if findings or failed else 0
