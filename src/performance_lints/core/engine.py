"""
Orchestration Engine for lint runs.

The `LintEngine` drives a single compilation unit through the pipeline:

1.  **Parsing**: source text -> LibCST module. Syntax errors are captured in the
    result rather than raised.
2.  **Metadata**: the module is wrapped in a `MetadataWrapper` so that
    `PositionProvider` can map nodes to line/column ranges.
3.  **Analysis**: every registered rule visits the wrapped module.
4.  **Reporting**: diagnostics flow into a `FindingCollector`.
"""

import logging
from pathlib import Path
from typing import List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider
from pydantic import BaseModel, Field

from performance_lints.config import DisposalVocabulary, LintConfig
from performance_lints.diagnostics import Finding, FindingCollector
from performance_lints.rules import get_lint_rules

logger = logging.getLogger(__name__)


class LintResult(BaseModel):
  """
  Structured result of linting one unit.
  """

  path: str = Field(default="<string>", description="Display path of the unit.")
  findings: List[Finding] = Field(default_factory=list, description="Diagnostics resolved to coordinates.")
  errors: List[str] = Field(default_factory=list, description="Parse or read errors.")
  success: bool = Field(default=True, description="False when the unit could not be analyzed.")

  @property
  def has_findings(self) -> bool:
    """
    Returns True if any diagnostic was reported.

    Returns:
        bool: True if findings list is non-empty.
    """
    return len(self.findings) > 0


class LintEngine:
  """
  Lints source units with the rules produced by `get_lint_rules`.

  The engine keeps no per-unit state between calls.
  """

  def __init__(self, config: Optional[LintConfig] = None, vocabulary: Optional[DisposalVocabulary] = None):
    """
    Args:
        config (LintConfig, optional): Resolved configuration. Defaults apply when None.
        vocabulary (DisposalVocabulary, optional): Overrides the vocabulary derived from `config`.
    """
    self.config = config or LintConfig()
    self.vocabulary = vocabulary if vocabulary is not None else self.config.vocabulary()

  def run(self, code: str, path: str = "<string>") -> LintResult:
    """
    Lints a source string.

    Args:
        code: Python source text.
        path: Display path attached to findings.

    Returns:
        LintResult: Findings, or the parse error with `success=False`.
    """
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      logger.debug(f"Parse failure in {path}: {e}")
      return LintResult(path=path, errors=[f"Syntax error in {path}: {e.message} (line {e.raw_line})"], success=False)

    wrapper = MetadataWrapper(module)
    positions = wrapper.resolve(PositionProvider)
    collector = FindingCollector(code, positions, path=path)

    for rule in get_lint_rules(vocabulary=self.vocabulary):
      rule.run(wrapper.module, collector)

    logger.debug(f"{path}: {len(collector.findings)} finding(s)")
    return LintResult(path=path, findings=collector.findings)

  def run_file(self, file_path: Path) -> LintResult:
    """
    Reads and lints a file.

    Args:
        file_path: Path to a Python source file.

    Returns:
        LintResult: As for `run`; unreadable files produce an error result.
    """
    try:
      code = file_path.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
      return LintResult(path=str(file_path), errors=[f"Could not read {file_path}: {e}"], success=False)
    return self.run(code, path=str(file_path))
