"""
Diagnostics and Reporting.

The analyzers emit `Diagnostic` values that point at CST nodes. A
`DiagnosticReporter` turns them into something a host can display; the bundled
`FindingCollector` resolves nodes to line/column coordinates using LibCST's
`PositionProvider` and stores serializable `Finding` records.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Tuple, Union

import libcst as cst
from libcst.metadata import CodeRange
from pydantic import BaseModel, Field

from performance_lints.rules import MISSING_DISPOSE, LintCode

Location = Union[cst.CSTNode, Tuple[int, int]]


@dataclass(frozen=True)
class Diagnostic:
  """
  A finding produced by an analyzer, anchored at a CST node.
  """

  node: cst.CSTNode
  rule_id: str = MISSING_DISPOSE.name
  message: str = MISSING_DISPOSE.problem_message
  correction_hint: str = MISSING_DISPOSE.correction_message

  @classmethod
  def for_code(cls, node: cst.CSTNode, code: LintCode = MISSING_DISPOSE) -> "Diagnostic":
    return cls(
      node=node,
      rule_id=code.name,
      message=code.problem_message,
      correction_hint=code.correction_message,
    )


class Finding(BaseModel):
  """
  A diagnostic resolved to file coordinates (1-based lines, 0-based columns).
  """

  path: str = Field("<string>", description="File the finding belongs to.")
  line: int
  column: int
  end_line: int
  end_column: int
  rule_id: str
  message: str
  correction_hint: str = ""


class DiagnosticReporter(Protocol):
  """
  Sink for diagnostics supplied by the host runtime.
  """

  def report(self, location: Location, rule_id: str, message: str, correction_hint: str) -> None: ...


class FindingCollector:
  """
  Reporter that accumulates `Finding` records for one source unit.

  Attributes:
      findings (List[Finding]): Records in the order they were reported.
  """

  def __init__(self, source: str, positions: Mapping[cst.CSTNode, CodeRange], path: str = "<string>"):
    """
    Args:
        source: The unit's text, used to resolve `(offset, length)` locations.
        positions: Node -> range mapping from `PositionProvider`.
        path: Display path attached to every finding.
    """
    self.source = source
    self.positions = positions
    self.path = path
    self.findings: List[Finding] = []

  def report(self, location: Location, rule_id: str, message: str, correction_hint: str) -> None:
    span = self._resolve(location)
    if span is None:
      return
    (line, column), (end_line, end_column) = span
    self.findings.append(
      Finding(
        path=self.path,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        rule_id=rule_id,
        message=message,
        correction_hint=correction_hint,
      )
    )

  def report_diagnostic(self, diagnostic: Diagnostic) -> None:
    self.report(diagnostic.node, diagnostic.rule_id, diagnostic.message, diagnostic.correction_hint)

  def _resolve(self, location: Location) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    if isinstance(location, tuple):
      offset, length = location
      return self._offset_to_point(offset), self._offset_to_point(offset + length)
    code_range = self.positions.get(location)
    if code_range is None:
      return None
    return (
      (code_range.start.line, code_range.start.column),
      (code_range.end.line, code_range.end.column),
    )

  def _offset_to_point(self, offset: int) -> Tuple[int, int]:
    prefix = self.source[:offset]
    line = prefix.count("\n") + 1
    column = offset - (prefix.rfind("\n") + 1)
    return line, column
