"""
Local Scope Analyzer.

Finds disposable values bound to local variables inside a single function body
and reports those that are never released in that body.

The scan is a single pass producing a `BlockScan` accumulator:

1.  **Candidates**: local bindings (`t = Timer()`, `t: Timer = Timer()`,
    `a = b = Timer()`, `(t := Timer())`) whose value is a disposable
    instantiation. A later binding of the same name replaces the earlier one.
2.  **Disposed names**: receivers of `<name>.<disposal>()` calls where the
    receiver is a bare identifier.

Nested `def` and `class` statements are separate scopes and contribute no
candidates, but disposal calls inside nested functions and lambdas still count
for the enclosing bindings they close over.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

import libcst as cst

from performance_lints.analysis.classifier import is_disposable
from performance_lints.analysis.type_index import TypeIndex
from performance_lints.config import DEFAULT_VOCABULARY, DisposalVocabulary
from performance_lints.diagnostics import Diagnostic


@dataclass(frozen=True)
class DisposableCandidate:
  """
  A local binding holding a freshly created disposable.
  """

  binding_name: str
  creation_site: cst.Call


@dataclass(frozen=True)
class BlockScan:
  """
  Result of scanning one function body.
  """

  candidates: List[DisposableCandidate]
  disposed: FrozenSet[str]


@dataclass
class _BlockAccumulator:
  candidates: Dict[str, DisposableCandidate] = field(default_factory=dict)
  disposed: Set[str] = field(default_factory=set)


class _LocalDisposableCollector(cst.CSTVisitor):
  """
  Walks one body, filling an accumulator. Not reused across bodies.
  """

  def __init__(self, index: TypeIndex, vocabulary: DisposalVocabulary):
    self.index = index
    self.vocabulary = vocabulary
    self.acc = _BlockAccumulator()
    # >0 while inside a nested function/lambda: only disposal calls are recorded there.
    self._closure_depth = 0

  # --- Scope boundaries ---

  def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
    self._closure_depth += 1
    return True

  def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
    self._closure_depth -= 1

  def visit_Lambda(self, node: cst.Lambda) -> Optional[bool]:
    self._closure_depth += 1
    return True

  def leave_Lambda(self, original_node: cst.Lambda) -> None:
    self._closure_depth -= 1

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    return False

  # --- Declarations ---

  def visit_Assign(self, node: cst.Assign) -> None:
    for target in node.targets:
      self._declare(target.target, node.value)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    if node.value is not None:
      self._declare(node.target, node.value)

  def visit_NamedExpr(self, node: cst.NamedExpr) -> None:
    self._declare(node.target, node.value)

  def _declare(self, target: cst.BaseExpression, value: cst.BaseExpression) -> None:
    if self._closure_depth or not isinstance(target, cst.Name):
      return
    name = target.value
    if name == self.vocabulary.discard_name:
      return
    if not is_disposable(value, self.index, self.vocabulary):
      return
    # Shadowing: the latest binding replaces the earlier one and moves to the end.
    self.acc.candidates.pop(name, None)
    self.acc.candidates[name] = DisposableCandidate(binding_name=name, creation_site=value)

  # --- Disposal calls ---

  def visit_Call(self, node: cst.Call) -> None:
    func = node.func
    if (
      isinstance(func, cst.Attribute)
      and func.attr.value in self.vocabulary.method_names
      and isinstance(func.value, cst.Name)
    ):
      self.acc.disposed.add(func.value.value)


def scan_block(
  func: cst.FunctionDef,
  vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY,
  index: Optional[TypeIndex] = None,
) -> BlockScan:
  """
  Collects candidates and disposed names for the body of `func`.

  Args:
      func: The function, method or constructor whose body is scanned.
      vocabulary: The disposal vocabulary.
      index: Declarations of the enclosing module. An empty index means
          every callee goes through the allow-list fallback.

  Returns:
      BlockScan: The collected candidates (declaration order) and disposed names.
  """
  collector = _LocalDisposableCollector(index or TypeIndex(), vocabulary)
  func.body.visit(collector)
  return BlockScan(
    candidates=list(collector.acc.candidates.values()),
    disposed=frozenset(collector.acc.disposed),
  )


def analyze_block(
  func: cst.FunctionDef,
  vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY,
  index: Optional[TypeIndex] = None,
) -> List[Diagnostic]:
  """
  Reports locally created disposables that the same body never disposes.

  Args:
      func: The function, method or constructor to analyze.
      vocabulary: The disposal vocabulary.
      index: Declarations of the enclosing module.

  Returns:
      List[Diagnostic]: One diagnostic per undisposed binding, anchored at the creation call.
  """
  scan = scan_block(func, vocabulary, index)
  return [Diagnostic.for_code(c.creation_site) for c in scan.candidates if c.binding_name not in scan.disposed]
