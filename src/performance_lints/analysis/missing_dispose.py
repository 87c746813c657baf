"""
The `missing_dispose` lint rule.

Registers the two analyzers against the constructs they inspect: every function
body (plain functions, constructors and methods alike) goes to the Local Scope
Analyzer, and every class declaration goes to the Class Field Analyzer. Each
invocation is independent; nothing is shared between them except the vocabulary.
"""

from typing import List, Optional

import libcst as cst

from performance_lints.analysis.fields import analyze_class
from performance_lints.analysis.scope import analyze_block
from performance_lints.analysis.type_index import TypeIndex
from performance_lints.config import DEFAULT_VOCABULARY, DisposalVocabulary
from performance_lints.diagnostics import Diagnostic, DiagnosticReporter
from performance_lints.rules import MISSING_DISPOSE


class MissingDisposeRule(cst.CSTVisitor):
  """
  Visitor dispatching function bodies and classes to the lifecycle analyzers.

  Attributes:
      code: The lint code this rule reports under.
      vocabulary: The disposal vocabulary in effect.
      diagnostics: Findings of the most recent `run`, in traversal order.
  """

  code = MISSING_DISPOSE

  def __init__(self, vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY):
    self.vocabulary = vocabulary
    self.diagnostics: List[Diagnostic] = []
    self._index = TypeIndex()

  def run(self, module: cst.Module, reporter: Optional[DiagnosticReporter] = None) -> List[Diagnostic]:
    """
    Analyzes one compilation unit.

    Args:
        module: The parsed unit. Pass `MetadataWrapper.module` when the reporter
            resolves positions, so node identities line up.
        reporter: Optional sink receiving each diagnostic.

    Returns:
        List[Diagnostic]: All diagnostics for the unit.
    """
    self.diagnostics = []
    self._index = TypeIndex.build(module)
    module.visit(self)

    if reporter is not None:
      for diag in self.diagnostics:
        reporter.report(diag.node, diag.rule_id, diag.message, diag.correction_hint)
    return self.diagnostics

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    self.diagnostics.extend(analyze_block(node, self.vocabulary, self._index))

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    self.diagnostics.extend(analyze_class(node, self.vocabulary, self._index))
