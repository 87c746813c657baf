"""
performance-lints Package.

A static-analysis pass that finds disposable resources (timers, subscriptions,
controllers, sockets) that are created but never released before their owning
scope ends.

Usage
-----

.. code-block:: python

    import textwrap

    import performance_lints as pl

    code = textwrap.dedent('''
        def start():
            t = Timer(1.0, tick)
            t.start()
    ''')
    for finding in pl.lint_source(code):
        print(finding.line, finding.rule_id)
    # 3 missing_dispose
"""

from typing import List, Optional

from performance_lints.config import DEFAULT_VOCABULARY, DisposalVocabulary, LintConfig
from performance_lints.core.engine import LintEngine, LintResult
from performance_lints.diagnostics import Diagnostic, Finding

__version__ = "0.1.0"


def lint_source(code: str, vocabulary: Optional[DisposalVocabulary] = None) -> List[Finding]:
  """
  Lints a string of Python source for undisposed resources.

  Args:
      code (str): The source code to check.
      vocabulary (DisposalVocabulary, optional): Custom disposal names. When
          omitted the built-in defaults apply and no pyproject.toml is read.

  Returns:
      List[Finding]: Findings in traversal order.

  Raises:
      ValueError: If the code cannot be parsed.
  """
  engine = LintEngine(vocabulary=vocabulary)
  result = engine.run(code)

  if not result.success:
    raise ValueError("\n".join(result.errors))

  return result.findings


__all__ = [
  "DEFAULT_VOCABULARY",
  "Diagnostic",
  "DisposalVocabulary",
  "Finding",
  "LintConfig",
  "LintEngine",
  "LintResult",
  "lint_source",
  "__version__",
]
