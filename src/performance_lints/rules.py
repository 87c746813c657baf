"""
Lint Rule Registry.

Declares the lint codes shipped by this package and the entry point a host
runtime calls to obtain them.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from performance_lints.config import DisposalVocabulary, LintConfig


class LintCode(BaseModel):
  """
  Identity and fixed wording of a lint rule.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Stable rule identifier reported with each finding.")
  problem_message: str = Field(..., description="What is wrong.")
  correction_message: str = Field(..., description="How to fix it.")
  url: Optional[str] = Field(None, description="Documentation link for the rule.")


MISSING_DISPOSE = LintCode(
  name="missing_dispose",
  problem_message="Disposable object is created but dispose() is never called in this scope.",
  correction_message="Call dispose() (or close()/cancel()) before the owning scope ends.",
  url="https://github.com/performance-lints/performance-lints#missing_dispose",
)


def get_lint_rules(
  config: Optional[LintConfig] = None,
  vocabulary: Optional[DisposalVocabulary] = None,
) -> List["MissingDisposeRule"]:
  """
  Plugin entry point: instantiates every rule for a run.

  Args:
      config: Resolved configuration. Defaults are used when omitted.
      vocabulary: Explicit vocabulary; takes precedence over `config`.

  Returns:
      List of rule visitors sharing one immutable vocabulary.
  """
  from performance_lints.analysis.missing_dispose import MissingDisposeRule

  if vocabulary is None:
    vocabulary = (config or LintConfig()).vocabulary()
  return [MissingDisposeRule(vocabulary)]
