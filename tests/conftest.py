"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers to parse snippets and locate the nodes under test.
- Console isolation so tests capturing Rich output do not leak into each other.
"""

import io
import sys
from pathlib import Path

import libcst as cst
import pytest
from rich.console import Console

# Add src to path so we can import 'performance_lints' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from performance_lints.analysis.type_index import TypeIndex  # noqa: E402
from performance_lints.utils.console import reset_console, set_console  # noqa: E402


class ParsedSnippet:
  """
  A parsed module plus its Type Index, with lookups by declaration name.
  """

  def __init__(self, code: str):
    self.module = cst.parse_module(code)
    self.index = TypeIndex.build(self.module)

  def function(self, name: str) -> cst.FunctionDef:
    """Finds a function or method by name anywhere in the module."""
    found = []

    class _Finder(cst.CSTVisitor):
      def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
        if node.name.value == name:
          found.append(node)

    self.module.visit(_Finder())
    assert found, f"No function named {name}"
    return found[0]

  def klass(self, name: str) -> cst.ClassDef:
    """Finds a class by name."""
    node = self.index.lookup_class(name)
    assert node is not None, f"No class named {name}"
    return node


@pytest.fixture
def parse():
  """Fixture returning a parser for code snippets."""
  return ParsedSnippet


@pytest.fixture
def captured_console():
  """
  Redirects the global console (and logging) into a buffer for the test.
  """
  buffer = io.StringIO()
  set_console(Console(file=buffer, width=400, force_terminal=False))
  yield buffer
  reset_console()
