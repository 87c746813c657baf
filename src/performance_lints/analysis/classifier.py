"""
Disposable Type Classifier.

Decides whether a constructed value must be released explicitly. Two paths are
kept deliberately separate:

1.  **Resolved**: the callee names a class declared in the module. The class is
    disposable when it, or a base reachable through the module, declares a public
    zero-parameter instance method named in the vocabulary.
2.  **Fallback**: the callee cannot be resolved (imported, builtin, dynamic). The
    syntactic type name (`Timer`) or its import-qualified form (`threading.Timer`)
    is matched against the known-type allow-list.

When neither path applies the value is treated as non-disposable. Guessing is never
allowed to produce a diagnostic.
"""

from typing import List, Optional

import libcst as cst

from performance_lints.analysis.type_index import TypeIndex
from performance_lints.config import DisposalVocabulary
from performance_lints.core.scanners import get_full_name, is_zero_parameter_method, trailing_name
from performance_lints.enums import Resolution


def instantiation_callee(expr: Optional[cst.BaseExpression]) -> Optional[cst.BaseExpression]:
  """
  Returns the callee of a direct type instantiation (`Foo()` / `mod.Foo()`).

  Args:
      expr: An initializer or right-hand side, possibly None.

  Returns:
      The callee expression, or None if `expr` is not a call of a dotted name.
  """
  if not isinstance(expr, cst.Call):
    return None
  if not get_full_name(expr.func):
    return None
  return expr.func


def declares_disposal_method(class_def: cst.ClassDef, vocabulary: DisposalVocabulary) -> bool:
  """
  Checks the class body itself (not bases) for a disposal method.

  Args:
      class_def: The class declaration.
      vocabulary: Names accepted as disposal methods.

  Returns:
      bool: True if a public zero-parameter instance method matches.
  """
  return bool(find_disposal_methods(class_def, vocabulary))


def find_disposal_methods(class_def: cst.ClassDef, vocabulary: DisposalVocabulary) -> List[cst.FunctionDef]:
  """
  Lists every disposal method declared directly on `class_def`.

  A class may declare several (`cancel` and `dispose`); callers treat them together.

  Args:
      class_def: The class declaration.
      vocabulary: Names accepted as disposal methods.

  Returns:
      List[cst.FunctionDef]: Matching methods in declaration order.
  """
  body = class_def.body
  if not isinstance(body, cst.IndentedBlock):
    return []
  methods = []
  for stmt in body.body:
    if not isinstance(stmt, cst.FunctionDef):
      continue
    name = stmt.name.value
    if name in vocabulary.method_names and not name.startswith("_") and is_zero_parameter_method(stmt):
      methods.append(stmt)
  return methods


def class_is_disposable(class_def: cst.ClassDef, index: TypeIndex, vocabulary: DisposalVocabulary) -> bool:
  """
  Resolved-path check: own or inherited disposal method.

  Bases outside the module are accepted when their name is on the allow-list,
  standing in for the inherited method we cannot see.

  Args:
      class_def: The resolved class.
      index: The module's declarations.
      vocabulary: The disposal vocabulary.

  Returns:
      bool: True if instances of the class need disposal.
  """
  if declares_disposal_method(class_def, vocabulary):
    return True

  for base in index.iter_supertypes(class_def):
    local = index.lookup_class(base.value) if isinstance(base, cst.Name) else None
    if local is not None:
      if declares_disposal_method(local, vocabulary):
        return True
    elif _matches_known_type(base, index, vocabulary):
      return True
  return False


def is_disposable(
  expr: Optional[cst.BaseExpression],
  index: TypeIndex,
  vocabulary: DisposalVocabulary,
) -> bool:
  """
  Classifies an expression as a disposable instantiation.

  Args:
      expr: The candidate value (usually an initializer).
      index: The module's declarations.
      vocabulary: The disposal vocabulary.

  Returns:
      bool: True when `expr` constructs a value that must be disposed.
  """
  callee = instantiation_callee(expr)
  if callee is None:
    return False

  resolution = index.resolve(callee)
  if resolution == Resolution.CLASS:
    return class_is_disposable(index.classes[callee.value], index, vocabulary)
  if resolution == Resolution.FUNCTION:
    return False
  return _matches_known_type(callee, index, vocabulary)


def _matches_known_type(expr: cst.BaseExpression, index: TypeIndex, vocabulary: DisposalVocabulary) -> bool:
  known = vocabulary.known_type_names
  simple = trailing_name(expr)
  if simple and simple in known:
    return True
  qualified = index.qualified_name(expr)
  return bool(qualified) and qualified in known
