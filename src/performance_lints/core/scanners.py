"""
CST helpers for flattening names and recognising receivers.

These helpers are shared by the classifier and both analyzers so that every pass
agrees on what counts as "the name" of a dotted expression.
"""

from typing import Optional, Union

import libcst as cst


def get_full_name(node: Union[cst.Name, cst.Attribute, cst.BaseExpression]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.
      Typically a `cst.Name` (e.g., `x`) or `cst.Attribute` (e.g., `x.y`).

  Returns:
    str: The dotted representation (e.g., "threading.Timer").
    Returns an empty string if any segment is not a Name/Attribute.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("threading"), attr=cst.Name("Timer")))
    'threading.Timer'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    prefix = get_full_name(node.value)
    if not prefix:
      return ""
    return f"{prefix}.{node.attr.value}"
  return ""


def trailing_name(node: cst.BaseExpression) -> str:
  """
  Returns the last segment of a dotted name (`Timer` for `threading.Timer`).

  Args:
    node: A callee or type expression.

  Returns:
    str: The trailing identifier, or "" when the expression is not a dotted name.
  """
  full = get_full_name(node)
  return full.rsplit(".", 1)[-1] if full else ""


def first_param_name(func: cst.FunctionDef) -> Optional[str]:
  """
  Name of the first positional parameter (the receiver, usually `self`).
  """
  params = [*func.params.posonly_params, *func.params.params]
  if not params:
    return None
  return params[0].name.value


def is_super_call(node: cst.BaseExpression) -> bool:
  """
  Detects `super()` and `super(Cls, self)`.
  """
  return isinstance(node, cst.Call) and isinstance(node.func, cst.Name) and node.func.value == "super"


def decorator_names(func: cst.FunctionDef) -> set:
  """
  Collects the trailing names of a function's decorators (e.g. {'staticmethod'}).
  """
  names = set()
  for deco in func.decorators:
    expr = deco.decorator
    if isinstance(expr, cst.Call):
      expr = expr.func
    name = trailing_name(expr)
    if name:
      names.add(name)
  return names


def is_zero_parameter_method(func: cst.FunctionDef) -> bool:
  """
  True when a method takes no parameters besides its receiver.

  Static and class methods never qualify.

  Args:
    func: The method definition.

  Returns:
    bool: True for `def close(self): ...`.
  """
  if decorator_names(func) & {"staticmethod", "classmethod"}:
    return False
  params = func.params
  positional = [*params.posonly_params, *params.params]
  if len(positional) != 1:
    return False
  if isinstance(params.star_arg, cst.Param) or params.kwonly_params or params.star_kwarg:
    return False
  return True
