"""
Per-module Type Index.

Python has no static type checker in the lint loop, so "type resolution" means
looking a callee up in the declarations of the module being linted. The
`TypeIndex` records:

1.  **Classes**: every `class` statement, keyed by name (later definitions win).
2.  **Functions**: module-level `def` statements (calls to these are not instantiations).
3.  **Imports**: local alias -> dotted origin, so `Timer` imported from `threading`
    can be matched as `threading.Timer` by the fallback allow-list.
"""

from typing import Dict, Iterator, List, Optional, Set

import libcst as cst

from performance_lints.core.scanners import get_full_name, trailing_name
from performance_lints.enums import Resolution


class TypeIndex(cst.CSTVisitor):
  """
  Collects the declarations of a single module.

  Attributes:
      classes (Dict[str, cst.ClassDef]): Class name -> declaration.
      functions (Set[str]): Names of module-level functions.
      aliases (Dict[str, str]): Local import alias -> fully qualified origin.
  """

  def __init__(self):
    self.classes: Dict[str, cst.ClassDef] = {}
    self.functions: Set[str] = set()
    self.aliases: Dict[str, str] = {}
    self._depth = 0

  @classmethod
  def build(cls, module: cst.Module) -> "TypeIndex":
    """
    Creates an index populated from `module`.

    Args:
        module: The parsed compilation unit.

    Returns:
        TypeIndex: The populated index.
    """
    index = cls()
    module.visit(index)
    return index

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    self.classes[node.name.value] = node
    self._depth += 1

  def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
    self._depth -= 1

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    if self._depth == 0:
      self.functions.add(node.name.value)
    self._depth += 1

  def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
    self._depth -= 1

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      full_name = get_full_name(alias.name)
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self.aliases[alias.asname.name.value] = full_name
      else:
        root = full_name.split(".")[0]
        self.aliases[root] = root

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if not node.module or isinstance(node.names, cst.ImportStar):
      return
    module_name = get_full_name(node.module)
    for alias in node.names:
      import_name = get_full_name(alias.name)
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        local_name = alias.asname.name.value
      else:
        local_name = import_name
      self.aliases[local_name] = f"{module_name}.{import_name}"

  def resolve(self, callee: cst.BaseExpression) -> Resolution:
    """
    Classifies a callee as a local class, a local function, or unresolved.

    Only bare names can resolve; dotted callees always come from elsewhere.

    Args:
        callee: The `func` of a `cst.Call`.

    Returns:
        Resolution: The lookup outcome.
    """
    if isinstance(callee, cst.Name):
      if callee.value in self.classes:
        return Resolution.CLASS
      if callee.value in self.functions:
        return Resolution.FUNCTION
    return Resolution.UNRESOLVED

  def qualified_name(self, expr: cst.BaseExpression) -> str:
    """
    Expands the root of a dotted name through the import aliases.

    Args:
        expr: A Name or Attribute chain (e.g. `th.Timer` with `import threading as th`).

    Returns:
        str: The qualified name (e.g. "threading.Timer"), or the raw name if no alias applies.
    """
    raw = get_full_name(expr)
    if not raw:
      return ""
    root, _, rest = raw.partition(".")
    if root in self.aliases:
      resolved = self.aliases[root]
      return f"{resolved}.{rest}" if rest else resolved
    return raw

  def lookup_class(self, name: str) -> Optional[cst.ClassDef]:
    return self.classes.get(name)

  def iter_supertypes(self, class_def: cst.ClassDef) -> Iterator[cst.BaseExpression]:
    """
    Yields the base-class expressions of `class_def`, transitively.

    Bases declared in this module are expanded; others are yielded as-is.
    Cycles (`class A(B)` / `class B(A)`) terminate.

    Args:
        class_def: The class to walk.

    Yields:
        cst.BaseExpression: Each base expression, nearest first.
    """
    seen: Set[str] = {class_def.name.value}
    queue: List[cst.ClassDef] = [class_def]
    while queue:
      current = queue.pop(0)
      for arg in current.bases:
        if arg.keyword is not None:
          continue
        base = arg.value
        # State[MyWidget] -> State
        if isinstance(base, cst.Subscript):
          base = base.value
        yield base
        name = trailing_name(base)
        parent = self.classes.get(name) if isinstance(base, cst.Name) else None
        if parent is not None and name not in seen:
          seen.add(name)
          queue.append(parent)

  def supertype_names(self, class_def: cst.ClassDef) -> Set[str]:
    """
    Trailing names of every transitive supertype (`State` for `widgets.State`).
    """
    return {trailing_name(base) for base in self.iter_supertypes(class_def)} - {""}
