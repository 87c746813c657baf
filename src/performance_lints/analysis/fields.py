"""
Class Field Analyzer.

Tracks disposable values stored on a class and checks that the class's own
disposal method releases each of them.

A field is tracked when:

1.  It is declared at class level with a disposable initializer (`c = StreamController()`).
2.  It is first assigned a disposable in a constructor or initialization hook
    (`self.c = StreamController()`), which is how Python declares instance attributes.
3.  It was declared without a disposable value (`c: StreamController`, `self.c = None`)
    and a constructor or initialization hook later assigns it a disposable.
    These fields are "promoted" and carry no declaration site.

Disposal is credited when the class's zero-parameter disposal method calls a
disposal method on the field as `c.close()`, `self.c.close()` or `Owner.c.close()`.
A bare `super().dispose()` releases the superclass's resources only.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

import libcst as cst

from performance_lints.analysis.classifier import find_disposal_methods, is_disposable
from performance_lints.analysis.type_index import TypeIndex
from performance_lints.config import DEFAULT_VOCABULARY, DisposalVocabulary
from performance_lints.core.scanners import first_param_name, is_super_call
from performance_lints.diagnostics import Diagnostic
from performance_lints.enums import ReceiverForm

CONSTRUCTOR_NAMES = ("__init__", "__post_init__")


@dataclass(frozen=True)
class TrackedField:
  """
  A class field known to hold a disposable.

  Attributes:
      field_name: The attribute name.
      name_node: Name token of the field's declaration; diagnostics anchor here.
      declaration_site: The declaring statement, or None for promoted fields.
  """

  field_name: str
  name_node: cst.Name
  declaration_site: Optional[cst.CSTNode] = None


@dataclass(frozen=True)
class DisposalReceiver:
  """
  The receiver of one disposal call found inside a disposal method.
  """

  form: ReceiverForm
  name: Optional[str] = None


def is_lifecycle_class(class_def: cst.ClassDef, index: TypeIndex, vocabulary: DisposalVocabulary) -> bool:
  """
  True when any transitive supertype is a recognised lifecycle base (e.g. `State`).
  """
  return bool(index.supertype_names(class_def) & vocabulary.lifecycle_base_type_names)


class _SelfAssignmentScanner(cst.CSTVisitor):
  """
  Collects `self.<attr> = <value>` assignments of one method body, in order.
  """

  def __init__(self, receiver: str):
    self.receiver = receiver
    self.assignments: List[Tuple[cst.Name, cst.BaseExpression]] = []

  def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
    return False

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    return False

  def visit_Assign(self, node: cst.Assign) -> None:
    for target in node.targets:
      self._record(target.target, node.value)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    if node.value is not None:
      self._record(node.target, node.value)

  def _record(self, target: cst.BaseExpression, value: cst.BaseExpression) -> None:
    if (
      isinstance(target, cst.Attribute)
      and isinstance(target.value, cst.Name)
      and target.value.value == self.receiver
    ):
      self.assignments.append((target.attr, value))


class _DisposalReceiverCollector(cst.CSTVisitor):
  """
  Records the receiver of every disposal call inside a disposal method.
  """

  def __init__(self, vocabulary: DisposalVocabulary, receiver: Optional[str], out: List[DisposalReceiver]):
    self.vocabulary = vocabulary
    self.receiver = receiver
    self.out = out

  def visit_Call(self, node: cst.Call) -> None:
    func = node.func
    if not isinstance(func, cst.Attribute) or func.attr.value not in self.vocabulary.method_names:
      return
    target = func.value
    if isinstance(target, cst.Name):
      self.out.append(DisposalReceiver(ReceiverForm.IDENTIFIER, target.value))
    elif isinstance(target, cst.Attribute):
      owner = target.value
      if isinstance(owner, cst.Name) and owner.value != self.receiver:
        self.out.append(DisposalReceiver(ReceiverForm.QUALIFIED, target.attr.value))
      else:
        self.out.append(DisposalReceiver(ReceiverForm.PROPERTY_ACCESS, target.attr.value))
    elif is_super_call(target):
      self.out.append(DisposalReceiver(ReceiverForm.SUPER))


def _class_level_statements(class_def: cst.ClassDef) -> Iterator[cst.BaseSmallStatement]:
  body = class_def.body
  if isinstance(body, cst.SimpleStatementSuite):
    # class Foo(State): c = StreamController()
    yield from body.body
    return
  for member in body.body:
    if isinstance(member, cst.SimpleStatementLine):
      yield from member.body


def _initialization_methods(class_def: cst.ClassDef, vocabulary: DisposalVocabulary) -> List[cst.FunctionDef]:
  # Constructors first so their assignments count as declarations before any hook.
  body = class_def.body
  if not isinstance(body, cst.IndentedBlock):
    return []
  methods = [m for m in body.body if isinstance(m, cst.FunctionDef)]
  constructors = [m for m in methods if m.name.value in CONSTRUCTOR_NAMES]
  hooks = [m for m in methods if m.name.value in vocabulary.init_hook_names]
  return constructors + hooks


def collect_tracked_fields(
  class_def: cst.ClassDef,
  vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY,
  index: Optional[TypeIndex] = None,
) -> Dict[str, TrackedField]:
  """
  Determines which fields of `class_def` hold disposables.

  Args:
      class_def: The class declaration.
      vocabulary: The disposal vocabulary.
      index: Declarations of the enclosing module.

  Returns:
      Dict[str, TrackedField]: Tracked fields keyed by name, in discovery order.
  """
  index = index or TypeIndex()
  tracked: Dict[str, TrackedField] = {}
  undecided: Dict[str, cst.Name] = {}

  def declare(name_node: cst.Name, value: Optional[cst.BaseExpression], site: cst.CSTNode) -> None:
    name = name_node.value
    tracked.pop(name, None)
    undecided.pop(name, None)
    if value is not None and is_disposable(value, index, vocabulary):
      tracked[name] = TrackedField(field_name=name, name_node=name_node, declaration_site=site)
    else:
      undecided[name] = name_node

  # 1. Class-level declarations
  for small in _class_level_statements(class_def):
    if isinstance(small, cst.Assign):
      for target in small.targets:
        if isinstance(target.target, cst.Name):
          declare(target.target, small.value, small)
    elif isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
      declare(small.target, small.value, small)

  # 2. Assignments in constructors and initialization hooks
  declared: Set[str] = set(tracked) | set(undecided)
  for method in _initialization_methods(class_def, vocabulary):
    receiver = first_param_name(method)
    if receiver is None:
      continue
    scanner = _SelfAssignmentScanner(receiver)
    method.body.visit(scanner)
    for attr, value in scanner.assignments:
      name = attr.value
      if name not in declared:
        # First assignment of an undeclared attribute is its declaration.
        declared.add(name)
        declare(attr, value, attr)
      elif name in undecided and is_disposable(value, index, vocabulary):
        tracked[name] = TrackedField(field_name=name, name_node=undecided.pop(name))

  return tracked


def collect_disposal_receivers(
  method: cst.FunctionDef,
  vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY,
) -> List[DisposalReceiver]:
  """
  Lists the receivers of every disposal call in `method`, statement by statement.

  Args:
      method: The class's disposal method.
      vocabulary: The disposal vocabulary.

  Returns:
      List[DisposalReceiver]: Receivers in source order, including superclass calls.
  """
  receivers: List[DisposalReceiver] = []
  collector = _DisposalReceiverCollector(vocabulary, first_param_name(method), receivers)
  body = method.body
  for stmt in body.body:
    stmt.visit(collector)
  return receivers


def analyze_class(
  class_def: cst.ClassDef,
  vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY,
  index: Optional[TypeIndex] = None,
) -> List[Diagnostic]:
  """
  Reports disposable fields that the class never releases.

  Args:
      class_def: The class declaration.
      vocabulary: The disposal vocabulary.
      index: Declarations of the enclosing module.

  Returns:
      List[Diagnostic]: One diagnostic per unreleased field, anchored at the field name.
  """
  index = index or TypeIndex()
  lifecycle = is_lifecycle_class(class_def, index, vocabulary)

  tracked = collect_tracked_fields(class_def, vocabulary, index)
  if not tracked:
    return []

  disposal_methods = find_disposal_methods(class_def, vocabulary)
  if not disposal_methods:
    if not lifecycle:
      return []
    return [Diagnostic.for_code(f.name_node) for f in tracked.values()]

  # Every disposal method counts. Superclass calls release nothing declared here.
  released = {
    r.name
    for method in disposal_methods
    for r in collect_disposal_receivers(method, vocabulary)
    if r.form != ReceiverForm.SUPER
  }
  return [Diagnostic.for_code(f.name_node) for f in tracked.values() if f.field_name not in released]
