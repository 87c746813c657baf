"""
Tests for the per-module TypeIndex.
"""

import libcst as cst

from performance_lints.analysis.type_index import TypeIndex
from performance_lints.enums import Resolution


def test_collects_classes_functions_and_aliases():
  code = """
import os.path
import threading as th
from socket import socket, create_connection as connect

class Pool:
    def helper(self):
        pass

def factory():
    def inner():
        pass
"""
  index = TypeIndex.build(cst.parse_module(code))

  assert set(index.classes) == {"Pool"}
  assert index.functions == {"factory"}
  assert index.aliases == {
    "os": "os",
    "th": "threading",
    "socket": "socket.socket",
    "connect": "socket.create_connection",
  }


def test_resolve():
  code = """
class Pool:
    pass

def factory():
    pass
"""
  index = TypeIndex.build(cst.parse_module(code))
  assert index.resolve(cst.parse_expression("Pool")) == Resolution.CLASS
  assert index.resolve(cst.parse_expression("factory")) == Resolution.FUNCTION
  assert index.resolve(cst.parse_expression("Timer")) == Resolution.UNRESOLVED
  assert index.resolve(cst.parse_expression("mod.Pool")) == Resolution.UNRESOLVED


def test_qualified_name():
  code = "import threading as th\n"
  index = TypeIndex.build(cst.parse_module(code))
  assert index.qualified_name(cst.parse_expression("th.Timer")) == "threading.Timer"
  assert index.qualified_name(cst.parse_expression("other.Timer")) == "other.Timer"
  assert index.qualified_name(cst.parse_expression("f()")) == ""


def test_supertype_names_are_transitive():
  code = """
class Base(State, Generic[T]):
    pass

class Mid(Base):
    pass

class Leaf(Mid, metaclass=Meta):
    pass
"""
  index = TypeIndex.build(cst.parse_module(code))
  assert index.supertype_names(index.classes["Leaf"]) == {"Mid", "Base", "State", "Generic"}


def test_later_class_definition_wins():
  code = """
class Pool:
    pass

class Pool(Base):
    pass
"""
  index = TypeIndex.build(cst.parse_module(code))
  assert index.supertype_names(index.classes["Pool"]) == {"Base"}
