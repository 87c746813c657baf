"""
Enumerations for performance-lints.

This module defines the enumerations shared by the analysis passes and the
reporting layer.
"""

from enum import Enum


class ReceiverForm(str, Enum):
  """
  Syntactic shape of the receiver of a disposal call (e.g. the `x` in `x.close()`).

  Used by the Class Field Analyzer to decide which field a disposal method releases.
  """

  IDENTIFIER = "identifier"  # x.close()
  PROPERTY_ACCESS = "property_access"  # self.x.close(), self.a.x.close()
  QUALIFIED = "qualified"  # Owner.x.close()
  SUPER = "super"  # super().dispose()


class Resolution(str, Enum):
  """
  Outcome of resolving an instantiated callee against the module's declarations.
  """

  CLASS = "class"  # Declared as a class in this module
  FUNCTION = "function"  # Declared as a plain function in this module
  UNRESOLVED = "unresolved"  # Imported, builtin, or otherwise unknown


class OutputFormat(str, Enum):
  """
  Rendering modes supported by the `check` command.
  """

  TEXT = "text"
  JSON = "json"
