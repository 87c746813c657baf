"""
Runtime Configuration Store.

Defines the `DisposalVocabulary` consumed by every analysis entry point and the
`LintConfig` loader that builds it from `pyproject.toml` plus CLI overrides.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from rich.markup import escape

from performance_lints.utils.console import log_warning

DEFAULT_METHOD_NAMES: FrozenSet[str] = frozenset({"dispose", "close", "cancel"})

# Types treated as disposable when the instantiated name cannot be resolved in the module.
DEFAULT_KNOWN_TYPE_NAMES: FrozenSet[str] = frozenset(
  {
    # Flutter / Dart style resources
    "AnimationController",
    "ChangeNotifier",
    "FocusNode",
    "PageController",
    "ScrollController",
    "StreamController",
    "StreamSubscription",
    "TabController",
    "TextEditingController",
    "Timer",
    "ValueNotifier",
    # Python standard library resources exposing close()/cancel()
    "threading.Timer",
    "socket.socket",
    "sqlite3.Connection",
    "multiprocessing.Pool",
    "selectors.DefaultSelector",
    "tempfile.NamedTemporaryFile",
    "tempfile.TemporaryFile",
  }
)

DEFAULT_LIFECYCLE_BASE_TYPE_NAMES: FrozenSet[str] = frozenset({"State", "ChangeNotifier", "ValueNotifier", "Notifier"})

DEFAULT_INIT_HOOK_NAMES: FrozenSet[str] = frozenset({"initState", "setup", "setUp", "on_mount"})


class DisposalVocabulary(BaseModel):
  """
  The set of names the analyzer treats as disposal-related.

  Immutable; a single instance is shared by every analysis of a run.
  """

  model_config = ConfigDict(frozen=True)

  method_names: FrozenSet[str] = Field(
    DEFAULT_METHOD_NAMES, description="Zero-argument methods that release a resource."
  )
  known_type_names: FrozenSet[str] = Field(
    DEFAULT_KNOWN_TYPE_NAMES,
    description="Fallback allow-list matched against unresolved simple or qualified type names.",
  )
  lifecycle_base_type_names: FrozenSet[str] = Field(
    DEFAULT_LIFECYCLE_BASE_TYPE_NAMES,
    description="Supertypes implying the class must declare its own disposal method.",
  )
  init_hook_names: FrozenSet[str] = Field(
    DEFAULT_INIT_HOOK_NAMES, description="Methods invoked once after construction to perform setup."
  )
  discard_name: str = Field("_", description="Binding name reserved for intentionally discarded values.")

  @field_validator("method_names")
  @classmethod
  def validate_method_names(cls, v: FrozenSet[str]) -> FrozenSet[str]:
    """
    Ensures at least one disposal method name is configured.

    Args:
        v: The candidate method names.

    Returns:
        FrozenSet[str]: The names, stripped of surrounding whitespace.

    Raises:
        ValueError: If the set is empty.
    """
    cleaned = frozenset(n.strip() for n in v if n.strip())
    if not cleaned:
      raise ValueError("At least one disposal method name is required.")
    return cleaned


DEFAULT_VOCABULARY = DisposalVocabulary()


class LintConfig(BaseModel):
  """
  Global configuration container for a lint run.
  """

  method_names: List[str] = Field(default_factory=lambda: sorted(DEFAULT_METHOD_NAMES))
  extra_known_types: List[str] = Field(
    default_factory=list, description="Type names appended to the built-in allow-list."
  )
  lifecycle_base_types: List[str] = Field(default_factory=lambda: sorted(DEFAULT_LIFECYCLE_BASE_TYPE_NAMES))
  init_hooks: List[str] = Field(default_factory=lambda: sorted(DEFAULT_INIT_HOOK_NAMES))
  exclude: List[str] = Field(default_factory=list, description="Directory names skipped when walking a tree.")

  def vocabulary(self) -> DisposalVocabulary:
    """
    Builds the immutable vocabulary described by this configuration.

    Returns:
        DisposalVocabulary: The vocabulary to hand to the analyzers.

    Raises:
        ValueError: If the resulting vocabulary is invalid.
    """
    try:
      return DisposalVocabulary(
        method_names=frozenset(self.method_names),
        known_type_names=DEFAULT_KNOWN_TYPE_NAMES | frozenset(self.extra_known_types),
        lifecycle_base_type_names=frozenset(self.lifecycle_base_types),
        init_hook_names=frozenset(self.init_hooks),
      )
    except ValidationError as e:
      raise ValueError(f"Disposal vocabulary validation failed: {e}")

  @classmethod
  def load(
    cls,
    method_names: Optional[List[str]] = None,
    extra_known_types: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "LintConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        method_names (Optional[List[str]]): Replaces the disposal method names.
        extra_known_types (Optional[List[str]]): Extends the known type allow-list.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        LintConfig: The fully resolved configuration object.

    Raises:
        ValueError: If the TOML section has invalid values.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    merged: Dict[str, Any] = dict(toml_config)
    if method_names:
      merged["method_names"] = method_names
    if extra_known_types:
      merged["extra_known_types"] = [*toml_config.get("extra_known_types", []), *extra_known_types]

    try:
      return cls.model_validate(merged)
    except ValidationError as e:
      raise ValueError(f"Invalid [tool.performance_lints] configuration: {e}")


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Ignoring unreadable {escape(str(toml_path))}: {escape(str(e))}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("performance_lints", {}), parent

  return {}, None
