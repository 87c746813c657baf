"""
Tests for configuration loading and the DisposalVocabulary model.
"""

import pytest
from pydantic import ValidationError

from performance_lints.config import (
  DEFAULT_KNOWN_TYPE_NAMES,
  DEFAULT_VOCABULARY,
  DisposalVocabulary,
  LintConfig,
)


def test_default_config_builds_default_vocabulary():
  assert LintConfig().vocabulary() == DEFAULT_VOCABULARY
  assert DEFAULT_VOCABULARY.method_names == frozenset({"dispose", "close", "cancel"})
  assert DEFAULT_VOCABULARY.discard_name == "_"


def test_vocabulary_is_immutable():
  with pytest.raises(ValidationError):
    DEFAULT_VOCABULARY.discard_name = "__"


def test_empty_method_names_rejected():
  with pytest.raises(ValidationError):
    DisposalVocabulary(method_names=frozenset({" "}))

  with pytest.raises(ValueError, match="Disposal vocabulary validation failed"):
    LintConfig(method_names=[]).vocabulary()


def test_load_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    """
[tool.performance_lints]
method_names = ["release"]
extra_known_types = ["Pool"]
init_hooks = ["boot"]
exclude = ["build"]
""",
    encoding="utf-8",
  )
  nested = tmp_path / "pkg" / "sub"
  nested.mkdir(parents=True)

  config = LintConfig.load(search_path=nested)
  vocab = config.vocabulary()

  assert config.exclude == ["build"]
  assert vocab.method_names == frozenset({"release"})
  assert vocab.init_hook_names == frozenset({"boot"})
  assert "Pool" in vocab.known_type_names
  assert DEFAULT_KNOWN_TYPE_NAMES <= vocab.known_type_names


def test_cli_overrides_merge_with_file(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.performance_lints]\nmethod_names = ["release"]\nextra_known_types = ["Pool"]\n',
    encoding="utf-8",
  )
  config = LintConfig.load(method_names=["free"], extra_known_types=["Arena"], search_path=tmp_path)

  assert config.method_names == ["free"]
  assert config.extra_known_types == ["Pool", "Arena"]


def test_search_from_file_path(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.performance_lints]\nexclude = [".venv"]\n', encoding="utf-8")
  src = tmp_path / "mod.py"
  src.write_text("", encoding="utf-8")
  assert LintConfig.load(search_path=src).exclude == [".venv"]


def test_missing_section_uses_defaults(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
  assert LintConfig.load(search_path=tmp_path) == LintConfig()


def test_malformed_toml_is_ignored(tmp_path, captured_console):
  (tmp_path / "pyproject.toml").write_text("[tool.performance_lints\n", encoding="utf-8")
  assert LintConfig.load(search_path=tmp_path) == LintConfig()

  output = captured_console.getvalue()
  assert "Ignoring unreadable" in output
  assert "pyproject.toml" in output


def test_invalid_values_raise(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.performance_lints]\nmethod_names = 5\n", encoding="utf-8")
  with pytest.raises(ValueError, match="Invalid \\[tool.performance_lints\\] configuration"):
    LintConfig.load(search_path=tmp_path)
