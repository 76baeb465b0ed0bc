"""
Tests for configuration loading — mdfix.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from mdfix.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    project_root,
)
from mdfix.core.models import DEFAULT_ROOTS, FixerConfig


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    """Create a valid mdfix.yml in a temp directory."""
    content = textwrap.dedent("""\
        roots:
          - docs
          - notes
        extensions: [".md", ".markdown"]
        disable:
          - wrap-bare-urls
        continue_on_error: true
    """)
    path = tmp_path / "mdfix.yml"
    path.write_text(content)
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_valid_config(self, valid_config_yml: Path):
        config = load_config(valid_config_yml)
        assert config.roots == ["docs", "notes"]
        assert config.extensions == [".md", ".markdown"]
        assert config.disable == ["wrap-bare-urls"]
        assert config.continue_on_error is True

    def test_wrapped_format(self, tmp_path: Path):
        path = tmp_path / "mdfix.yml"
        path.write_text("mdfix:\n  roots: [content]\n")
        assert load_config(path).roots == ["content"]

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "mdfix.yml"
        path.write_text("")
        config = load_config(path)
        assert config.roots == list(DEFAULT_ROOTS)
        assert config.extensions == [".md"]
        assert config.continue_on_error is False

    def test_no_file_anywhere_uses_defaults(self, isolated_cwd: Path):
        assert load_config(None) == FixerConfig()

    def test_missing_explicit_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "mdfix.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "mdfix.yml"
        path.write_text("- just\n- a\n- list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_wrong_type_raises(self, tmp_path: Path):
        path = tmp_path / "mdfix.yml"
        path.write_text("roots: 42\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


class TestFindConfigFile:
    """Tests for find_config_file()."""

    def test_find_in_current_dir(self, tmp_path: Path):
        (tmp_path / "mdfix.yml").write_text("roots: []\n")
        result = find_config_file(tmp_path)
        assert result is not None
        assert result.name == "mdfix.yml"

    def test_find_in_parent_dir(self, tmp_path: Path):
        (tmp_path / "mdfix.yml").write_text("roots: []\n")
        subdir = tmp_path / "docs" / "guides"
        subdir.mkdir(parents=True)
        result = find_config_file(subdir)
        assert result is not None
        assert result.parent == tmp_path.resolve()

    def test_not_found_returns_none(self, tmp_path: Path):
        subdir = tmp_path / "deep" / "nested"
        subdir.mkdir(parents=True)
        assert find_config_file(subdir) is None


class TestProjectRoot:
    def test_config_parent(self, valid_config_yml: Path):
        assert project_root(valid_config_yml) == valid_config_yml.parent.resolve()

    def test_cwd_without_config(self, isolated_cwd: Path):
        assert project_root(None) == Path.cwd()


class TestFixerConfig:
    def test_default_roots(self):
        assert FixerConfig().roots == [
            "docs",
            "project_rules",
            "src/content",
            "src/content/blog",
            "src/content/pages",
            "project_rules/templates",
        ]

    def test_resolve_relative_roots(self, tmp_path: Path):
        config = FixerConfig(roots=["docs", "src/content"])
        assert config.resolve_roots(tmp_path) == [tmp_path / "docs", tmp_path / "src" / "content"]

    def test_resolve_absolute_root(self, tmp_path: Path):
        absolute = tmp_path / "elsewhere"
        config = FixerConfig(roots=[str(absolute)])
        assert config.resolve_roots(Path("/unused")) == [absolute]
