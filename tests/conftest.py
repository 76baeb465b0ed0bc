"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def content_tree(tmp_path: Path) -> Path:
    """A small project with Markdown and non-Markdown files under docs/."""
    docs = tmp_path / "docs"
    (docs / "guides").mkdir(parents=True)
    (docs / "a.md").write_text("# Title\n\nline with spaces   \nmore\t\n")
    (docs / "b.txt").write_text("keep   \ntrailing   \n")
    (docs / "guides" / "c.md").write_text("Intro\n- one\n- two\n")
    return tmp_path


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Chdir into an empty directory so no real mdfix.yml is found."""
    isolated = tmp_path / "isolated"
    isolated.mkdir()
    monkeypatch.chdir(isolated)
    return isolated


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    level = root.level
    raise_exceptions = logging.raiseExceptions
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.raiseExceptions = raise_exceptions
