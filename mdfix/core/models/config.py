"""
Fixer configuration — loaded from mdfix.yml.

Everything has a default, so a project without a config file still gets
the standard set of content roots.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# Content roots walked when the config file doesn't name any.
DEFAULT_ROOTS: tuple[str, ...] = (
    "docs",
    "project_rules",
    "src/content",
    "src/content/blog",
    "src/content/pages",
    "project_rules/templates",
)


class FixerConfig(BaseModel):
    """What to walk and which rules to run."""

    roots: list[str] = Field(default_factory=lambda: list(DEFAULT_ROOTS))
    extensions: list[str] = Field(default_factory=lambda: [".md"])
    disable: list[str] = Field(default_factory=list)
    continue_on_error: bool = False

    def resolve_roots(self, project_root: Path) -> list[Path]:
        """Roots as paths; relative entries are taken from *project_root*."""
        return [project_root / root for root in self.roots]
