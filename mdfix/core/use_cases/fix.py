"""
Fix use case — load config, resolve roots, walk and rewrite Markdown files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from mdfix.core.config.loader import ConfigError, find_config_file, load_config, project_root
from mdfix.core.services.md_walker import FileOutcome, FixFileError, WalkReport, walk

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Result of one fixer run."""

    project_root: Path | None = None
    config_path: Path | None = None
    roots: list[Path] = field(default_factory=list)
    dry_run: bool = False
    report: WalkReport = field(default_factory=WalkReport)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "ok": self.ok,
            "error": self.error,
            "project_root": str(self.project_root) if self.project_root else None,
            "config_path": str(self.config_path) if self.config_path else None,
            "roots": [str(r) for r in self.roots],
            "dry_run": self.dry_run,
            **self.report.to_dict(),
        }


def run_fix(
    config_path: Path | None = None,
    roots: list[Path] | None = None,
    dry_run: bool = False,
    on_file: Callable[[FileOutcome], None] | None = None,
) -> FixResult:
    """Run the fixer over the configured (or given) roots.

    Args:
        config_path: Optional explicit path to mdfix.yml.
        roots: Roots to walk instead of the configured ones.
        dry_run: Transform but write nothing.
        on_file: Called after each processed file.

    Returns:
        FixResult.  A config problem or an aborting file failure is
        reported in ``error``; files handled before the abort stay in
        ``report``.
    """
    result = FixResult(dry_run=dry_run)

    if config_path is None:
        config_path = find_config_file()
    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.project_root = project_root(config_path)
    result.roots = list(roots) if roots else config.resolve_roots(result.project_root)

    try:
        walk(
            result.roots,
            config.extensions,
            disabled=config.disable,
            dry_run=dry_run,
            continue_on_error=config.continue_on_error,
            on_file=on_file,
            report=result.report,
        )
    except FixFileError as e:
        logger.debug("Run aborted on %s", e.path, exc_info=True)
        result.error = str(e)

    return result
