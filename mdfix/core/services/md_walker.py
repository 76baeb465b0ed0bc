"""
Markdown walker — find Markdown files under a set of roots and fix them in place.

Error tiers:
  - root level:  an enumeration failure (missing root, unreadable
    directory) is logged, that root is skipped, the run continues.
  - file level:  a read/write failure raises ``FixFileError`` and aborts
    the run, unless ``continue_on_error`` is set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator

from mdfix.core.services.md_transforms import transform

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md",)


class FixFileError(Exception):
    """Raised when a single Markdown file cannot be read or written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot fix {path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass
class FileOutcome:
    """What happened to one Markdown file."""

    path: Path
    changed: bool = False
    written: bool = False

    def to_dict(self) -> dict:
        return {"path": str(self.path), "changed": self.changed, "written": self.written}


@dataclass
class Failure:
    """A root or file that could not be processed."""

    path: Path
    message: str

    def to_dict(self) -> dict:
        return {"path": str(self.path), "message": self.message}


@dataclass
class WalkReport:
    """Everything the walker did, in processing order per category."""

    files: list[FileOutcome] = field(default_factory=list)
    root_errors: list[Failure] = field(default_factory=list)
    file_errors: list[Failure] = field(default_factory=list)

    @property
    def changed(self) -> list[FileOutcome]:
        return [f for f in self.files if f.changed]

    def to_dict(self) -> dict:
        return {
            "files": [f.to_dict() for f in self.files],
            "root_errors": [e.to_dict() for e in self.root_errors],
            "file_errors": [e.to_dict() for e in self.file_errors],
            "total": len(self.files),
            "changed": len(self.changed),
        }


def is_markdown(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    return path.name.endswith(tuple(extensions))


def iter_markdown_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Iterator[Path]:
    """Yield Markdown files under *root*, depth-first, sorted by name.

    A *root* that is itself a Markdown file is yielded as is.  Symlinked
    directories are not followed.  Enumeration errors (``OSError``)
    propagate to the caller.
    """
    extensions = tuple(extensions)
    if root.is_file():
        if is_markdown(root, extensions):
            yield root
        else:
            logger.warning("Skipping %s: not a Markdown file", root)
        return

    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            yield from iter_markdown_files(entry, extensions)
        elif entry.is_file() and is_markdown(entry, extensions):
            yield entry


def fix_file(
    path: Path,
    *,
    disabled: Iterable[str] = (),
    dry_run: bool = False,
) -> FileOutcome:
    """Read, transform and (unless *dry_run*) write back one file.

    Raises:
        FixFileError: If the file cannot be read, decoded or written.
    """
    try:
        original = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FixFileError(path, str(e)) from e

    fixed = transform(original, disabled)
    outcome = FileOutcome(path=path, changed=fixed != original)

    if not dry_run:
        try:
            path.write_text(fixed, encoding="utf-8")
        except OSError as e:
            raise FixFileError(path, str(e)) from e
        outcome.written = True

    logger.debug("%s %s", "changed" if outcome.changed else "unchanged", path)
    return outcome


def walk(
    roots: Iterable[Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    *,
    disabled: Iterable[str] = (),
    dry_run: bool = False,
    continue_on_error: bool = False,
    on_file: Callable[[FileOutcome], None] | None = None,
    report: WalkReport | None = None,
) -> WalkReport:
    """Fix every Markdown file under each of *roots*, in order.

    Args:
        roots: Directories (or single Markdown files) to walk.  Missing ones
            are reported and skipped.
        extensions: File name suffixes that count as Markdown.
        disabled: Rule names to skip.
        dry_run: Transform but never write.
        continue_on_error: Log per-file failures and keep going instead
            of aborting the run.
        on_file: Called after each file is processed.
        report: Report to fill in.  Pass one in to keep partial results
            when a ``FixFileError`` aborts the run.

    Returns:
        The filled-in ``WalkReport``.

    Raises:
        FixFileError: A file failed and ``continue_on_error`` is off.
    """
    report = report if report is not None else WalkReport()
    disabled = tuple(disabled)

    for root in roots:
        logger.info("Walking %s", root)
        try:
            for path in iter_markdown_files(root, extensions):
                try:
                    outcome = fix_file(path, disabled=disabled, dry_run=dry_run)
                except FixFileError as e:
                    if not continue_on_error:
                        raise
                    logger.error("Error processing file %s: %s", path, e.reason)
                    report.file_errors.append(Failure(path=path, message=e.reason))
                    continue
                report.files.append(outcome)
                if on_file is not None:
                    on_file(outcome)
        except OSError as e:
            message = e.strerror or str(e)
            logger.error("Error processing directory %s: %s", root, message)
            report.root_errors.append(Failure(path=root, message=message))

    return report
