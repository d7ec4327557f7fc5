"""Filesystem operations on the target project directory.

INVARIANT: Rollback only ever removes entries whose names are on the
known-generated allow-list. Anything else in the target is left untouched.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class RollbackReport:
    """What a rollback removed."""

    root: Path
    deleted: list[str] = field(default_factory=list)
    removed_root: bool = False


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _contains(parent: Path, child: Path) -> bool:
    return child == parent or child.is_relative_to(parent)


def remove_generated_files(root: Path, known_names: Iterable[str]) -> RollbackReport:
    """Delete known-generated entries from *root*, then *root* itself if empty.

    Entries are visited and reported in name order.

    When the current working directory is inside *root*, it is moved to the
    parent first so the directory can be removed on every platform.
    """
    report = RollbackReport(root=root)
    if not root.is_dir():
        return report

    allowed = set(known_names)
    for entry in sorted(root.iterdir()):
        if entry.name not in allowed:
            continue
        logger.info("Deleting generated file... %s", entry.name)
        _remove(entry)
        report.deleted.append(entry.name)

    if any(root.iterdir()):
        return report

    logger.info("Deleting %s/ from %s", root.name, root.parent)
    if _contains(root.resolve(), Path.cwd().resolve()):
        os.chdir(root.parent)
    shutil.rmtree(root)
    report.removed_root = True
    return report


def find_conflicts(root: Path, known_names: Iterable[str]) -> list[str]:
    """Entries in *root* a bootstrap would overwrite (and a rollback delete)."""
    if not root.is_dir():
        return []
    allowed = set(known_names)
    return sorted(entry.name for entry in root.iterdir() if entry.name in allowed)


def remove_error_logs(root: Path, patterns: Iterable[str]) -> list[str]:
    """Silently remove installer logs left behind by an earlier failed run.

    A log matches when its name starts with one of *patterns*
    (``npm-debug.log`` also covers ``npm-debug.log.1234``).
    """
    if not root.is_dir():
        return []
    prefixes = tuple(patterns)
    removed: list[str] = []
    for entry in sorted(root.iterdir()):
        if entry.is_file() and entry.name.startswith(prefixes):
            entry.unlink()
            removed.append(entry.name)
    return removed
