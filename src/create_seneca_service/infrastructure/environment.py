"""Toolchain probes run before anything is written.

The working-directory and node probes pass when their subprocess cannot
start. A missing npm fails the npm version check.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import semantic_version

logger = logging.getLogger(__name__)

_CWD_PREFIX = " cwd = "

_WINDOWS_HINT = (
    "On Windows, this can usually be fixed by running:\n\n"
    '  reg delete "HKCU\\Software\\Microsoft\\Command Processor" /v AutoRun /f\n'
    '  reg delete "HKLM\\Software\\Microsoft\\Command Processor" /v AutoRun /f\n\n'
    "Try to run the above two lines in the terminal."
)


class EnvironmentCheckError(Exception):
    """The local toolchain cannot bootstrap a project."""


@dataclass(frozen=True)
class ToolVersion:
    """Result of a version probe."""

    version: str | None
    meets_minimum: bool


def _run(args: list[str], *, cwd: Path | None = None) -> str | None:
    try:
        completed = subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=False)
    except OSError:
        logger.debug("Could not run %s", args[0], exc_info=True)
        return None
    return completed.stdout


def _at_least(version: str, minimum: str) -> bool:
    try:
        return semantic_version.Version.coerce(version) >= semantic_version.Version(minimum)
    except ValueError:
        return False


def probe_version(executable: str, minimum: str) -> ToolVersion:
    """Run ``<executable> --version`` and compare it against *minimum*."""
    output = _run([executable, "--version"])
    if output is None or not output.strip():
        return ToolVersion(version=None, meets_minimum=False)
    version = output.strip().lstrip("v")
    return ToolVersion(version=version, meets_minimum=_at_least(version, minimum))


def npm_cwd(root: Path, executable: str = "npm") -> str | None:
    """The working directory a fresh npm process reports, or None if unknown."""
    output = _run([executable, "config", "list"], cwd=root)
    if output is None:
        return None
    for line in output.splitlines():
        if line.startswith(_CWD_PREFIX):
            return line[len(_CWD_PREFIX) :]
    return None


def check_npm_can_read_cwd(root: Path, executable: str = "npm") -> None:
    """Raise if npm started in *root* ends up somewhere else.

    A misconfigured shell (e.g. a Windows AutoRun entry) can change the
    directory of every new process.
    """
    reported = npm_cwd(root, executable)
    if reported is None or reported == str(root):
        return
    msg = (
        "Could not start an npm process in the right directory.\n\n"
        f"The current directory is: {root}\n"
        f"However, a newly started npm process runs in: {reported}\n\n"
        "This is probably caused by a misconfigured system terminal shell."
    )
    if sys.platform == "win32":
        msg = f"{msg}\n\n{_WINDOWS_HINT}"
    raise EnvironmentCheckError(msg)


def check_node_version(executable: str = "node", minimum: str = "8.0.0") -> ToolVersion:
    probe = probe_version(executable, minimum)
    if probe.version is not None and not probe.meets_minimum:
        msg = f"You are using Node {probe.version}.\n\nPlease update to Node {minimum} or higher."
        raise EnvironmentCheckError(msg)
    return probe


def check_npm_version(executable: str = "npm", minimum: str = "5.0.0") -> ToolVersion:
    probe = probe_version(executable, minimum)
    if probe.version is None:
        msg = (
            "Couldn't find npm version.\n\n"
            f"Please ensure npm {minimum} or higher has been installed globally."
        )
        raise EnvironmentCheckError(msg)
    if not probe.meets_minimum:
        msg = (
            f"You are using npm {probe.version}.\n\n"
            f"Please update to npm {minimum} or higher for a consistent, "
            "fully supported experience."
        )
        raise EnvironmentCheckError(msg)
    return probe
