"""Package manager subprocess driver.

The installer runs with inherited stdio so its progress is visible live.
There is no timeout: the bootstrap waits for the package manager to exit.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """The package manager exited with a non-zero status."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"{command} has failed (exit status {returncode})")
        self.command = command
        self.returncode = returncode


def build_install_command(
    dependencies: Sequence[str],
    *,
    executable: str = "npm",
    verbose: bool = False,
    loglevel: str = "error",
) -> list[str]:
    """Argument vector for a save-exact install of *dependencies*."""
    args = [executable, "install", "--save", "--save-exact", "--loglevel", loglevel]
    if verbose:
        args.append("--verbose")
    args.extend(dependencies)
    return args


def install(
    root: Path,
    dependencies: Sequence[str],
    *,
    verbose: bool = False,
    executable: str = "npm",
    loglevel: str = "error",
) -> None:
    """Install *dependencies* into *root*.

    Raises:
        InstallError: The package manager exited non-zero.
        OSError: The package manager could not be started at all.
    """
    args = build_install_command(
        dependencies, executable=executable, verbose=verbose, loglevel=loglevel
    )
    command = " ".join(args)
    logger.debug("Running %s in %s", command, root)

    # npm is a .cmd shim on Windows
    resolved = shutil.which(executable) or executable
    completed = subprocess.run([resolved, *args[1:]], cwd=root, check=False)
    if completed.returncode != 0:
        raise InstallError(command, completed.returncode)
