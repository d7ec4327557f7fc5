"""Run a JavaScript ``scripts/init.js`` through node.

The script's module export is called as
``init(root, appName, verbose, originalDirectory)``.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from create_seneca_service.plugins.hookspecs import InitializerError, hookimpl

logger = logging.getLogger(__name__)

_LOADER = (
    "require(process.argv[1])"
    "(process.argv[2], process.argv[3], process.argv[4] === 'true', process.argv[5])"
)


class NodeScriptInitializer:
    """Initializer backed by a node script."""

    def __init__(self, script: Path, node_executable: str = "node") -> None:
        self._script = script
        self._node = node_executable

    def command(
        self, root: str, app_name: str, verbose: bool, original_directory: str
    ) -> list[str]:
        return [
            self._node,
            "-e",
            _LOADER,
            str(self._script),
            root,
            app_name,
            "true" if verbose else "false",
            original_directory,
        ]

    @hookimpl
    def init_project(
        self,
        root: str,
        app_name: str,
        verbose: bool,
        original_directory: str,
    ) -> bool:
        args = self.command(root, app_name, verbose, original_directory)
        logger.debug("Running initializer %s", self._script)
        completed = subprocess.run(args, cwd=root, check=False)
        if completed.returncode != 0:
            msg = f"{self._script} exited with status {completed.returncode}"
            raise InitializerError(msg)
        return True
