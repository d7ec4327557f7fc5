"""Pluggy hook specifications for project initializers."""

from __future__ import annotations

import pluggy

PROJECT_NAME = "create_seneca_service"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class InitializerError(Exception):
    """The initializer ran and failed."""


class InitializerNotFoundError(InitializerError):
    """No initializer entry point exists in the installed package."""


class InitializerHookSpec:
    """Hook specifications for the initializer handoff."""

    @hookspec(firstresult=True)
    def init_project(
        self,
        root: str,
        app_name: str,
        verbose: bool,
        original_directory: str,
    ) -> bool | None:
        """Write the project scaffold into *root*.

        Return True once handled; later implementations are then skipped.
        """
