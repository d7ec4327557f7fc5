"""Initializer discovery and dispatch.

The initializer is chosen at install time, so it is looked up by a fixed
path convention under the installed package:

    <root>/node_modules/<package>/scripts/init.py   (Python module)
    <root>/node_modules/<package>/scripts/init.js   (node script)

A Python module contributes either classes carrying ``@hookimpl`` methods
or a module-level ``init(root, app_name, verbose, original_directory)``.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

import pluggy

from create_seneca_service.plugins.builtins.node_script import NodeScriptInitializer
from create_seneca_service.plugins.hookspecs import (
    PROJECT_NAME,
    InitializerError,
    InitializerHookSpec,
    InitializerNotFoundError,
    hookimpl,
)

logger = logging.getLogger(__name__)

PACKAGES_DIR = "node_modules"
SCRIPTS_DIR = "scripts"


class FunctionInitializer:
    """Adapt a plain ``init`` function to the hook contract."""

    def __init__(self, func: Callable[[str, str, bool, str], object]) -> None:
        self._func = func

    @hookimpl
    def init_project(
        self,
        root: str,
        app_name: str,
        verbose: bool,
        original_directory: str,
    ) -> bool:
        self._func(root, app_name, verbose, original_directory)
        return True


class InitializerManager:
    """Locates the installed package's initializer and hands control to it."""

    def __init__(self, *, node_executable: str = "node") -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(InitializerHookSpec)
        self._node = node_executable

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an initializer instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered initializer: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered initializers."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    @staticmethod
    def scripts_dir(root: Path, package_name: str) -> Path:
        return root / PACKAGES_DIR / package_name / SCRIPTS_DIR

    def locate(self, root: Path, package_name: str) -> list[str]:
        """Register the initializer shipped by *package_name*.

        Returns the registered initializer names.

        Raises:
            InitializerNotFoundError: neither ``init.py`` nor ``init.js`` exists.
            InitializerError: ``init.py`` could not be loaded or exposes nothing.
        """
        scripts = self.scripts_dir(root, package_name)
        py_init = scripts / "init.py"
        js_init = scripts / "init.js"

        if py_init.is_file():
            self._register_module(self._load_module(py_init, package_name), py_init)
        elif js_init.is_file():
            self.register_plugin(NodeScriptInitializer(js_init, self._node), name=str(js_init))
        else:
            msg = f"No initializer found in {scripts}"
            raise InitializerNotFoundError(msg)
        return self.list_plugin_names()

    def run_initializer(
        self,
        root: Path,
        app_name: str,
        verbose: bool,
        original_directory: Path,
    ) -> None:
        """Invoke the registered initializer."""
        if not self._pm.get_plugins():
            msg = "No initializer registered"
            raise InitializerNotFoundError(msg)
        self._pm.hook.init_project(
            root=str(root),
            app_name=app_name,
            verbose=verbose,
            original_directory=str(original_directory),
        )

    # ------------------------------------------------------------------
    # Python initializer loading
    # ------------------------------------------------------------------

    @staticmethod
    def _load_module(path: Path, package_name: str) -> ModuleType:
        safe = package_name.replace("@", "").replace("/", "_").replace("-", "_")
        module_name = f"create_seneca_service_init_{safe}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            msg = f"Could not create module spec for {path}"
            raise InitializerError(msg)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            msg = f"Failed to load initializer {path}: {exc}"
            raise InitializerError(msg) from exc
        return module

    def _register_module(self, module: ModuleType, path: Path) -> None:
        registered = False
        for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
            if obj.__module__ != module.__name__:
                continue  # skip imported classes
            if not self._has_hook_impls(obj):
                continue
            self.register_plugin(obj(), name=f"{module.__name__}.{obj.__name__}")
            registered = True

        if registered:
            return

        func = getattr(module, "init", None)
        if callable(func):
            self.register_plugin(FunctionInitializer(func), name=module.__name__)
            return

        msg = f"{path} defines neither an init() function nor a hook implementation"
        raise InitializerError(msg)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``."""
        marker = f"{PROJECT_NAME}_impl"
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, marker, None):
                return True
        return False
