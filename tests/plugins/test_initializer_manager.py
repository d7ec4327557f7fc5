"""Tests for InitializerManager: discovery, registration, and dispatch."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from create_seneca_service.plugins.hookspecs import (
    InitializerError,
    InitializerNotFoundError,
    hookimpl,
)
from create_seneca_service.plugins.manager import InitializerManager

HOOK_CLASS_INIT = """\
from pathlib import Path

from create_seneca_service.plugins.hookspecs import hookimpl


class Scaffold:
    @hookimpl
    def init_project(self, root, app_name, verbose, original_directory):
        Path(root, "index.js").write_text("// " + app_name)
        return True
"""


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bool, str]] = []

    @hookimpl
    def init_project(
        self, root: str, app_name: str, verbose: bool, original_directory: str
    ) -> bool:
        self.calls.append((root, app_name, verbose, original_directory))
        return True


def _scripts(root: Path, package: str = "seneca-scripts") -> Path:
    scripts = root / "node_modules" / package / "scripts"
    scripts.mkdir(parents=True)
    return scripts


class TestRegistration:
    def test_register_plugin_default_name(self) -> None:
        manager = InitializerManager()
        manager.register_plugin(_Recorder())
        assert manager.list_plugin_names() == ["_Recorder"]

    def test_run_dispatches_to_registered_plugin(self, tmp_path: Path) -> None:
        manager = InitializerManager()
        recorder = _Recorder()
        manager.register_plugin(recorder, name="recorder")
        manager.run_initializer(tmp_path / "svc", "svc", False, tmp_path)
        assert recorder.calls == [(str(tmp_path / "svc"), "svc", False, str(tmp_path))]

    def test_run_without_plugins(self, tmp_path: Path) -> None:
        with pytest.raises(InitializerNotFoundError):
            InitializerManager().run_initializer(tmp_path, "svc", False, tmp_path)


class TestLocate:
    def test_scripts_dir_convention(self, tmp_path: Path) -> None:
        assert InitializerManager.scripts_dir(tmp_path, "@org/scripts") == (
            tmp_path / "node_modules" / "@org" / "scripts" / "scripts"
        )

    def test_python_function_initializer(self, tmp_path: Path, installed_package) -> None:
        installed_package(tmp_path, "seneca-scripts")
        manager = InitializerManager()

        names = manager.locate(tmp_path, "seneca-scripts")
        manager.run_initializer(tmp_path, "svc", True, tmp_path.parent)

        assert len(names) == 1
        called = json.loads((tmp_path / "init-called.json").read_text())
        assert called["app_name"] == "svc"
        assert called["verbose"] is True
        assert called["original_directory"] == str(tmp_path.parent)

    def test_python_hook_class_initializer(self, tmp_path: Path) -> None:
        (_scripts(tmp_path, "hook-scripts") / "init.py").write_text(HOOK_CLASS_INIT)
        manager = InitializerManager()

        names = manager.locate(tmp_path, "hook-scripts")
        manager.run_initializer(tmp_path, "svc", False, tmp_path)

        assert names[0].endswith(".Scaffold")
        assert (tmp_path / "index.js").read_text() == "// svc"

    def test_python_preferred_over_node(self, tmp_path: Path, installed_package) -> None:
        pkg = installed_package(tmp_path, "seneca-scripts")
        (pkg / "scripts" / "init.js").write_text("module.exports = () => {}")
        manager = InitializerManager()
        manager.locate(tmp_path, "seneca-scripts")
        assert not any(name.endswith("init.js") for name in manager.list_plugin_names())

    def test_node_initializer_registered(self, tmp_path: Path) -> None:
        script = _scripts(tmp_path) / "init.js"
        script.write_text("module.exports = () => {}")

        manager = InitializerManager(node_executable="/opt/node/bin/node")
        assert manager.locate(tmp_path, "seneca-scripts") == [str(script)]

        done = subprocess.CompletedProcess(args=[], returncode=0)
        with patch(
            "create_seneca_service.plugins.builtins.node_script.subprocess.run", return_value=done
        ) as run:
            manager.run_initializer(tmp_path, "svc", False, tmp_path)
        assert run.call_args.args[0][0] == "/opt/node/bin/node"

    def test_not_found(self, tmp_path: Path) -> None:
        _scripts(tmp_path)
        with pytest.raises(InitializerNotFoundError, match="No initializer found"):
            InitializerManager().locate(tmp_path, "seneca-scripts")

    def test_package_not_installed(self, tmp_path: Path) -> None:
        with pytest.raises(InitializerNotFoundError):
            InitializerManager().locate(tmp_path, "seneca-scripts")

    def test_module_that_fails_to_import(self, tmp_path: Path) -> None:
        (_scripts(tmp_path, "broken-scripts") / "init.py").write_text("raise ImportError('nope')\n")
        with pytest.raises(InitializerError, match="Failed to load initializer"):
            InitializerManager().locate(tmp_path, "broken-scripts")

    def test_module_without_entry_point(self, tmp_path: Path) -> None:
        (_scripts(tmp_path, "empty-scripts") / "init.py").write_text("VALUE = 1\n")
        with pytest.raises(InitializerError, match="neither an init"):
            InitializerManager().locate(tmp_path, "empty-scripts")
