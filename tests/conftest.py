"""Shared pytest fixtures and test helpers for create-seneca-service tests."""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from create_seneca_service.config.models import ChecksConfig
from create_seneca_service.config.settings import BootstrapSettings
from create_seneca_service.domain.package_name import name_from_git_url
from create_seneca_service.infrastructure import installer

PINNED_VERSIONS = {
    "seneca": "3.8.0",
    "seneca-balance-client": "0.6.1",
    "code": "5.2.0",
    "lab": "15.4.1",
    "pino": "4.17.3",
    "seneca-pino-adapter": "0.1.2",
}

INIT_PY = """\
import json
from pathlib import Path


def init(root, app_name, verbose, original_directory):
    Path(root, "init-called.json").write_text(
        json.dumps(
            {
                "root": root,
                "app_name": app_name,
                "verbose": verbose,
                "original_directory": original_directory,
            }
        )
    )
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings() -> BootstrapSettings:
    """Default settings with toolchain probes switched off."""
    return BootstrapSettings(checks=ChecksConfig(enabled=False))


@pytest.fixture
def make_tarball(tmp_path: Path) -> Callable[..., Path]:
    """Build an npm-style tarball (members under ``package/``).

    *hardlink* adds ``copy.json`` as a hardlink to that member name.
    """

    def _make(
        filename: str,
        manifest: dict[str, Any] | str | None,
        *,
        top: str = "package",
        hardlink: str | None = None,
    ) -> Path:
        path = tmp_path / filename
        with tarfile.open(path, "w:gz") as tf:
            if manifest is not None:
                raw = manifest if isinstance(manifest, str) else json.dumps(manifest)
                data = raw.encode("utf-8")
                info = tarfile.TarInfo(f"{top}/package.json")
                info.size = len(data)
                tf.addfile(info, io.BytesIO(data))
            readme = b"# readme\n"
            info = tarfile.TarInfo(f"{top}/README.md")
            info.size = len(readme)
            tf.addfile(info, io.BytesIO(readme))
            if hardlink is not None:
                link = tarfile.TarInfo(f"{top}/copy.json")
                link.type = tarfile.LNKTYPE
                link.linkname = hardlink
                tf.addfile(link)
        return path

    return _make


def write_installed_package(root: Path, name: str, *, init_py: str | None = INIT_PY) -> Path:
    """Create ``node_modules/<name>`` with an optional ``scripts/init.py``."""
    pkg_dir = root / "node_modules" / name
    scripts = pkg_dir / "scripts"
    scripts.mkdir(parents=True, exist_ok=True)
    (pkg_dir / "package.json").write_text(json.dumps({"name": name}), encoding="utf-8")
    if init_py is not None:
        (scripts / "init.py").write_text(init_py, encoding="utf-8")
    return pkg_dir


def _installed_name(dep: str) -> str:
    if dep.startswith("file:"):
        manifest = Path(dep[len("file:") :], "package.json")
        return str(json.loads(manifest.read_text(encoding="utf-8"))["name"])
    if dep.startswith("git+"):
        return name_from_git_url(dep)
    if "@" in dep[1:]:
        return dep[0] + dep[1:].split("@", 1)[0]
    return dep


@pytest.fixture
def installed_package() -> Callable[..., Path]:
    """Expose :func:`write_installed_package` to tests."""
    return write_installed_package


@pytest.fixture
def fake_install(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Replace the package manager with an in-process fake.

    The fake records each call, creates ``node_modules/<dep>`` for every
    dependency and saves exact versions into package.json like
    ``npm install --save --save-exact`` would.
    """
    calls: list[dict[str, Any]] = []

    def _install(root: Path, dependencies: Sequence[str], **kwargs: Any) -> None:
        calls.append({"root": root, "dependencies": list(dependencies), **kwargs})
        manifest_path = root / "package.json"
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        deps = manifest.setdefault("dependencies", {})
        for dep in dependencies:
            name = _installed_name(dep)
            deps[name] = PINNED_VERSIONS.get(name, "2.1.0")
            write_installed_package(root, name)
        manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")

    monkeypatch.setattr(installer, "install", _install)
    return calls


@pytest.fixture
def failing_install(monkeypatch: pytest.MonkeyPatch) -> Callable[[Exception], None]:
    """Make the package manager create node_modules, then fail with *exc*."""

    def _arm(exc: Exception) -> None:
        def _install(root: Path, dependencies: Sequence[str], **kwargs: Any) -> None:
            (root / "node_modules" / "seneca").mkdir(parents=True)
            raise exc

        monkeypatch.setattr(installer, "install", _install)

    return _arm
