"""Manifest (package.json) rules: initial content and caret pinning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import semantic_version


class ManifestError(Exception):
    """The manifest is missing something the bootstrap relies on."""


@dataclass(frozen=True)
class CaretPatch:
    """Outcome of pinning a single dependency."""

    name: str
    original: str
    patched: str
    warning: str | None = None

    @property
    def changed(self) -> bool:
        return self.original != self.patched


def initial_manifest(app_name: str, version: str = "0.1.0") -> dict[str, Any]:
    """The manifest written before install."""
    return {"name": app_name, "version": version, "private": True}


def is_valid_range(spec: str) -> bool:
    """Whether *spec* parses as an npm range."""
    try:
        semantic_version.NpmSpec(spec)
    except ValueError:
        return False
    return True


def make_caret_range(dependencies: dict[str, Any], name: str) -> CaretPatch:
    """Compute ``^<version>`` for *name* without mutating *dependencies*.

    Raises:
        ManifestError: *name* is absent from *dependencies*
            or its version is not a string.
    """
    version = dependencies.get(name)
    if version is None:
        msg = f"Missing {name} dependency in package.json"
        raise ManifestError(msg)
    if not isinstance(version, str):
        msg = f"Invalid {name} dependency version in package.json: {version!r}"
        raise ManifestError(msg)

    if version.startswith("^") and is_valid_range(version):
        return CaretPatch(name=name, original=version, patched=version)

    patched = f"^{version}"
    if not is_valid_range(patched):
        warning = (
            f"Unable to patch {name} dependency version because version "
            f"{version} will become invalid {patched}"
        )
        return CaretPatch(name=name, original=version, patched=version, warning=warning)

    return CaretPatch(name=name, original=version, patched=patched)
