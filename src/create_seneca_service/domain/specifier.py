"""Specifier resolution — turn a free-form version argument into an installable reference.

Resolution is pure string classification plus path resolution. Nothing is
rejected here: anything unrecognised is handed to the package manager,
which is the authority on validity.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import semantic_version

from create_seneca_service.domain.types import ReferenceKind

DEFAULT_PACKAGE = "seneca-scripts"

_FILE_RE = re.compile(r"^file:(.*)$")
_TARBALL_RE = re.compile(r"^.+\.(tgz|tar\.gz)$")
_TAGGED_RE = re.compile(r".+@")


def valid_semver(value: str | None) -> str | None:
    """Return the normalized version if *value* is a valid semantic version.

    Mirrors npm's strict parser: surrounding whitespace and a single leading
    ``v`` are accepted, anything else must be a full SemVer 2.0 string.

    Examples:
        >>> valid_semver("2.1.0")
        '2.1.0'
        >>> valid_semver("v1.0.0-beta.1")
        '1.0.0-beta.1'
        >>> valid_semver("latest") is None
        True
    """
    if not value:
        return None
    candidate = value.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]
    try:
        version = semantic_version.Version(candidate)
    except ValueError:
        return None
    # build metadata is not part of the installable version
    return str(version.truncate("prerelease"))


def file_reference_path(reference: str) -> str | None:
    """Return the path part of a ``file:<path>`` reference, or None."""
    match = _FILE_RE.match(reference)
    if match is None:
        return None
    return match.group(1)


def resolve_install_package(
    version: str | None,
    original_directory: Path | str,
    *,
    base_package: str = DEFAULT_PACKAGE,
) -> str:
    """Resolve *version* into the reference handed to the package manager.

    Priority: semantic version, then ``file:`` path (made absolute against
    *original_directory*), then any other non-empty string unchanged, then
    the bare *base_package*.
    """
    semver = valid_semver(version)
    if semver:
        return f"{base_package}@{semver}"
    if version:
        local = file_reference_path(version)
        if local is not None:
            resolved = os.path.abspath(os.path.join(os.fspath(original_directory), local))
            return f"file:{resolved}"
        # tarballs, git urls, tags and anything else the installer understands
        return version
    return base_package


def classify_reference(reference: str) -> ReferenceKind:
    """Classify an installable reference, in name-extraction dispatch order."""
    if _TARBALL_RE.match(reference):
        return ReferenceKind.TARBALL
    if reference.startswith("git+"):
        return ReferenceKind.GIT
    # ``.+@`` never matches a leading ``@scope/``
    if _TAGGED_RE.match(reference):
        return ReferenceKind.TAGGED
    if _FILE_RE.match(reference):
        return ReferenceKind.FILE
    return ReferenceKind.NAME
