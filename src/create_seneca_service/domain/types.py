"""Reference classification enums."""

from __future__ import annotations

from enum import StrEnum


class ReferenceKind(StrEnum):
    """Shapes an installable reference can take."""

    TARBALL = "tarball"
    GIT = "git"
    TAGGED = "tagged"
    FILE = "file"
    NAME = "name"
