"""Pure package-name derivations from installable references.

Examples:
    >>> name_from_git_url("git+ssh://github.com/mycompany/seneca-scripts.git#v1.2.3")
    'seneca-scripts'
    >>> strip_version_tag("@acme/seneca-scripts@next")
    '@acme/seneca-scripts'
    >>> name_from_tarball_filename("https://host/dl/seneca-scripts-0.2.0-alpha.1.tgz")
    'seneca-scripts'
"""

from __future__ import annotations

import re

_GIT_NAME_RE = re.compile(r"([^/]+)\.git(#.*)?$")
_TARBALL_NAME_RE = re.compile(r"^(?:.*/)?(.+?)(?:-\d+.+)?\.(?:tgz|tar\.gz)$")


def name_from_git_url(reference: str) -> str:
    """Repository name: the path segment before ``.git``, ignoring ``#ref``."""
    match = _GIT_NAME_RE.search(reference)
    if match:
        return match.group(1)
    # No ``.git`` suffix: fall back to the last path segment.
    path = reference.split("#", 1)[0].rstrip("/")
    return path.rsplit("/", 1)[-1]


def strip_version_tag(reference: str) -> str:
    """Drop ``@version``/``@tag`` while keeping a leading ``@scope/``."""
    return reference[0] + reference[1:].split("@", 1)[0]


def name_from_tarball_filename(reference: str) -> str:
    """Best-effort name guess from a tarball filename.

    Strips the extension and a trailing ``-<version>`` suffix.
    """
    match = _TARBALL_NAME_RE.match(reference)
    if match:
        return match.group(1)
    return reference.rsplit("/", 1)[-1]
