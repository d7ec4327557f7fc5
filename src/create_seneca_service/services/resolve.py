"""Package name extraction — which name will the installed package register under?

The name is discovered rather than assumed: tarballs, git urls and local
paths can all contain a package whose declared name differs from the
reference string.

INVARIANT: Extraction never raises. Archive, network and manifest failures
degrade to a best-effort guess recorded as a warning; the installer is the
final authority on the real package.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import requests

from create_seneca_service.domain.package_name import (
    name_from_git_url,
    name_from_tarball_filename,
    strip_version_tag,
)
from create_seneca_service.domain.specifier import classify_reference, file_reference_path
from create_seneca_service.domain.types import ReferenceKind
from create_seneca_service.infrastructure import archive

logger = logging.getLogger(__name__)

_TEMP_PREFIX = "create-seneca-service-"


def _name_from_tarball(reference: str, project_root: Path, timeout: float) -> str:
    """Unpack the tarball into a scoped temp directory and read its manifest."""
    with tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX) as tmpd:
        tmp = Path(tmpd)
        if archive.is_remote(reference):
            tarball = archive.download(reference, tmp / "package.tgz", timeout=timeout)
        else:
            tarball = project_root / reference
        unpacked = tmp / "package"
        unpacked.mkdir()
        archive.extract(tarball, unpacked)
        return archive.read_package_name(unpacked)


def extract_package_name(
    reference: str,
    *,
    project_root: Path,
    warnings: list[str] | None = None,
    timeout: float = 60.0,
) -> str:
    """Resolve the manifest name for an installable *reference*.

    Relative local tarball paths are read against *project_root*, where the
    installer runs. Fallback notices are appended to *warnings*.
    """
    if warnings is None:
        warnings = []

    kind = classify_reference(reference)

    if kind is ReferenceKind.TARBALL:
        try:
            return _name_from_tarball(reference, project_root, timeout)
        except (archive.ArchiveError, OSError, requests.RequestException) as exc:
            guessed = name_from_tarball_filename(reference)
            logger.warning("Could not extract the package name from the archive: %s", exc)
            warnings.append(
                f"Could not extract the package name from the archive: {exc}. "
                f'Based on the filename, assuming it is "{guessed}"'
            )
            return guessed

    if kind is ReferenceKind.GIT:
        return name_from_git_url(reference)

    if kind is ReferenceKind.TAGGED:
        return strip_version_tag(reference)

    if kind is ReferenceKind.FILE:
        local = Path(file_reference_path(reference) or ".")
        try:
            return archive.read_package_name(local)
        except archive.ArchiveError as exc:
            logger.warning("Could not read the package name from %s: %s", local, exc)
            warnings.append(
                f'Could not read the package name from {local}, assuming it is "{local.name}"'
            )
            return local.name

    return reference
