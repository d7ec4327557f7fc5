"""Version pinning — loosen exact runtime dependency versions to caret ranges.

The installer saves exact versions. Runtime dependencies are rewritten to
``^<version>`` so the generated service picks up compatible updates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from create_seneca_service.domain.manifest import CaretPatch, ManifestError, make_caret_range
from create_seneca_service.infrastructure.manifest import read_manifest, write_manifest

logger = logging.getLogger(__name__)


def set_caret_range_for_runtime_deps(
    project_root: Path,
    package_name: str,
    runtime_dependencies: Sequence[str],
    *,
    warnings: list[str] | None = None,
) -> list[CaretPatch]:
    """Pin *runtime_dependencies* in the manifest at *project_root*.

    All entries are validated before the file is touched, so a failure
    leaves the manifest exactly as the installer wrote it.

    Raises:
        ManifestError: the manifest has no dependencies, *package_name* is
            missing, or one of *runtime_dependencies* is missing.
    """
    manifest = read_manifest(project_root)
    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        msg = "Missing dependencies in package.json"
        raise ManifestError(msg)

    if package_name not in dependencies:
        msg = f"Unable to find {package_name} in package.json"
        raise ManifestError(msg)

    patches = [make_caret_range(dependencies, name) for name in runtime_dependencies]

    for patch in patches:
        if patch.warning:
            logger.warning(patch.warning)
            if warnings is not None:
                warnings.append(patch.warning)
        dependencies[patch.name] = patch.patched

    write_manifest(project_root, manifest)
    return patches
