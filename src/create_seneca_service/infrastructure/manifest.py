"""package.json file I/O."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

MANIFEST_FILENAME = "package.json"


def manifest_path(root: Path) -> Path:
    return root / MANIFEST_FILENAME


def read_manifest(root: Path) -> dict[str, Any]:
    """Parse the manifest at *root*."""
    data: dict[str, Any] = json.loads(manifest_path(root).read_text(encoding="utf-8"))
    return data


def write_manifest(root: Path, data: dict[str, Any]) -> Path:
    """Write *data* as two-space indented JSON with a trailing newline."""
    path = manifest_path(root)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path
