"""Package tarball acquisition and inspection.

Archives are read the way npm lays them out: every member lives under a
single top-level directory (``package/``) that is stripped on extraction.
"""

from __future__ import annotations

import json
import logging
import tarfile
import zlib
from pathlib import Path

import requests

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class ArchiveError(Exception):
    """A tarball could not be fetched, unpacked, or inspected."""


def is_remote(reference: str) -> bool:
    return reference.startswith("http")


def download(url: str, dest: Path, *, timeout: float = 60.0) -> Path:
    """Stream *url* into *dest* chunk by chunk."""
    logger.debug("Downloading %s", url)
    with requests.get(url, stream=True, timeout=timeout) as r:
        if r.status_code >= 400:
            msg = f"download failed: {r.status_code} {url}"
            raise ArchiveError(msg)
        with dest.open("wb") as f:
            for chunk in r.iter_content(chunk_size=_CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
    return dest


def _strip_top(name: str) -> str | None:
    parts = Path(name).parts
    if len(parts) < 2:
        return None
    return str(Path(*parts[1:]))


def _stripped_members(tf: tarfile.TarFile) -> list[tarfile.TarInfo]:
    """Members with their top-level directory removed.

    Hardlink targets name other members, so they are stripped the same way.
    """
    members: list[tarfile.TarInfo] = []
    for member in tf.getmembers():
        name = _strip_top(member.name)
        if name is None:
            continue
        member.name = name
        if member.islnk():
            member.linkname = _strip_top(member.linkname) or member.linkname
        members.append(member)
    return members


def extract(archive: Path, dest: Path) -> None:
    """Unpack a gzipped tarball into *dest*, stripping one path component.

    Members that would land outside *dest* are refused by the ``data`` filter.
    A hardlink whose target is not in the archive raises ``KeyError`` from
    tarfile and is reported as an :class:`ArchiveError` like any other
    unreadable archive.
    """
    try:
        with tarfile.open(archive, "r:gz") as tf:
            tf.extractall(dest, members=_stripped_members(tf), filter="data")
    except (tarfile.TarError, EOFError, KeyError, zlib.error) as exc:
        msg = f"could not extract {archive.name}: {exc}"
        raise ArchiveError(msg) from exc


def read_package_name(package_dir: Path) -> str:
    """Return the ``name`` declared in *package_dir*/package.json."""
    manifest = package_dir / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        msg = f"could not read {manifest}: {exc}"
        raise ArchiveError(msg) from exc
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        msg = f"{manifest} does not declare a package name"
        raise ArchiveError(msg)
    return name
