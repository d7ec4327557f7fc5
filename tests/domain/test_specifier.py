"""Tests for specifier resolution and reference classification."""

from __future__ import annotations

from pathlib import Path

import pytest

from create_seneca_service.domain.specifier import (
    DEFAULT_PACKAGE,
    classify_reference,
    resolve_install_package,
    valid_semver,
)
from create_seneca_service.domain.types import ReferenceKind


class TestValidSemver:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2.1.0", "2.1.0"),
            ("v2.1.0", "2.1.0"),
            (" 1.0.0 ", "1.0.0"),
            ("0.2.0-alpha.1", "0.2.0-alpha.1"),
            ("1.0.0+build.5", "1.0.0"),
        ],
    )
    def test_valid(self, raw: str, expected: str) -> None:
        assert valid_semver(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "latest", "1.2", "^1.2.3", "file:../x", "next"])
    def test_invalid(self, raw: str | None) -> None:
        assert valid_semver(raw) is None


class TestResolveInstallPackage:
    def test_semver_appends_to_base_package(self, tmp_path: Path) -> None:
        assert resolve_install_package("2.1.0", tmp_path) == f"{DEFAULT_PACKAGE}@2.1.0"

    def test_custom_base_package(self, tmp_path: Path) -> None:
        ref = resolve_install_package("1.0.0", tmp_path, base_package="@acme/scripts")
        assert ref == "@acme/scripts@1.0.0"

    def test_relative_file_resolved_against_original_directory(self, tmp_path: Path) -> None:
        ref = resolve_install_package("file:../scripts", tmp_path / "work")
        assert ref == f"file:{tmp_path / 'scripts'}"

    def test_absolute_file_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "scripts"
        ref = resolve_install_package(f"file:{target}", tmp_path / "work")
        assert ref == f"file:{target}"

    def test_empty_file_path_is_original_directory(self, tmp_path: Path) -> None:
        assert resolve_install_package("file:", tmp_path) == f"file:{tmp_path}"

    @pytest.mark.parametrize(
        "opaque",
        [
            "https://example.com/seneca-scripts-1.0.0.tgz",
            "./seneca-scripts-1.0.0.tar.gz",
            "git+https://example.com/org/seneca-scripts.git#v1.2.3",
            "seneca-scripts@next",
            "@acme/seneca-scripts",
            "not a real package!",
        ],
    )
    def test_opaque_passes_through(self, tmp_path: Path, opaque: str) -> None:
        assert resolve_install_package(opaque, tmp_path) == opaque

    @pytest.mark.parametrize("missing", [None, ""])
    def test_default(self, tmp_path: Path, missing: str | None) -> None:
        assert resolve_install_package(missing, tmp_path) == DEFAULT_PACKAGE


class TestClassifyReference:
    @pytest.mark.parametrize(
        ("reference", "kind"),
        [
            ("https://example.com/a/seneca-scripts-1.0.0.tgz", ReferenceKind.TARBALL),
            ("../seneca-scripts.tar.gz", ReferenceKind.TARBALL),
            ("git+ssh://github.com/org/seneca-scripts.git", ReferenceKind.GIT),
            ("seneca-scripts@2.1.0", ReferenceKind.TAGGED),
            ("@acme/seneca-scripts@next", ReferenceKind.TAGGED),
            ("file:/tmp/seneca-scripts", ReferenceKind.FILE),
            ("@acme/seneca-scripts", ReferenceKind.NAME),
            ("seneca-scripts", ReferenceKind.NAME),
        ],
    )
    def test_kinds(self, reference: str, kind: ReferenceKind) -> None:
        assert classify_reference(reference) is kind
