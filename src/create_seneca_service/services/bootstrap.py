"""BootstrapService — provision a new service project.

Pipeline: RESOLVE → INSTALL → PIN → DELEGATE

A failure while resolving or installing rolls back every generated entry
(allow-list based) so the same command can simply be run again. Failures
after a successful install (pinning, delegation) are reported without
rollback: the installed tree is left in place for inspection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from create_seneca_service.domain.manifest import ManifestError, initial_manifest
from create_seneca_service.domain.naming import validate_project_name
from create_seneca_service.domain.specifier import classify_reference, resolve_install_package
from create_seneca_service.infrastructure import environment, installer
from create_seneca_service.infrastructure.filesystem import (
    RollbackReport,
    find_conflicts,
    remove_error_logs,
    remove_generated_files,
)
from create_seneca_service.infrastructure.manifest import write_manifest
from create_seneca_service.plugins.hookspecs import InitializerNotFoundError
from create_seneca_service.plugins.manager import InitializerManager
from create_seneca_service.services.base import BaseService
from create_seneca_service.services.pin import set_caret_range_for_runtime_deps
from create_seneca_service.services.resolve import extract_package_name
from create_seneca_service.services.result import ServiceResult
from create_seneca_service.services.telemetry import stage, traced

if TYPE_CHECKING:
    from create_seneca_service.config.settings import BootstrapSettings

logger = logging.getLogger(__name__)

OP = "create_project"


class BootstrapService(BaseService):
    """Creates a project directory, installs its dependencies and hands off to the initializer."""

    def __init__(
        self,
        settings: BootstrapSettings,
        *,
        progress: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(settings)
        self._progress = progress or (lambda _msg: None)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def create_project(
        self,
        project_dir: str | Path,
        *,
        scripts_version: str | None = None,
        verbose: bool = False,
        original_directory: Path | None = None,
    ) -> ServiceResult:
        """Validate the target, write the initial manifest, then :meth:`run`."""
        original_directory = original_directory or Path.cwd()
        root = (original_directory / project_dir).resolve()
        app_name = root.name
        pkg = self._settings.package
        cleanup = self._settings.cleanup

        problems = validate_project_name(app_name, reserved=pkg.dependencies)
        if problems:
            return self._failure(
                OP,
                "INVALID_PROJECT_NAME",
                f'Could not create a project called "{app_name}": ' + "; ".join(problems),
                detail={"app_name": app_name, "problems": problems},
            )

        root.mkdir(parents=True, exist_ok=True)

        conflicts = find_conflicts(root, cleanup.known_generated_files)
        if conflicts:
            return self._failure(
                OP,
                "PROJECT_NOT_EMPTY",
                f"The directory {app_name} contains files that could conflict: "
                + ", ".join(conflicts),
                detail={"root": str(root), "conflicts": conflicts},
            )
        stale_logs = remove_error_logs(root, cleanup.error_log_patterns)
        if stale_logs:
            logger.debug("Removed stale installer logs: %s", stale_logs)

        if self._settings.checks.enabled:
            try:
                with stage(
                    "environment",
                    npm=self._settings.installer.executable,
                    node=self._settings.node.executable,
                ):
                    self._check_environment(root)
            except environment.EnvironmentCheckError as exc:
                report = remove_generated_files(root, cleanup.known_generated_files)
                return self._failure(
                    OP,
                    "ENVIRONMENT_CHECK_FAILED",
                    str(exc),
                    detail=_rollback_detail(report),
                )

        self._progress(f"Creating a new seneca service in {root}.")
        write_manifest(root, initial_manifest(app_name, pkg.manifest_version))

        return self.run(
            root,
            app_name,
            scripts_version,
            verbose=verbose,
            original_directory=original_directory,
        )

    def run(
        self,
        root: Path,
        app_name: str,
        version: str | None,
        *,
        verbose: bool = False,
        original_directory: Path,
    ) -> ServiceResult:
        """RESOLVE → INSTALL → PIN → DELEGATE for a directory holding the initial manifest."""
        pkg = self._settings.package
        warnings: list[str] = []

        reference = resolve_install_package(
            version, original_directory, base_package=pkg.base_package
        )
        dependencies = list(dict.fromkeys([*pkg.dependencies, reference]))

        self._progress("Installing packages. This might take a couple of minutes.")

        # RESOLVE + INSTALL: any failure rolls back
        try:
            with stage("resolve", reference=reference, kind=classify_reference(reference).value):
                package_name = extract_package_name(
                    reference,
                    project_root=root,
                    warnings=warnings,
                    timeout=self._settings.download.timeout,
                )
            with stage("install", dependencies=len(dependencies)):
                installer.install(
                    root,
                    dependencies,
                    verbose=verbose,
                    executable=self._settings.installer.executable,
                    loglevel=self._settings.installer.loglevel,
                )
        except Exception as exc:
            return self._abort(root, exc, warnings)

        # PIN: fatal, no rollback
        try:
            with stage("pin", packages=len(pkg.runtime_dependencies)):
                patches = set_caret_range_for_runtime_deps(
                    root, package_name, pkg.runtime_dependencies, warnings=warnings
                )
        except (ManifestError, OSError, ValueError) as exc:
            return self._failure(
                OP,
                "MANIFEST_INVALID",
                str(exc),
                detail={"root": str(root), "package": package_name},
                warnings=warnings,
            )

        # DELEGATE
        manager = InitializerManager(node_executable=self._settings.node.executable)
        try:
            with stage("delegate", package=package_name):
                manager.locate(root, package_name)
                manager.run_initializer(root, app_name, verbose, original_directory)
        except InitializerNotFoundError as exc:
            return self._failure(
                OP,
                "INITIALIZER_NOT_FOUND",
                str(exc),
                detail={"root": str(root), "package": package_name},
                warnings=warnings,
            )
        except Exception as exc:
            logger.debug("Initializer failed", exc_info=True)
            return self._failure(
                OP,
                "INITIALIZER_FAILED",
                str(exc),
                detail={"root": str(root), "package": package_name},
                warnings=warnings,
            )

        return ServiceResult(
            ok=True,
            op=OP,
            data={
                "root": str(root),
                "app_name": app_name,
                "package": package_name,
                "reference": reference,
                "dependencies": dependencies,
                "pinned": {p.name: p.patched for p in patches},
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_environment(self, root: Path) -> None:
        npm = self._settings.installer
        node = self._settings.node
        environment.check_npm_can_read_cwd(root, npm.executable)
        environment.check_node_version(node.executable, node.min_version)
        environment.check_npm_version(npm.executable, npm.min_version)

    def _abort(self, root: Path, exc: Exception, warnings: list[str]) -> ServiceResult:
        """Classify a resolve/install failure and roll back generated files."""
        command = getattr(exc, "command", None)
        if command:
            code = "INSTALL_ABORTED"
            message = f"Aborting installation. {command} has failed."
        else:
            code = "UNEXPECTED_ERROR"
            message = f"Aborting installation. Unexpected error. Please report it as a bug: {exc}"
            logger.error("Unexpected error during installation", exc_info=exc)

        report = remove_generated_files(root, self._settings.cleanup.known_generated_files)
        detail = _rollback_detail(report)
        if command:
            detail["command"] = command
        return self._failure(OP, code, message, detail=detail, warnings=warnings)


def _rollback_detail(report: RollbackReport) -> dict[str, Any]:
    return {
        "root": str(report.root),
        "deleted": list(report.deleted),
        "removed_root": report.removed_root,
    }
