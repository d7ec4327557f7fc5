"""BaseService — foundation for create-seneca-service services.

Every service receives the frozen :class:`BootstrapSettings` at
construction time and reads its configuration sections from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from create_seneca_service.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from create_seneca_service.config.settings import BootstrapSettings


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class BootstrapService(BaseService):
            def create_project(self, project_dir: Path, ...) -> ServiceResult:
                cfg = self._settings.package
                ...
    """

    def __init__(self, settings: BootstrapSettings) -> None:
        self._settings = settings

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
            warnings=warnings or [],
        )
