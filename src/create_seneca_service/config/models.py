"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``create-seneca-service.toml``
only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


def _reject_duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            msg = f"Duplicate entry: {value!r}"
            raise ValueError(msg)
        seen.add(value)
    return values


class PackageConfig(BaseModel):
    """[package] section."""

    model_config = {"frozen": True}

    base_package: str = "seneca-scripts"
    manifest_version: str = "0.1.0"
    dependencies: list[str] = Field(
        default_factory=lambda: [
            # Base
            "seneca",
            "seneca-balance-client",
            # Testing
            "code",
            "lab",
            # Logging
            "pino",
            "seneca-pino-adapter",
        ]
    )
    runtime_dependencies: list[str] = Field(
        default_factory=lambda: [
            "seneca",
            "seneca-balance-client",
            "pino",
            "seneca-pino-adapter",
        ]
    )

    @field_validator("dependencies", "runtime_dependencies")
    @classmethod
    def _unique(cls, values: list[str]) -> list[str]:
        return _reject_duplicates(values)


class InstallerConfig(BaseModel):
    """[installer] section."""

    model_config = {"frozen": True}

    executable: str = "npm"
    loglevel: str = "error"
    min_version: str = "5.0.0"


class NodeConfig(BaseModel):
    """[node] section."""

    model_config = {"frozen": True}

    executable: str = "node"
    min_version: str = "8.0.0"


class CleanupConfig(BaseModel):
    """[cleanup] section."""

    model_config = {"frozen": True}

    known_generated_files: list[str] = Field(
        default_factory=lambda: ["package.json", "node_modules"]
    )
    # Allowed to remain after a failed install, removed by the next run.
    error_log_patterns: list[str] = Field(
        default_factory=lambda: ["npm-debug.log", "yarn-error.log", "yarn-debug.log"]
    )


class ChecksConfig(BaseModel):
    """[checks] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class DownloadConfig(BaseModel):
    """[download] section."""

    model_config = {"frozen": True}

    timeout: float = 60.0

