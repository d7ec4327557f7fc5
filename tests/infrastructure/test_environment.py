"""Tests for npm/node toolchain probes."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from create_seneca_service.infrastructure import environment


def _stdout(text: str) -> MagicMock:
    return MagicMock(return_value=subprocess.CompletedProcess([], 0, stdout=text, stderr=""))


class TestProbeVersion:
    def test_meets_minimum(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("v18.17.1\n"))
        probe = environment.probe_version("node", "8.0.0")
        assert probe.version == "18.17.1"
        assert probe.meets_minimum

    def test_below_minimum(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("4.2.0\n"))
        assert not environment.probe_version("npm", "5.0.0").meets_minimum

    def test_cannot_start(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            environment.subprocess, "run", MagicMock(side_effect=FileNotFoundError("npm"))
        )
        probe = environment.probe_version("npm", "5.0.0")
        assert probe.version is None
        assert not probe.meets_minimum


class TestCheckNpmVersion:
    def test_ok(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("10.2.4\n"))
        assert environment.check_npm_version().version == "10.2.4"

    def test_too_old(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("3.10.10\n"))
        with pytest.raises(environment.EnvironmentCheckError, match="You are using npm 3.10.10"):
            environment.check_npm_version()

    def test_missing_npm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            environment.subprocess, "run", MagicMock(side_effect=FileNotFoundError("npm"))
        )
        with pytest.raises(environment.EnvironmentCheckError, match="Couldn't find npm version"):
            environment.check_npm_version()


class TestCheckNodeVersion:
    def test_too_old(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("v6.17.1\n"))
        with pytest.raises(environment.EnvironmentCheckError, match="Node 6.17.1"):
            environment.check_node_version()

    def test_missing_node_passes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            environment.subprocess, "run", MagicMock(side_effect=FileNotFoundError("node"))
        )
        assert environment.check_node_version().version is None


class TestCheckNpmCanReadCwd:
    def test_matching_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        output = f"; cli configs\n cwd = {tmp_path}\n user-agent = npm\n"
        run = _stdout(output)
        monkeypatch.setattr(environment.subprocess, "run", run)
        environment.check_npm_can_read_cwd(tmp_path)
        assert run.call_args.kwargs["cwd"] == tmp_path

    def test_mismatched_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout(" cwd = C:\\elsewhere\n"))
        with pytest.raises(environment.EnvironmentCheckError, match="C:\\\\elsewhere"):
            environment.check_npm_can_read_cwd(tmp_path)

    def test_no_cwd_line_passes(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(environment.subprocess, "run", _stdout("; nothing here\n"))
        environment.check_npm_can_read_cwd(tmp_path)

    def test_spawn_failure_passes(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            environment.subprocess, "run", MagicMock(side_effect=OSError("boom"))
        )
        environment.check_npm_can_read_cwd(tmp_path)
