# This file is part of sidbuild, a tool for rebuilding Debian unstable packages
# for other Debian and Ubuntu releases.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only
#
# sidbuild is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License version 3, as published by the
# Free Software Foundation.
#
# sidbuild is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranties of MERCHANTABILITY,
# SATISFACTORY QUALITY, or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# sidbuild. If not, see <http://www.gnu.org/licenses/>.

"""Tests for sidbuild.build.pbuilder module."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from sidbuild.build import pbuilder
from sidbuild.core.exceptions import BuildError, ChrootError
from sidbuild.core.paths import Workspace, ensure_directories


@pytest.fixture
def ws(tmp_path: Path) -> Workspace:
    workspace = Workspace(root=tmp_path)
    ensure_directories(workspace, "focal")
    return workspace


class TestCommands:
    """Tests for the command line builders."""

    def test_chroot_command(self) -> None:
        cmd = pbuilder.build_chroot_command("focal", "create", Path("/ws/.pbuilderrc"))
        assert cmd == ["pbuilder-dist", "focal", "create", "--configfile", "/ws/.pbuilderrc"]

    def test_build_command(self) -> None:
        cmd = pbuilder.build_package_command(
            "focal", Path("/ws/.pbuilderrc"), Path("/ws/focal_build_result"), Path("/ws/src/xrdp_0.2.17-1.dsc")
        )
        assert cmd == [
            "pbuilder-dist",
            "focal",
            "build",
            "--configfile",
            "/ws/.pbuilderrc",
            "--buildresult",
            "/ws/focal_build_result",
            "/ws/src/xrdp_0.2.17-1.dsc",
        ]

    def test_foreign_arch_follows_dist(self) -> None:
        assert pbuilder.build_chroot_command("focal", "update", Path("/ws/.pbuilderrc"), "i386")[:4] == [
            "pbuilder-dist",
            "focal",
            "i386",
            "update",
        ]
        cmd = pbuilder.build_package_command(
            "focal", Path("/rc"), Path("/ws/focal-i386_build_result"), Path("/src/a_1.dsc"), "i386"
        )
        assert cmd[:4] == ["pbuilder-dist", "focal", "i386", "build"]

    def test_env_sets_pbuildfolder(self, ws: Workspace) -> None:
        assert pbuilder.pbuilder_env(ws) == {"PBUILDFOLDER": str(ws.pbuilder_dir)}


class TestPrepareChroot:
    """Tests for prepare_chroot function."""

    def test_create_when_no_base(self, fake_tools, ws: Workspace) -> None:
        assert pbuilder.prepare_chroot(ws, "focal") == "create"
        assert fake_tools.tool_calls("pbuilder-dist") == [
            ["pbuilder-dist", "focal", "create", "--configfile", str(ws.config_file)]
        ]
        assert ws.base_tgz("focal").is_file()

    def test_update_when_base_exists(self, fake_tools, ws: Workspace) -> None:
        ws.base_tgz("focal").write_bytes(b"base")
        assert pbuilder.prepare_chroot(ws, "focal") == "update"
        assert fake_tools.tool_calls("pbuilder-dist")[0][2] == "update"

    def test_failure(self, fake_tools, ws: Workspace) -> None:
        fake_tools.fail[("pbuilder-dist", "create")] = 1
        with pytest.raises(ChrootError) as exc_info:
            pbuilder.prepare_chroot(ws, "focal")
        assert exc_info.value.message == "Failed to create focal environment."
        assert exc_info.value.operation == "create"

    def test_foreign_arch(self, fake_tools, ws: Workspace) -> None:
        ws.base_tgz("focal").write_bytes(b"base")
        assert pbuilder.prepare_chroot(ws, "focal", arch="i386") == "create"
        assert fake_tools.tool_calls("pbuilder-dist")[0][:4] == ["pbuilder-dist", "focal", "i386", "create"]
        assert ws.base_tgz("focal", "i386").is_file()

    def test_foreign_arch_failure_names_chroot(self, fake_tools, ws: Workspace) -> None:
        fake_tools.fail[("pbuilder-dist", "create")] = 1
        with pytest.raises(ChrootError, match="Failed to create focal-i386 environment."):
            pbuilder.prepare_chroot(ws, "focal", arch="i386")

    def test_sudo_refused(self, fake_tools, ws: Workspace, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(pbuilder, "ensure_sudo", lambda: False)
        with pytest.raises(ChrootError, match="sudo"):
            pbuilder.prepare_chroot(ws, "focal")
        assert fake_tools.calls == []


class TestBuildPackage:
    """Tests for build_package function."""

    def test_success(self, fake_tools, ws: Workspace) -> None:
        dsc = ws.source_dir / "xrdp_0.2.17-1.dsc"
        pbuilder.build_package(ws, "focal", "xrdp", dsc)
        assert (ws.build_result_dir("focal") / "xrdp_0.2.17-1_amd64.deb").is_file()

    def test_foreign_arch(self, fake_tools, ws: Workspace) -> None:
        ensure_directories(ws, "focal", "i386")
        pbuilder.build_package(ws, "focal", "xrdp", ws.source_dir / "xrdp_0.2.17-1.dsc", arch="i386")
        assert (ws.build_result_dir("focal", "i386") / "xrdp_0.2.17-1_i386.deb").is_file()

    def test_failure(self, fake_tools, ws: Workspace) -> None:
        fake_tools.fail[("pbuilder-dist", "xrdp")] = 2
        with pytest.raises(BuildError) as exc_info:
            pbuilder.build_package(ws, "focal", "xrdp", ws.source_dir / "xrdp_0.2.17-1.dsc")
        assert exc_info.value.message == "Failed to build xrdp."


class TestEnsureSudo:
    """Tests for ensure_sudo function."""

    def test_root_needs_nothing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(pbuilder.os, "geteuid", lambda: 0)
        monkeypatch.setattr(pbuilder.subprocess, "run", _fail_if_called)
        assert pbuilder.ensure_sudo()

    def test_cached_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []
        monkeypatch.setattr(pbuilder.os, "geteuid", lambda: 1000)
        monkeypatch.setattr(pbuilder.shutil, "which", lambda name: "/usr/bin/sudo")
        monkeypatch.setattr(pbuilder.subprocess, "run", _recording(calls, 0))
        assert pbuilder.ensure_sudo()
        assert calls == [["sudo", "-n", "true"]]

    def test_prompt_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []
        monkeypatch.setattr(pbuilder.os, "geteuid", lambda: 1000)
        monkeypatch.setattr(pbuilder.shutil, "which", lambda name: "/usr/bin/sudo")
        monkeypatch.setattr(pbuilder.subprocess, "run", _recording(calls, 1))
        assert not pbuilder.ensure_sudo()
        assert calls == [["sudo", "-n", "true"], ["sudo", "-v"]]


def _fail_if_called(*args, **kwargs):
    raise AssertionError("subprocess.run should not be called")


def _recording(calls: list[list[str]], returncode: int):
    def run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, returncode)

    return run
