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

"""Pytest fixtures and configuration for sidbuild tests."""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Generator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from unittest import mock

import pytest

from sidbuild.build.process import ToolResult
from sidbuild.core.paths import Workspace
from sidbuild.debpkg.version import package_identifier


@pytest.fixture
def temp_home(monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory and set HOME/XDG paths."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
        monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
        monkeypatch.setattr(Path, "home", lambda: home)
        yield home


@pytest.fixture
def mock_config(temp_home: Path) -> Path:
    """Create a config file whose workspace and runs live in the temp home."""
    config_dir = temp_home / ".config" / "sidbuild"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"
    config_file.write_text(f"""
paths:
  workspace_root: "{temp_home / 'workspace'}"
  runs_root: "~/.cache/sidbuild/runs"

keyring:
  source: "keyring.debian.org::keyrings/keyrings/debian-keyring.gpg"
  filename: "debian-keyring.gpg"

build:
  arch: "amd64"

behavior:
  spinner: false
""")
    return config_file


@pytest.fixture
def workspace(temp_home: Path) -> Workspace:
    return Workspace(root=temp_home / "workspace")


@pytest.fixture
def non_tty_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mock sys.stdout.isatty() to return False."""
    mock_stdout = mock.MagicMock()
    mock_stdout.isatty.return_value = False
    monkeypatch.setattr("sys.stdout", mock_stdout)


DSC_TEMPLATE = """\
Format: 3.0 (quilt)
Source: {package}
Binary: {package}
Architecture: any
Version: {version}
Maintainer: Debian Remote Maintainers <debian-remote@lists.debian.org>
"""


@dataclass
class FakeTools:
    """Stand-in for run_tool that imitates the external Debian tools.

    Attributes:
        versions: Version reported by pull-debian-source per package.
        arch: Host architecture, used for the .deb files "built" by
            pbuilder-dist when no architecture argument is given.
        fail: Exit status to return for (tool, package) pairs.
        interrupt: (tool, package) pairs that raise KeyboardInterrupt.
        calls: Every command line received, in order.
    """

    versions: dict[str, str] = field(default_factory=dict)
    arch: str = "amd64"
    fail: dict[tuple[str, str], int] = field(default_factory=dict)
    interrupt: set[tuple[str, str]] = field(default_factory=set)
    calls: list[list[str]] = field(default_factory=list)

    def __call__(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        log_path: Path | None = None,
        echo: bool = True,
    ) -> ToolResult:
        command = [str(c) for c in cmd]
        self.calls.append(command)
        tool = command[0]
        handler: Callable[..., tuple[str, int]] = getattr(self, "_" + tool.replace("-", "_"))
        output, returncode = handler(command, cwd, dict(env or {}))
        return ToolResult(command=command, returncode=returncode, output=output, log_path=log_path)

    def tool_calls(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if c[0] == tool]

    def _status(self, tool: str, package: str) -> int:
        if (tool, package) in self.interrupt:
            raise KeyboardInterrupt
        return self.fail.get((tool, package), 0)

    def _rsync(self, command: list[str], cwd: Path | None, env: dict[str, str]) -> tuple[str, int]:
        rc = self._status("rsync", "")
        if rc == 0:
            (Path(command[-1]) / "debian-keyring.gpg").write_bytes(b"keys")
        return "", rc

    def _pull_debian_source(self, command: list[str], cwd: Path | None, env: dict[str, str]) -> tuple[str, int]:
        package = command[-1]
        rc = self._status("pull-debian-source", package)
        if rc != 0:
            return f"E: Unable to find source package {package}\n", rc
        assert cwd is not None
        version = self.versions[package]
        dsc = cwd / f"{package_identifier(package, version)}.dsc"
        dsc.write_text(DSC_TEMPLATE.format(package=package, version=version))
        return f"Found {package} {version} in sid\n", 0

    def _dscverify(self, command: list[str], cwd: Path | None, env: dict[str, str]) -> tuple[str, int]:
        package = Path(command[-1]).name.split("_", 1)[0]
        rc = self._status("dscverify", package)
        return ("Good signature\n" if rc == 0 else "No valid signature\n"), rc

    def _pbuilder_dist(self, command: list[str], cwd: Path | None, env: dict[str, str]) -> tuple[str, int]:
        dist = command[1]
        if command[2] in ("create", "update", "build"):
            arch, operation = None, command[2]
        else:
            arch, operation = command[2], command[3]
        chroot = f"{dist}-{arch}" if arch else dist
        pbuilder_dir = Path(env["PBUILDFOLDER"])
        if operation in ("create", "update"):
            rc = self._status("pbuilder-dist", operation)
            if rc == 0:
                (pbuilder_dir / f"{chroot}-base.tgz").write_bytes(b"base")
            return "", rc

        dsc = Path(command[-1])
        identifier = dsc.stem
        package = identifier.split("_", 1)[0]
        rc = self._status("pbuilder-dist", package)
        if rc == 0:
            build_result = Path(command[command.index("--buildresult") + 1])
            (build_result / f"{identifier}_{arch or self.arch}.deb").write_bytes(f"deb {identifier}".encode())
        return "", rc


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    """Replace every external tool invocation with FakeTools."""
    tools = FakeTools()
    for module in (
        "sidbuild.build.keyring",
        "sidbuild.upstream.pull",
        "sidbuild.upstream.verify",
        "sidbuild.build.pbuilder",
    ):
        monkeypatch.setattr(f"{module}.run_tool", tools)
    monkeypatch.setattr("sidbuild.build.pbuilder.ensure_sudo", lambda: True)
    monkeypatch.setattr("sidbuild.build.tools.find_tool", lambda name: Path(f"/usr/bin/{name}"))
    monkeypatch.setattr("platform.machine", lambda: "x86_64")
    return tools
