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

"""Tests for sidbuild.build.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from sidbuild.build.process import EXIT_NOT_EXECUTABLE, run_tool


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_success_captures_output(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_tool(_python("print('Found xrdp 1:0.2.17-1 in sid')"))
    assert result.ok
    assert result.output == "Found xrdp 1:0.2.17-1 in sid\n"
    assert "Found xrdp" in capsys.readouterr().out


def test_stderr_is_merged_and_status_kept() -> None:
    code = "import sys; print('out', flush=True); sys.stderr.write('err\\n'); sys.exit(3)"
    result = run_tool(_python(code), echo=False)
    assert result.returncode == 3
    assert not result.ok
    assert "out" in result.output
    assert "err" in result.output


def test_no_echo(capsys: pytest.CaptureFixture[str]) -> None:
    run_tool(_python("print('quiet')"), echo=False)
    assert capsys.readouterr().out == ""


def test_log_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "tool.log"
    result = run_tool(_python("print('hello')"), log_path=log_path, echo=False)
    content = log_path.read_text()
    assert result.log_path == log_path
    assert content.startswith("$ ")
    assert content.endswith("hello\n")


def test_cwd_and_env(tmp_path: Path) -> None:
    code = "import os; print(os.getcwd()); print(os.environ['PBUILDFOLDER'])"
    result = run_tool(_python(code), cwd=tmp_path, env={"PBUILDFOLDER": "/srv/pb"}, echo=False)
    lines = result.output.splitlines()
    assert Path(lines[0]).resolve() == tmp_path.resolve()
    assert lines[1] == "/srv/pb"


def test_missing_program(tmp_path: Path) -> None:
    log_path = tmp_path / "missing.log"
    result = run_tool(["sidbuild-no-such-tool"], log_path=log_path, echo=False)
    assert result.returncode == EXIT_NOT_EXECUTABLE
    assert "sidbuild-no-such-tool" in result.output
    assert "sidbuild-no-such-tool" in log_path.read_text()
