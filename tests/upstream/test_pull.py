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

"""Tests for sidbuild.upstream.pull module."""

from __future__ import annotations

from pathlib import Path

import pytest

from sidbuild.build.process import ToolResult
from sidbuild.core.exceptions import (
    DescriptorMissingError,
    DownloaderOutputError,
    DownloadError,
    PackageNotFoundError,
)
from sidbuild.upstream import pull
from sidbuild.upstream.pull import PulledSource, build_pull_command, parse_found_line, pull_source

PULL_OUTPUT = """\
Found xrdp 1:0.2.17-1 in sid
Downloading xrdp_0.2.17-1.dsc from deb.debian.org (0.002 MiB)
Downloading xrdp_0.2.17.orig.tar.gz from deb.debian.org (3.364 MiB)
"""


class TestParseFoundLine:
    """Tests for parse_found_line function."""

    def test_epoch_version(self) -> None:
        pulled = parse_found_line(PULL_OUTPUT, "xrdp")
        assert pulled == PulledSource(package="xrdp", version="1:0.2.17-1")
        assert pulled.file_version == "0.2.17-1"
        assert pulled.descriptor_name == "xrdp_0.2.17-1.dsc"

    def test_no_epoch(self) -> None:
        pulled = parse_found_line("Found xorgxrdp 0.9.19-1 in sid\n", "xorgxrdp")
        assert pulled.identifier == "xorgxrdp_0.9.19-1"

    def test_found_line_after_other_output(self) -> None:
        output = "pull-debian-source: Using mirror\n" + PULL_OUTPUT
        assert parse_found_line(output, "xrdp").version == "1:0.2.17-1"

    def test_no_found_line(self) -> None:
        with pytest.raises(PackageNotFoundError) as exc_info:
            parse_found_line("E: Unable to find source package nosuch\n", "nosuch")
        assert exc_info.value.message == "Package nosuch was not found upstream."

    def test_empty_output(self) -> None:
        with pytest.raises(PackageNotFoundError):
            parse_found_line("", "xrdp")

    @pytest.mark.parametrize("line", ["Found xrdp", "Found"])
    def test_malformed_line(self, line: str) -> None:
        with pytest.raises(DownloaderOutputError) as exc_info:
            parse_found_line(line + "\n", "xrdp")
        assert exc_info.value.line == line

    def test_words_starting_with_found_are_skipped(self) -> None:
        output = "Foundry mirror selected\nFound xrdp 1:0.2.17-1 in sid\n"
        assert parse_found_line(output, "xrdp").version == "1:0.2.17-1"

    def test_found_glued_to_name_is_not_a_found_line(self) -> None:
        with pytest.raises(PackageNotFoundError):
            parse_found_line("Foundxrdp 1.0-1 in sid\n", "xrdp")

    def test_other_package_name(self) -> None:
        with pytest.raises(DownloaderOutputError, match="request xrdp instead"):
            parse_found_line("Found xrdp 1:0.2.17-1 in sid\n", "xrdp-pulseaudio-installer")

    def test_invalid_version(self) -> None:
        with pytest.raises(DownloaderOutputError, match="Invalid version"):
            parse_found_line("Found xrdp 0.2.17/bad in sid\n", "xrdp")


def test_pull_command() -> None:
    assert build_pull_command("xrdp") == ["pull-debian-source", "--no-verify-signature", "--download-only", "xrdp"]


class TestPullSource:
    """Tests for pull_source function."""

    def test_downloads_into_source_dir(self, fake_tools, tmp_path: Path) -> None:
        fake_tools.versions["xrdp"] = "1:0.2.17-1"
        pulled = pull_source("xrdp", tmp_path)
        assert pulled.version == "1:0.2.17-1"
        assert (tmp_path / "xrdp_0.2.17-1.dsc").is_file()

    def test_download_failure(self, fake_tools, tmp_path: Path) -> None:
        fake_tools.fail[("pull-debian-source", "xrdp")] = 1
        with pytest.raises(DownloadError) as exc_info:
            pull_source("xrdp", tmp_path)
        assert exc_info.value.message == "Failed to pull xrdp."

    def test_missing_descriptor(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        def fake_run_tool(cmd, **kwargs):
            return ToolResult(command=list(cmd), returncode=0, output="Found xrdp 1:0.2.17-1 in sid\n")

        monkeypatch.setattr(pull, "run_tool", fake_run_tool)
        with pytest.raises(DescriptorMissingError) as exc_info:
            pull_source("xrdp", tmp_path)
        assert exc_info.value.message == "File xrdp_0.2.17-1.dsc does not exist for package xrdp."
        assert exc_info.value.path == tmp_path / "xrdp_0.2.17-1.dsc"
