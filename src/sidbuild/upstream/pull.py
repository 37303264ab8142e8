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

"""Source package retrieval with pull-debian-source.

pull-debian-source reports the version it resolved on a line such as:

    Found xorgxrdp 1:0.2.17-1 in sid

followed by one "Downloading ..." line per file it had to fetch (none when
the files are already present). There is no machine-readable output, so
that line is the only way to learn which .dsc was downloaded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sidbuild.build.process import run_tool
from sidbuild.core.exceptions import (
    DescriptorMissingError,
    DownloaderOutputError,
    DownloadError,
    PackageNotFoundError,
)
from sidbuild.debpkg.version import package_identifier, parse_debian_version, strip_epoch

logger = logging.getLogger(__name__)

PULL_COMMAND = "pull-debian-source"
FOUND_PREFIX = "Found"


@dataclass(frozen=True)
class PulledSource:
    """A source package resolved by pull-debian-source."""

    package: str
    version: str

    @property
    def file_version(self) -> str:
        """Version as it appears in file names (no epoch)."""
        return strip_epoch(self.version)

    @property
    def identifier(self) -> str:
        return package_identifier(self.package, self.version)

    @property
    def descriptor_name(self) -> str:
        return f"{self.identifier}.dsc"


def build_pull_command(package: str) -> list[str]:
    # Signatures are checked separately against the freshly synced keyring.
    return [PULL_COMMAND, "--no-verify-signature", "--download-only", package]


def parse_found_line(output: str, package: str) -> PulledSource:
    """Extract the resolved version of `package` from downloader output.

    Raises:
        PackageNotFoundError: If no line has "Found" as its first word.
        DownloaderOutputError: If the Found line is malformed, names another
            package, or carries an invalid Debian version.
    """
    for line in output.splitlines():
        fields = line.split()
        if fields[:1] != [FOUND_PREFIX]:
            continue
        if len(fields) < 3:
            raise DownloaderOutputError(
                message=f"Unexpected {PULL_COMMAND} output for {package}: {line!r}",
                package=package,
                line=line,
            )
        name, version = fields[1], fields[2]
        if name != package:
            raise DownloaderOutputError(
                message=f"{PULL_COMMAND} resolved {package} to source package {name}; request {name} instead",
                package=package,
                line=line,
            )
        try:
            parse_debian_version(version)
        except ValueError as e:
            raise DownloaderOutputError(
                message=f"Invalid version {version!r} in {PULL_COMMAND} output for {package}",
                package=package,
                line=line,
            ) from e
        return PulledSource(package=package, version=version)

    raise PackageNotFoundError(
        message=f"Package {package} was not found upstream.",
        package=package,
    )


def pull_source(package: str, source_dir: Path, log_path: Path | None = None) -> PulledSource:
    """Download the latest source of `package` into `source_dir`.

    Returns the resolved source once its .dsc is known to be on disk.

    Raises:
        DownloadError: If pull-debian-source fails.
        PackageNotFoundError, DownloaderOutputError: See parse_found_line.
        DescriptorMissingError: If the expected .dsc does not exist.
    """
    result = run_tool(build_pull_command(package), cwd=source_dir, log_path=log_path)
    if not result.ok:
        raise DownloadError(message=f"Failed to pull {package}.", package=package)

    pulled = parse_found_line(result.output, package)
    logger.debug("Resolved %s to %s", package, pulled.version)

    dsc_path = source_dir / pulled.descriptor_name
    if not dsc_path.is_file():
        raise DescriptorMissingError(
            message=f"File {pulled.descriptor_name} does not exist for package {package}.",
            package=package,
            path=dsc_path,
        )
    return pulled
