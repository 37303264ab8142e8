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

"""sidbuild-specific exception types with associated exit codes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SidbuildError(Exception):
    """Base class for sidbuild errors with an exit code."""

    message: str = "An error occurred"
    exit_code: int = field(default=1)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class ConfigError(SidbuildError):
    exit_code: int = field(default=1)


@dataclass
class InvalidCodenameError(SidbuildError):
    """Raised when a distribution codename is not all lowercase letters."""

    codename: str = ""


@dataclass
class InvalidPackageNameError(SidbuildError):
    """Raised when a requested name is not a valid Debian source package name."""

    package: str = ""


@dataclass
class ToolMissingError(SidbuildError):
    """Raised when required external programs are not on PATH."""

    missing: list[str] = field(default_factory=list)


@dataclass
class WorkspaceError(SidbuildError):
    """Raised when a workspace directory cannot be created."""

    path: Path | None = None


@dataclass
class WorkspaceLockedError(SidbuildError):
    """Raised when another run holds the workspace lock."""

    lock_path: Path | None = None


@dataclass
class KeyringSyncError(SidbuildError):
    pass


@dataclass
class DownloadError(SidbuildError):
    """Raised when the source downloader exits non-zero."""

    package: str = ""


@dataclass
class PackageNotFoundError(SidbuildError):
    """Raised when the downloader output has no Found line for a package."""

    package: str = ""


@dataclass
class DownloaderOutputError(SidbuildError):
    """Raised when the Found line cannot be interpreted."""

    package: str = ""
    line: str = ""


@dataclass
class DescriptorMissingError(SidbuildError):
    package: str = ""
    path: Path | None = None


@dataclass
class VerificationError(SidbuildError):
    package: str = ""
    path: Path | None = None


@dataclass
class ChrootError(SidbuildError):
    dist: str = ""
    operation: str = ""


@dataclass
class BuildError(SidbuildError):
    package: str = ""


@dataclass
class ArtifactCopyError(SidbuildError):
    package: str = ""
    path: Path | None = None


@dataclass
class NoDistributionFilesError(SidbuildError):
    """Raised by `clean DIST` when no base tarball exists for DIST."""

    dist: str = ""
