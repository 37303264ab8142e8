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

"""Workspace layout and directory creation for sidbuild.

Everything sidbuild keeps between runs lives under a single workspace root:

    source-packages/                 downloaded source packages
    <DIST>-deb-packages/             binary packages built for DIST
    pbuilder-working-dir/            PBUILDFOLDER for pbuilder-dist
        <DIST>-base.tgz              chroot base tarball
        <DIST>_build_result/         pbuilder build results (local repo)
        <DIST>_result/               pbuilder-dist default result dir
        <DIST>-<ARCH>-base.tgz       the same three for a non-host ARCH
        <DIST>-<ARCH>_build_result/
        <DIST>-<ARCH>_result/
        config/.pbuilderrc
        config/pbuilder-hooks/D10addsource
        keyring/debian-keyring.gpg
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sidbuild.core.exceptions import WorkspaceError

logger = logging.getLogger(__name__)

SOURCE_DIR_NAME = "source-packages"
PBUILDER_DIR_NAME = "pbuilder-working-dir"
CONFIG_DIR_NAME = "config"
CONFIG_FILE_NAME = ".pbuilderrc"
HOOKS_DIR_NAME = "pbuilder-hooks"
HOOK_FILE_NAME = "D10addsource"
KEYRING_DIR_NAME = "keyring"
DEFAULT_KEYRING_FILENAME = "debian-keyring.gpg"


def chroot_name(dist: str, arch: str | None = None) -> str:
    """Name pbuilder-dist gives the chroot of `dist` for `arch`.

    A host architecture chroot (`arch` None) is named after the distribution
    alone.
    """
    return f"{dist}-{arch}" if arch else dist


@dataclass(frozen=True)
class Workspace:
    """Paths of a sidbuild workspace rooted at `root`."""

    root: Path

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any], override: Path | None = None) -> Workspace:
        """Resolve the workspace root from an explicit override or the config."""
        if override is not None:
            root = override
        else:
            root = Path(str(cfg.get("paths", {}).get("workspace_root", ".")))
        return cls(root=root.expanduser().resolve())

    @property
    def source_dir(self) -> Path:
        return self.root / SOURCE_DIR_NAME

    @property
    def pbuilder_dir(self) -> Path:
        return self.root / PBUILDER_DIR_NAME

    @property
    def config_dir(self) -> Path:
        return self.pbuilder_dir / CONFIG_DIR_NAME

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @property
    def hooks_dir(self) -> Path:
        return self.config_dir / HOOKS_DIR_NAME

    @property
    def hook_file(self) -> Path:
        return self.hooks_dir / HOOK_FILE_NAME

    @property
    def keyring_dir(self) -> Path:
        return self.pbuilder_dir / KEYRING_DIR_NAME

    def keyring_file(self, filename: str = DEFAULT_KEYRING_FILENAME) -> Path:
        return self.keyring_dir / filename

    def output_dir(self, dist: str) -> Path:
        """Directory that receives the binary packages built for `dist`."""
        return self.root / f"{dist}-deb-packages"

    def build_result_dir(self, dist: str, arch: str | None = None) -> Path:
        return self.pbuilder_dir / f"{chroot_name(dist, arch)}_build_result"

    def result_dir(self, dist: str, arch: str | None = None) -> Path:
        """pbuilder-dist's own default result directory for `dist`."""
        return self.pbuilder_dir / f"{chroot_name(dist, arch)}_result"

    def base_tgz(self, dist: str, arch: str | None = None) -> Path:
        return self.pbuilder_dir / f"{chroot_name(dist, arch)}-base.tgz"

    def foreign_archs(self, dist: str) -> list[str]:
        """Architectures other than the host's that `dist` has chroot files for."""
        if not self.pbuilder_dir.is_dir():
            return []
        pattern = re.compile(rf"{re.escape(dist)}-([a-z0-9]+)(?:-base\.tgz|_build_result|_result)")
        archs = set()
        for entry in self.pbuilder_dir.iterdir():
            match = pattern.fullmatch(entry.name)
            if match:
                archs.add(match.group(1))
        return sorted(archs)

    def dist_artifacts(self, dist: str) -> list[Path]:
        """Paths that belong to a single distribution inside PBUILDFOLDER.

        The host chroot comes first, followed by any chroot built for
        another architecture.
        """
        paths: list[Path] = []
        for arch in [None, *self.foreign_archs(dist)]:
            paths += [self.base_tgz(dist, arch), self.build_result_dir(dist, arch), self.result_dir(dist, arch)]
        return paths

    def has_chroot(self, dist: str) -> bool:
        """Return True if a base tarball exists for `dist` on any architecture."""
        return any(self.base_tgz(dist, arch).is_file() for arch in [None, *self.foreign_archs(dist)])

    def required_dirs(self, dist: str, arch: str | None = None) -> list[Path]:
        return [
            self.build_result_dir(dist, arch),
            self.source_dir,
            self.output_dir(dist),
            self.config_dir,
            self.hooks_dir,
            self.keyring_dir,
        ]


def ensure_directories(workspace: Workspace, dist: str, arch: str | None = None) -> list[Path]:
    """Create the workspace directories for `dist` that do not exist yet.

    `arch` selects a non-host chroot, as for Workspace.build_result_dir.

    Returns the directories that were created by this call.

    Raises:
        WorkspaceError: If a directory cannot be created.
    """
    created: list[Path] = []
    for path in workspace.required_dirs(dist, arch):
        if path.is_dir():
            continue
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(
                message=f"Could not create directory {path}: {e}",
                path=path,
            ) from e
        logger.debug("Created %s", path)
        created.append(path)
    return created
