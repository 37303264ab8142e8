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

"""Binary package collector.

After pbuilder-dist builds a package, its .deb is copied from the shared
build-result directory into the per-distribution output directory.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sidbuild.core.exceptions import ArtifactCopyError

logger = logging.getLogger(__name__)

ARCH_INDEPENDENT = "all"


@dataclass
class CollectedFile:
    """Information about a collected file."""

    package: str
    source_path: Path
    copied_path: Path
    sha256: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "package": self.package,
            "source_path": str(self.source_path),
            "copied_path": str(self.copied_path),
            "sha256": self.sha256,
            "size": self.size,
        }


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def artifact_names(identifier: str, arch: str) -> list[str]:
    """Candidate .deb names for a `name_version` identifier, best first."""
    names = [f"{identifier}_{arch}.deb"]
    if arch != ARCH_INDEPENDENT:
        names.append(f"{identifier}_{ARCH_INDEPENDENT}.deb")
    return names


def find_artifact(build_result_dir: Path, identifier: str, arch: str) -> Path | None:
    for name in artifact_names(identifier, arch):
        candidate = build_result_dir / name
        if candidate.is_file():
            return candidate
    return None


def collect_artifact(
    package: str,
    identifier: str,
    arch: str,
    build_result_dir: Path,
    output_dir: Path,
) -> CollectedFile:
    """Copy the built .deb for `package` into `output_dir`.

    An existing file of the same name in `output_dir` is overwritten.

    Raises:
        ArtifactCopyError: If no artifact exists or the copy fails.
    """
    expected = build_result_dir / artifact_names(identifier, arch)[0]
    source = find_artifact(build_result_dir, identifier, arch)
    if source is None:
        raise ArtifactCopyError(
            message=f"Failed to copy {expected.name} to {output_dir}: file not found.",
            package=package,
            path=expected,
        )
    if source != expected:
        logger.info("No %s build of %s, collecting %s", arch, package, source.name)

    dest = output_dir / source.name
    try:
        shutil.copy2(source, dest)
    except OSError as e:
        raise ArtifactCopyError(
            message=f"Failed to copy {source.name} to {output_dir}: {e}",
            package=package,
            path=source,
        ) from e

    return CollectedFile(
        package=package,
        source_path=source,
        copied_path=dest,
        sha256=compute_sha256(dest),
        size=dest.stat().st_size,
    )
