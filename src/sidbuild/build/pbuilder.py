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

"""pbuilder-dist helpers for sidbuild builds.

All invocations run with PBUILDFOLDER pointing into the workspace and with
the generated .pbuilderrc, so a user's own pbuilder setup is never touched.

pbuilder-dist takes an optional architecture after the distribution. Without
one it uses the host architecture; with one it names every chroot file
`<DIST>-<ARCH>...` instead of `<DIST>...`.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from sidbuild.build.process import run_tool
from sidbuild.core.exceptions import BuildError, ChrootError
from sidbuild.core.paths import Workspace, chroot_name

logger = logging.getLogger(__name__)

PBUILDER_DIST = "pbuilder-dist"


def pbuilder_env(workspace: Workspace) -> dict[str, str]:
    """Environment that roots every pbuilder-dist file in the workspace."""
    return {"PBUILDFOLDER": str(workspace.pbuilder_dir)}


def chroot_operation(workspace: Workspace, dist: str, arch: str | None = None) -> str:
    """Return "update" if the base tarball for the chroot exists, else "create"."""
    return "update" if workspace.base_tgz(dist, arch).is_file() else "create"


def _target(dist: str, arch: str | None) -> list[str]:
    return [dist, arch] if arch else [dist]


def build_chroot_command(dist: str, operation: str, config_file: Path, arch: str | None = None) -> list[str]:
    return [PBUILDER_DIST, *_target(dist, arch), operation, "--configfile", str(config_file)]


def build_package_command(
    dist: str,
    config_file: Path,
    build_result_dir: Path,
    dsc_path: Path,
    arch: str | None = None,
) -> list[str]:
    return [
        PBUILDER_DIST,
        *_target(dist, arch),
        "build",
        "--configfile",
        str(config_file),
        "--buildresult",
        str(build_result_dir),
        str(dsc_path),
    ]


def _sudo_credentials_cached() -> bool:
    """Check if sudo credentials are already cached (no password prompt needed)."""
    result = subprocess.run(
        ["sudo", "-n", "true"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )
    return result.returncode == 0


def _ensure_sudo_cached() -> bool:
    """Prompt for the sudo password upfront and cache credentials."""
    print("\n[chroot] sudo access required for pbuilder")
    result = subprocess.run(["sudo", "-v"], check=False)
    return result.returncode == 0


def ensure_sudo() -> bool:
    """Make sure pbuilder-dist will not stop halfway to ask for a password.

    Returns True when running as root, when sudo is unavailable (and
    pbuilder-dist will report the problem itself) or when credentials are
    cached after this call.
    """
    if os.geteuid() == 0 or shutil.which("sudo") is None:
        return True
    if _sudo_credentials_cached():
        return True
    return _ensure_sudo_cached()


def prepare_chroot(
    workspace: Workspace,
    dist: str,
    log_path: Path | None = None,
    arch: str | None = None,
) -> str:
    """Create the chroot for `dist`, or update it if it already exists.

    `arch` is passed to pbuilder-dist; None builds for the host.

    Returns the operation that was run ("create" or "update").

    Raises:
        ChrootError: If sudo authentication or pbuilder-dist fails.
    """
    operation = chroot_operation(workspace, dist, arch)
    if not ensure_sudo():
        raise ChrootError(message="sudo authentication failed", dist=dist, operation=operation)

    result = run_tool(
        build_chroot_command(dist, operation, workspace.config_file, arch),
        env=pbuilder_env(workspace),
        log_path=log_path,
    )
    if not result.ok:
        raise ChrootError(
            message=f"Failed to {operation} {chroot_name(dist, arch)} environment.",
            dist=dist,
            operation=operation,
        )
    return operation


def build_package(
    workspace: Workspace,
    dist: str,
    package: str,
    dsc_path: Path,
    log_path: Path | None = None,
    arch: str | None = None,
) -> None:
    """Build `dsc_path` in the `dist` chroot into its build-result directory.

    Raises:
        BuildError: If pbuilder-dist fails.
    """
    logger.debug("Building %s from %s", package, dsc_path)
    result = run_tool(
        build_package_command(dist, workspace.config_file, workspace.build_result_dir(dist, arch), dsc_path, arch),
        env=pbuilder_env(workspace),
        log_path=log_path,
    )
    if not result.ok:
        raise BuildError(message=f"Failed to build {package}.", package=package)
