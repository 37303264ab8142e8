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

"""Implementation of `sidbuild build` command.

Downloads the named source packages from Debian unstable, verifies them
with the current Debian keyring and builds them in order inside a
pbuilder-dist chroot for the requested release.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import typer

from sidbuild.build.errors import EXIT_INTERRUPTED, EXIT_SUCCESS, log_phase_event, phase_error
from sidbuild.build.keyring import DEFAULT_KEYRING_SOURCE, sync_keyring
from sidbuild.build.pbuilder import prepare_chroot
from sidbuild.build.pbuilderrc import write_pbuilder_config
from sidbuild.build.phases import acquire_sources, build_packages
from sidbuild.build.tools import require_tools
from sidbuild.core.config import load_config
from sidbuild.core.context import BuildRequest
from sidbuild.core.exceptions import SidbuildError
from sidbuild.core.lock import workspace_lock
from sidbuild.core.paths import DEFAULT_KEYRING_FILENAME, Workspace, chroot_name, ensure_directories
from sidbuild.core.run import RunContext, activity, error
from sidbuild.core.spinner import activity_spinner
from sidbuild.debpkg.names import validate_source_names
from sidbuild.target.arch import chroot_arch, resolve_arch
from sidbuild.target.codename import validate_codename


def build(
    dist: str = typer.Argument(..., help="Codename of the Ubuntu or Debian release to build for (e.g., focal)"),
    packages: list[str] = typer.Argument(..., help="Source packages to build, in build order"),
    workspace: Path | None = typer.Option(None, "-w", "--workspace", help="Workspace directory (default: from config)"),
    arch: str = typer.Option("", "--arch", help="Debian architecture of the built packages (default: from config)"),
    no_spinner: bool = typer.Option(False, "-q", "--no-spinner", help="Disable spinner output (quiet)"),
) -> None:
    """Build the packages for the specified distribution.

    Packages are built in the order given, so a package can build-depend on
    one listed before it.

    Examples:
        sidbuild build focal xrdp xorgxrdp
        sidbuild build buster xrdp
    """
    request = BuildRequest(
        dist=dist,
        packages=tuple(packages),
        workspace=workspace,
        arch=arch,
        spinner=not no_spinner,
    )
    sys.exit(run_build(request))


def run_build(request: BuildRequest) -> int:
    """Run a build and return its exit code (without sys.exit)."""
    # Usage errors are reported before anything is written, config included.
    try:
        dist = validate_codename(request.dist)
        packages = validate_source_names(request.packages)
    except SidbuildError as e:
        error(e.message)
        return e.exit_code

    cfg = load_config()
    try:
        arch = resolve_arch(request.arch or str(cfg.get("build", {}).get("arch", "host")))
        require_tools()
    except SidbuildError as e:
        error(e.message)
        return e.exit_code

    workspace = Workspace.from_config(cfg, request.workspace)
    spinner = request.spinner and bool(cfg.get("behavior", {}).get("spinner", True))

    with RunContext("build", Path(cfg["paths"]["runs_root"])) as run:
        run.write_summary(
            dist=dist,
            arch=arch,
            packages=packages,
            workspace=str(workspace.root),
        )
        try:
            with workspace_lock(workspace.root):
                return _run_build(packages, dist, arch, workspace, cfg, run, spinner)
        except SidbuildError as e:
            return phase_error(run, "workspace", e.message, e.exit_code)
        except KeyboardInterrupt:
            return phase_error(run, "workspace", "Interrupted", EXIT_INTERRUPTED)


def _run_build(
    packages: list[str],
    dist: str,
    arch: str,
    workspace: Workspace,
    cfg: dict[str, Any],
    run: RunContext,
    spinner: bool,
) -> int:
    keyring_cfg = cfg.get("keyring", {})
    keyring_file = workspace.keyring_file(keyring_cfg.get("filename", DEFAULT_KEYRING_FILENAME))
    pbuilder_arch = chroot_arch(arch)
    chroot = chroot_name(dist, pbuilder_arch)

    phase = "workspace"
    try:
        created = ensure_directories(workspace, dist, pbuilder_arch)
        run.log_event({"event": "workspace.ready", "root": str(workspace.root), "created": [str(p) for p in created]})
        for path in created:
            activity("workspace", f"Created {path}")

        phase = "keyring"
        with activity_spinner("keyring", "Downloading Debian keyring", disable=not spinner):
            sync_keyring(
                workspace.keyring_dir,
                keyring_cfg.get("source", DEFAULT_KEYRING_SOURCE),
                log_path=run.log_path("keyring"),
            )
        run.log_event({"event": "keyring.synced", "path": str(keyring_file)})

        phase = "config"
        files = write_pbuilder_config(workspace, dist, pbuilder_arch)
        run.log_event(
            {"event": "config.written", "config_file": str(files.config_file), "hook_file": str(files.hook_file)}
        )

        phase = "fetch"
        identifiers = acquire_sources(packages, workspace, keyring_file, run)
        run.write_summary(identifiers=identifiers)

        phase = "chroot"
        activity("chroot", f"Preparing {chroot} environment")
        operation = prepare_chroot(workspace, dist, log_path=run.log_path("chroot"), arch=pbuilder_arch)
        log_phase_event(
            run, "chroot", f"{chroot} environment ready ({operation})", "chroot.ready", chroot=chroot, operation=operation
        )

        phase = "build"
        collected = build_packages(dist, arch, identifiers, workspace, run, pbuilder_arch)
    except SidbuildError as e:
        return phase_error(run, phase, e.message, e.exit_code)
    except KeyboardInterrupt:
        return phase_error(run, phase, "Interrupted", EXIT_INTERRUPTED)

    run.write_summary(artifacts=[c.to_dict() for c in collected])
    activity("build", "Done.")
    return EXIT_SUCCESS
