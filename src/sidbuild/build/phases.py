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

"""Build phase implementations.

Phases follow these conventions:
- Accept only the data they need
- Log activity and structured events through the RunContext
- Raise a SidbuildError subclass on the first failure; nothing is retried
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from sidbuild.build.collector import CollectedFile, collect_artifact
from sidbuild.build.errors import log_phase_event
from sidbuild.build.pbuilder import build_package
from sidbuild.core.run import activity
from sidbuild.upstream.pull import pull_source
from sidbuild.upstream.verify import read_descriptor, verify_descriptor

if TYPE_CHECKING:
    from pathlib import Path

    from sidbuild.core.paths import Workspace
    from sidbuild.core.run import RunContext

BANNER = "=" * 68


def acquire_sources(
    packages: Sequence[str],
    workspace: Workspace,
    keyring_file: Path,
    run: RunContext,
) -> dict[str, str]:
    """Download and verify every package before anything is built.

    Returns a mapping of package name to its `name_version` identifier, in
    request order. The mapping is only returned once every package has been
    downloaded and verified.
    """
    identifiers: dict[str, str] = {}
    for package in packages:
        activity("fetch", f"Pulling {package}")
        pulled = pull_source(package, workspace.source_dir, log_path=run.log_path(f"pull-{package}"))
        dsc_path = workspace.source_dir / pulled.descriptor_name
        run.log_event(
            {
                "event": "fetch.pulled",
                "package": package,
                "version": pulled.version,
                "descriptor": str(dsc_path),
            }
        )

        verify_descriptor(dsc_path, keyring_file, package, log_path=run.log_path(f"verify-{package}"))
        info = read_descriptor(dsc_path)
        log_phase_event(
            run,
            "fetch",
            f"Verified {dsc_path.name}",
            "fetch.verified",
            package=package,
            descriptor=info.to_dict(),
        )
        identifiers[package] = pulled.identifier
    return identifiers


def build_packages(
    dist: str,
    arch: str,
    identifiers: dict[str, str],
    workspace: Workspace,
    run: RunContext,
    chroot_arch: str | None = None,
) -> list[CollectedFile]:
    """Build each package in order and collect its .deb.

    `arch` names the .deb files to collect; `chroot_arch` is the
    architecture passed to pbuilder-dist (None for the host).

    Stops at the first failure; artifacts already collected stay in the
    output directory.
    """
    collected: list[CollectedFile] = []
    build_result_dir = workspace.build_result_dir(dist, chroot_arch)
    output_dir = workspace.output_dir(dist)

    for package, identifier in identifiers.items():
        activity("build", BANNER)
        activity("build", f"Running pbuilder for package {package}")
        activity("build", BANNER)
        run.log_event({"event": "build.start", "package": package, "identifier": identifier})

        dsc_path = workspace.source_dir / f"{identifier}.dsc"
        build_package(
            workspace,
            dist,
            package,
            dsc_path,
            log_path=run.log_path(f"build-{package}"),
            arch=chroot_arch,
        )

        artifact = collect_artifact(package, identifier, arch, build_result_dir, output_dir)
        collected.append(artifact)
        log_phase_event(
            run,
            "build",
            f"Copied {artifact.copied_path.name} to {output_dir}",
            "build.collected",
            **artifact.to_dict(),
        )
    return collected
