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

"""Clean command for sidbuild.

`clean` removes the whole pbuilder working directory. `clean DIST` removes
only the files pbuilder-dist keeps for one distribution:
- the chroot base tarball
- the build result directory
- pbuilder-dist's default result directory

for the host chroot and for any chroot built for another architecture.

Downloaded sources and the built packages in <DIST>-deb-packages are kept.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import typer

from sidbuild.build.errors import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from sidbuild.core.config import load_config
from sidbuild.core.context import CleanRequest
from sidbuild.core.exceptions import NoDistributionFilesError, SidbuildError
from sidbuild.core.lock import workspace_lock
from sidbuild.core.paths import Workspace
from sidbuild.core.run import activity, error
from sidbuild.target.codename import validate_codename


def format_size(size_bytes: int) -> str:
    """Format a size in bytes as a human-readable string."""
    if size_bytes >= 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
    elif size_bytes >= 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} bytes"


def clean(
    dist: str | None = typer.Argument(None, help="Only delete the files for this distribution"),
    workspace: Path | None = typer.Option(None, "-w", "--workspace", help="Workspace directory (default: from config)"),
    dry_run: bool = typer.Option(False, "-n", "--dry-run", help="Show what would be removed without removing"),
) -> None:
    """Delete temporary pbuilder files, for all distributions or only DIST.

    Examples:
        sidbuild clean              # Remove the whole pbuilder working directory
        sidbuild clean focal        # Remove only the focal chroot and build results
        sidbuild clean -n focal     # Preview what would be removed
    """
    sys.exit(run_clean(CleanRequest(dist=dist, workspace=workspace, dry_run=dry_run)))


def run_clean(request: CleanRequest) -> int:
    """Run a clean and return its exit code (without sys.exit)."""
    try:
        if request.dist is not None:
            validate_codename(request.dist)
    except SidbuildError as e:
        error(e.message)
        return e.exit_code

    cfg = load_config()
    ws = Workspace.from_config(cfg, request.workspace)
    try:
        return _run_clean(ws, request)
    except KeyboardInterrupt:
        error("Interrupted")
        return EXIT_INTERRUPTED


def _run_clean(ws: Workspace, request: CleanRequest) -> int:
    try:
        targets = _clean_targets(ws, request.dist)
    except SidbuildError as e:
        error(e.message)
        return e.exit_code

    if not targets:
        activity("clean", "Nothing to clean")
        return EXIT_SUCCESS

    sizes = {path: _get_size(path) for path in targets}
    for path in targets:
        activity("clean", f"  {path} ({format_size(sizes[path])})")

    if request.dry_run:
        activity("clean", "(dry-run) No files removed")
        return EXIT_SUCCESS

    try:
        with workspace_lock(ws.root):
            for path in targets:
                _remove(path)
    except SidbuildError as e:
        error(e.message)
        return e.exit_code
    except OSError as e:
        error(f"Could not remove {e.filename}: {e.strerror}")
        return EXIT_FAILURE

    activity("clean", f"Cleaned {format_size(sum(sizes.values()))}")
    return EXIT_SUCCESS


def _clean_targets(ws: Workspace, dist: str | None) -> list[Path]:
    """Return the existing paths a clean would remove.

    Raises:
        NoDistributionFilesError: If `dist` has no base tarball on any
            architecture.
    """
    if dist is None:
        return [ws.pbuilder_dir] if ws.pbuilder_dir.exists() else []

    if not ws.has_chroot(dist):
        raise NoDistributionFilesError(message=f"No files for distribution {dist}.", dist=dist)
    return [p for p in ws.dist_artifacts(dist) if p.exists() or p.is_symlink()]


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def _get_size(path: Path) -> int:
    """Get total size of a file or directory in bytes."""
    if path.is_file():
        return path.stat().st_size

    total = 0
    try:
        for file_path in path.rglob("*"):
            try:
                if file_path.is_file():
                    total += file_path.stat().st_size
            except OSError:
                continue
    except OSError:
        pass
    return total
