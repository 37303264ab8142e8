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

"""Debian keyring synchronization."""

from __future__ import annotations

from pathlib import Path

from sidbuild.build.process import run_tool
from sidbuild.core.exceptions import KeyringSyncError

DEFAULT_KEYRING_SOURCE = "keyring.debian.org::keyrings/keyrings/debian-keyring.gpg"


def build_rsync_command(source: str, keyring_dir: Path) -> list[str]:
    return ["rsync", "-az", source, str(keyring_dir)]


def sync_keyring(
    keyring_dir: Path,
    source: str = DEFAULT_KEYRING_SOURCE,
    log_path: Path | None = None,
) -> None:
    """Copy the current Debian keyring into `keyring_dir`.

    Raises:
        KeyringSyncError: If rsync fails.
    """
    result = run_tool(build_rsync_command(source, keyring_dir), log_path=log_path, echo=False)
    if not result.ok:
        detail = result.output.strip().splitlines()[-1] if result.output.strip() else f"rsync exited with {result.returncode}"
        raise KeyringSyncError(message=f"Could not download Debian keyring: {detail}")
