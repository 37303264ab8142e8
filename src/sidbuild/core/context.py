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

"""Request objects passed from the CLI layer to command implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class BuildRequest:
    """Arguments of a `sidbuild build` invocation.

    Attributes:
        dist: Target distribution codename (e.g., "focal").
        packages: Source packages to build, in build order.
        workspace: Workspace root override, or None to use the config.
        arch: Architecture override, or "" to use the config.
        spinner: Whether to show spinners on a TTY.
    """

    dist: str
    packages: tuple[str, ...] = field(default_factory=tuple)
    workspace: Path | None = None
    arch: str = ""
    spinner: bool = True


@dataclass(frozen=True)
class CleanRequest:
    """Arguments of a `sidbuild clean` invocation."""

    dist: str | None = None
    workspace: Path | None = None
    dry_run: bool = False
