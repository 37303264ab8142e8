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

"""Debian version helpers.

Debian versions have the form [epoch:]upstream-version[-debian-revision].
The epoch orders versions but never appears in file names, so anything
that maps a version onto a file in the archive has to drop it first.
"""

from __future__ import annotations

from debian.debian_support import Version


def parse_debian_version(version_str: str) -> Version:
    """Parse a Debian version string.

    Raises:
        ValueError: If `version_str` is not a valid Debian version.
    """
    return Version(version_str)


def strip_epoch(version: str) -> str:
    """Remove epoch from a version string.

    Args:
        version: A Debian version string possibly with epoch.

    Returns:
        Version string without epoch.
    """
    if ":" in version:
        return version.split(":", 1)[1]
    return version


def package_identifier(package: str, version: str) -> str:
    """Return the `name_version` stem used by source and binary file names.

    >>> package_identifier("xrdp", "1:0.2.17-1")
    'xrdp_0.2.17-1'
    """
    return f"{package}_{strip_epoch(version)}"
