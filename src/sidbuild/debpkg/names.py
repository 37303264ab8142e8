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

"""Debian source package names.

Source package names consist of lowercase letters, digits and the
characters `+`, `-` and `.`. They are at least two characters long and
start with a letter or digit.
"""

from __future__ import annotations

import re

from sidbuild.core.exceptions import InvalidPackageNameError

SOURCE_NAME_PATTERN = re.compile(r"[a-z0-9][a-z0-9+.-]+")


def is_valid_source_name(name: str) -> bool:
    return SOURCE_NAME_PATTERN.fullmatch(name) is not None


def validate_source_names(names: list[str] | tuple[str, ...]) -> list[str]:
    """Return `names` as a list if every one is a valid source package name.

    Raises:
        InvalidPackageNameError: For the first invalid name.
    """
    for name in names:
        if not is_valid_source_name(name):
            raise InvalidPackageNameError(
                message=f"Not a valid Debian source package name: {name!r}",
                package=name,
            )
    return list(names)
