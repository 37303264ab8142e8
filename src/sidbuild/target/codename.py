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

"""Distribution codename validation.

No list of known releases is kept; a codename is accepted when it looks like
one, i.e. it is one or more lowercase ASCII letters.
"""

from __future__ import annotations

import re

from sidbuild.core.exceptions import InvalidCodenameError

CODENAME_PATTERN = re.compile(r"[a-z]+")


def is_valid_codename(codename: str) -> bool:
    return CODENAME_PATTERN.fullmatch(codename) is not None


def validate_codename(codename: str) -> str:
    """Return `codename` unchanged if valid.

    Raises:
        InvalidCodenameError: If `codename` is not all lowercase letters.
    """
    if not is_valid_codename(codename):
        raise InvalidCodenameError(
            message=f"Not a valid Ubuntu or Debian codename: {codename!r}",
            codename=codename,
        )
    return codename
