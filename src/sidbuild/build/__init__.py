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

"""Build module for sidbuild.

Provides the pieces of a pbuilder-dist rebuild: tool checks, keyring sync,
generated pbuilder configuration, chroot management, package builds and
artifact collection.
"""

from sidbuild.build.errors import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    log_phase_event,
    phase_error,
)

__all__ = [
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "EXIT_SUCCESS",
    "log_phase_event",
    "phase_error",
]
