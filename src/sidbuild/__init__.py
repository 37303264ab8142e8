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

"""Rebuild Debian unstable source packages for other Debian and Ubuntu releases."""
