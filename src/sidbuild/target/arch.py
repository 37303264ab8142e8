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

"""Architecture detection and mapping utilities."""

from __future__ import annotations

import platform

from sidbuild.core.exceptions import ConfigError

ARCH_ALL = "all"

# Mapping from platform.machine() values to Debian architecture names.
MACHINE_TO_DEB_ARCH: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "armv6l": "armel",
    "i386": "i386",
    "i686": "i386",
    "ppc64le": "ppc64el",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def get_host_arch() -> str:
    """Return the Debian architecture name for the current host.

    Raises:
        ValueError: If the host architecture is unknown.
    """
    machine = platform.machine()
    deb_arch = MACHINE_TO_DEB_ARCH.get(machine)
    if deb_arch is None:
        raise ValueError(f"Unknown host architecture: {machine}")
    return deb_arch


def resolve_arch(arch: str) -> str:
    """Resolve a configured architecture, replacing 'host' with the host arch.

    Raises:
        ConfigError: If 'host' is requested on an unknown machine type, or
            the value is empty.
    """
    arch = arch.strip()
    if not arch:
        raise ConfigError(message="No build architecture configured")
    if arch.lower() != "host":
        return arch
    try:
        return get_host_arch()
    except ValueError as e:
        raise ConfigError(message=f"{e}; set build.arch or pass --arch") from e


def chroot_arch(arch: str) -> str | None:
    """Return the architecture to pass to pbuilder-dist for `arch`.

    None means the host chroot, which is used for the host architecture and
    for architecture-independent packages. On an unknown host every
    explicit architecture is treated as foreign.
    """
    if arch == ARCH_ALL:
        return None
    try:
        host = get_host_arch()
    except ValueError:
        return arch
    return None if arch == host else arch


if __name__ == "__main__":
    print(f"Host arch: {get_host_arch()}")
