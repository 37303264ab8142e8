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

"""Source package verification with dscverify."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from debian.deb822 import Dsc

from sidbuild.build.process import run_tool
from sidbuild.core.exceptions import VerificationError

VERIFY_COMMAND = "dscverify"


@dataclass
class DescriptorInfo:
    """Fields of a .dsc that are recorded in the run summary."""

    source: str = ""
    version: str = ""
    architecture: str = ""
    binaries: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "version": self.version,
            "architecture": self.architecture,
            "binaries": self.binaries,
        }


def build_verify_command(dsc_path: Path, keyring_file: Path) -> list[str]:
    return [VERIFY_COMMAND, "--keyring", str(keyring_file), str(dsc_path)]


def verify_descriptor(
    dsc_path: Path,
    keyring_file: Path,
    package: str,
    log_path: Path | None = None,
) -> None:
    """Check the signature and checksums of `dsc_path` against `keyring_file`.

    Raises:
        VerificationError: If dscverify fails.
    """
    result = run_tool(build_verify_command(dsc_path, keyring_file), cwd=dsc_path.parent, log_path=log_path)
    if not result.ok:
        raise VerificationError(
            message=f"Failed to verify {dsc_path.name} for package {package}.",
            package=package,
            path=dsc_path,
        )


def read_descriptor(dsc_path: Path) -> DescriptorInfo:
    """Read the identifying fields of a (verified) .dsc file."""
    with dsc_path.open(encoding="utf-8", errors="replace") as f:
        dsc = Dsc(f)
    binaries = [b.strip() for b in dsc.get("Binary", "").split(",") if b.strip()]
    return DescriptorInfo(
        source=dsc.get("Source", ""),
        version=dsc.get("Version", ""),
        architecture=dsc.get("Architecture", ""),
        binaries=binaries,
    )
