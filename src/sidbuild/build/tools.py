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

"""External tool validation for sidbuild.

Validates presence of the Debian packaging tools a build relies on, so that
a run does not fail halfway through.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from sidbuild.core.exceptions import ToolMissingError


@dataclass
class ToolCheck:
    """Result of checking for required external tools."""

    tools: dict[str, Path | None] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        """Return True if all required tools are available."""
        return len(self.missing) == 0

    def get_path(self, tool: str) -> Path | None:
        """Get the path to a tool, or None if not found."""
        return self.tools.get(tool)


REQUIRED_TOOLS = [
    "rsync",
    "pull-debian-source",
    "dscverify",
    "pbuilder-dist",
    # Run on the host by the generated .pbuilderrc
    "apt-ftparchive",
]

# Package names for apt install command
TOOL_PACKAGES: dict[str, str] = {
    "rsync": "rsync",
    "pull-debian-source": "ubuntu-dev-tools",
    "dscverify": "devscripts",
    "pbuilder-dist": "ubuntu-dev-tools",
    "apt-ftparchive": "apt-utils",
}


def find_tool(name: str) -> Path | None:
    """Find an executable tool in PATH.

    Args:
        name: Name of the tool to find.

    Returns:
        Path to the tool if found, None otherwise.
    """
    path = shutil.which(name)
    if path:
        return Path(path)
    return None


def check_required_tools(tools: list[str] | None = None) -> ToolCheck:
    """Check for required external tools.

    Args:
        tools: Tool names to look for (default: REQUIRED_TOOLS).

    Returns:
        ToolCheck with available tools and list of missing tools.
    """
    result = ToolCheck()
    for tool in tools if tools is not None else REQUIRED_TOOLS:
        path = find_tool(tool)
        result.tools[tool] = path
        if path is None:
            result.missing.append(tool)
    return result


def get_missing_tools_message(missing: list[str]) -> str:
    """Generate a user-friendly message for installing missing tools.

    Args:
        missing: List of missing tool names.

    Returns:
        Multi-line string with installation instructions.
    """
    if not missing:
        return ""

    lines = ["The following required tools are missing:"]
    for tool in missing:
        package = TOOL_PACKAGES.get(tool)
        hint = f"apt install {package}" if package else f"Install {tool}"
        lines.append(f"  - {tool}: {hint}")

    packages = sorted({TOOL_PACKAGES[t] for t in missing if t in TOOL_PACKAGES})
    if packages:
        lines.append("")
        lines.append("Quick install:")
        lines.append(f"  sudo apt install {' '.join(packages)}")

    return "\n".join(lines)


def require_tools(tools: list[str] | None = None) -> ToolCheck:
    """Check for required tools and fail if any is missing.

    Raises:
        ToolMissingError: If one or more tools are not on PATH.
    """
    check = check_required_tools(tools)
    if not check.is_complete():
        raise ToolMissingError(
            message=get_missing_tools_message(check.missing),
            missing=list(check.missing),
        )
    return check


if __name__ == "__main__":  # pragma: no cover - manual smoke test only
    check = check_required_tools()
    for tool, path in check.tools.items():
        print(f"  {tool}: {path if path else 'NOT FOUND'}")
    if check.missing:
        print()
        print(get_missing_tools_message(check.missing))
