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

"""Generated pbuilder configuration.

Two files are written on every build run:

- `.pbuilderrc`, passed to pbuilder-dist with --configfile so that any
  ~/.pbuilderrc is ignored. It indexes the build-result directory with
  apt-ftparchive, bind-mounts it into the chroot and points pbuilder at the
  hooks directory.
- `D10addsource`, a hook run inside the chroot before dependencies are
  resolved. It adds the bind-mounted build-result directory as a trusted
  APT source, so that packages built earlier in the run satisfy the
  Build-Depends of later ones.

pbuilder-dist does not export the build-result directory, so its absolute
path is written into both files. OTHERMIRROR cannot be used for the local
source because pbuilder-dist ignores it (LP: #1004579, #371221).
"""

from __future__ import annotations

import stat
from dataclasses import dataclass
from pathlib import Path

from sidbuild.core.exceptions import WorkspaceError
from sidbuild.core.paths import Workspace

# Characters that would break out of a double-quoted shell string.
UNSAFE_PATH_CHARS = frozenset('"$`\\\n')

_BUILDRESULT_CHECK = """\
BUILDRESULT="{build_result_dir}"
if [ -d "$BUILDRESULT" ]
then
    echo "INFO: Assuming build result directory located at '$BUILDRESULT'."
else
    echo "ERROR: Build result directory '$BUILDRESULT' does not exist."
    exit 1
fi
"""

_PBUILDERRC_TAIL = """\
( cd "$BUILDRESULT"; apt-ftparchive packages . > "$BUILDRESULT/Packages" )
BINDMOUNTS="$BUILDRESULT"
HOOKDIR="{hooks_dir}"
"""

_HOOK_TAIL = """\
echo "deb [trusted=yes] file:$BUILDRESULT ./" >> /etc/apt/sources.list
apt-get update
"""


@dataclass(frozen=True)
class PbuilderConfigFiles:
    config_file: Path
    hook_file: Path


def _check_path(path: Path) -> str:
    text = str(path)
    if not path.is_absolute():
        raise WorkspaceError(message=f"Path must be absolute: {text}", path=path)
    if UNSAFE_PATH_CHARS.intersection(text):
        raise WorkspaceError(message=f"Path cannot be used in pbuilder configuration: {text!r}", path=path)
    return text


def render_pbuilderrc(build_result_dir: Path, hooks_dir: Path) -> str:
    """Render the .pbuilderrc contents."""
    return _BUILDRESULT_CHECK.format(build_result_dir=_check_path(build_result_dir)) + _PBUILDERRC_TAIL.format(
        hooks_dir=_check_path(hooks_dir)
    )


def render_hook(build_result_dir: Path) -> str:
    """Render the D10addsource hook contents."""
    return "#!/bin/sh\n" + _BUILDRESULT_CHECK.format(build_result_dir=_check_path(build_result_dir)) + _HOOK_TAIL


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def write_pbuilder_config(workspace: Workspace, dist: str, arch: str | None = None) -> PbuilderConfigFiles:
    """Write .pbuilderrc and the D10addsource hook for the `dist` chroot.

    `arch` selects a non-host chroot, as for Workspace.build_result_dir.

    Both files are overwritten unconditionally.

    Raises:
        WorkspaceError: If a file cannot be written.
    """
    build_result_dir = workspace.build_result_dir(dist, arch)
    files = PbuilderConfigFiles(config_file=workspace.config_file, hook_file=workspace.hook_file)
    try:
        files.config_file.write_text(render_pbuilderrc(build_result_dir, workspace.hooks_dir), encoding="utf-8")
        files.hook_file.write_text(render_hook(build_result_dir), encoding="utf-8")
        make_executable(files.hook_file)
    except OSError as e:
        raise WorkspaceError(message=f"Could not write pbuilder configuration: {e}", path=workspace.config_dir) from e
    return files
