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

"""Workspace locking.

A workspace is shared state on disk; only one build or clean may touch it
at a time.
"""

from __future__ import annotations

import contextlib
import fcntl
from collections.abc import Iterator
from pathlib import Path

from sidbuild.core.exceptions import WorkspaceError, WorkspaceLockedError

LOCK_FILENAME = ".sidbuild.lock"


@contextlib.contextmanager
def workspace_lock(root: Path) -> Iterator[Path]:
    """Hold an exclusive lock on the workspace at `root`.

    The lock is taken without waiting. The lock file is left in place when
    the lock is released.

    Raises:
        WorkspaceLockedError: If another process holds the lock.
        WorkspaceError: If the lock file cannot be created.
    """
    lock_path = root / LOCK_FILENAME
    try:
        root.mkdir(parents=True, exist_ok=True)
        fd = lock_path.open("w")
    except OSError as e:
        raise WorkspaceError(message=f"Could not create lock file {lock_path}: {e}", path=lock_path) from e

    try:
        try:
            fcntl.flock(fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            raise WorkspaceLockedError(
                message=f"Workspace {root} is in use by another sidbuild run",
                lock_path=lock_path,
            ) from e
        try:
            yield lock_path
        finally:
            fcntl.flock(fd.fileno(), fcntl.LOCK_UN)
    finally:
        fd.close()
