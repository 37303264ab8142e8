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

"""TTY-aware spinner for activity indication.

Uses Rich spinners when stdout is a TTY, falls back to plain text otherwise.
"""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Iterator

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


def is_tty() -> bool:
    """Return True if stdout is a TTY."""
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover
        return False


@contextlib.contextmanager
def activity_spinner(phase: str, description: str, disable: bool = False) -> Iterator[None]:
    """Context manager that shows a spinner while the wrapped block runs.

    Args:
        phase: Short phase label (e.g., "keyring").
        description: Human-readable description of current activity.
        disable: Force disable spinner even on TTY.

    When stdout is not a TTY or disable is True, the activity line is printed
    once without animation.
    """
    text = f"[{phase}] {description}"

    if disable or not is_tty():
        print(text, file=sys.stdout, flush=True)
        yield
        return

    console = Console(file=sys.stdout, force_terminal=True)
    spinner = Spinner("dots", text=text)
    with Live(spinner, console=console, refresh_per_second=12, transient=True):
        yield

    print(text, file=sys.stdout, flush=True)
