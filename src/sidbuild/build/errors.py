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

"""Error handling utilities for build command phases.

Every phase reports through the same two channels: a human-readable line
on the terminal and a structured event in the run's events.jsonl.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sidbuild.core.run import activity, error

if TYPE_CHECKING:
    from sidbuild.core.run import RunContext

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def log_phase_event(
    run: RunContext,
    phase: str,
    message: str,
    event_key: str,
    **event_data: Any,
) -> None:
    """Log a phase activity message and structured event together.

    Args:
        run: RunContext for structured logging.
        phase: Phase name for activity logging (e.g., "fetch", "build").
        message: Human-readable message for activity output.
        event_key: Event key for structured logging (e.g., "fetch.verified").
        **event_data: Additional data to include in the log event.
    """
    activity(phase, message)
    run.log_event({"event": event_key, **event_data})


def phase_error(
    run: RunContext,
    phase: str,
    message: str,
    exit_code: int = EXIT_FAILURE,
    *,
    event_key: str | None = None,
    **event_data: Any,
) -> int:
    """Report a fatal phase error and mark the run failed.

    Prints the error on stderr, logs a "{phase}.error" event (or
    `event_key`), writes a failed run summary and returns `exit_code` for
    use in `return phase_error(...)`.
    """
    error(message)
    run.log_event(
        {
            "event": event_key or f"{phase}.error",
            "message": message,
            "exit_code": exit_code,
            **event_data,
        }
    )
    run.write_summary(status="failed", phase=phase, error=message, exit_code=exit_code)
    return exit_code
