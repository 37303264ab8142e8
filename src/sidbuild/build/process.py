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

"""Running external tools.

Every tool sidbuild drives is run to completion with its stdout and stderr
merged. The output is echoed to the terminal as it arrives, written to a
per-invocation log file, and returned to the caller for inspection.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Exit status reported when the program could not be started at all.
EXIT_NOT_EXECUTABLE = 127


@dataclass
class ToolResult:
    """Result of one external tool invocation."""

    command: list[str]
    returncode: int
    output: str = ""
    log_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_tool(
    cmd: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    log_path: Path | None = None,
    echo: bool = True,
) -> ToolResult:
    """Run `cmd`, wait for it to finish and return its merged output.

    Args:
        cmd: Command and arguments.
        cwd: Working directory for the command.
        env: Extra environment variables, added to the current environment.
        log_path: File that receives the command line and its output.
        echo: Whether to copy the output to stdout while it runs.

    Returns:
        ToolResult with the exit status and the captured output. A command
        that cannot be started is reported with exit status 127.
    """
    command = [str(c) for c in cmd]
    full_env = {**os.environ, **env} if env else None
    logger.debug("Running %s (cwd=%s)", shlex.join(command), cwd)

    chunks: list[str] = []
    with contextlib.ExitStack() as stack:
        log_f = None
        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            log_f = stack.enter_context(log_path.open("w", encoding="utf-8"))
            log_f.write(f"$ {shlex.join(command)}\n")

        try:
            proc = stack.enter_context(
                subprocess.Popen(
                    command,
                    cwd=cwd,
                    env=full_env,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    errors="replace",
                )
            )
        except OSError as e:
            message = f"{command[0]}: {e}\n"
            if log_f is not None:
                log_f.write(message)
            return ToolResult(command=command, returncode=EXIT_NOT_EXECUTABLE, output=message, log_path=log_path)

        assert proc.stdout is not None
        for line in proc.stdout:
            chunks.append(line)
            if echo:
                sys.stdout.write(line)
                sys.stdout.flush()
            if log_f is not None:
                log_f.write(line)
        returncode = proc.wait()

    logger.debug("%s exited with %d", command[0], returncode)
    return ToolResult(command=command, returncode=returncode, output="".join(chunks), log_path=log_path)
