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

"""Run context manager for sidbuild CLI runs.

Each run gets its own directory under the configured runs root holding a
JSONL event log, the output of every external tool invoked during the run,
and a summary.json written when the run ends.
"""

from __future__ import annotations

import contextlib
import datetime
import json
import uuid
from pathlib import Path
from typing import Any

import typer

from sidbuild.core.config import load_config


class RunContext:
    """Context manager that creates a run directory and records events.

    Usage:
        with RunContext("build") as run:
            run.log_event({"event": "fetch.start"})
            ...
    """

    def __init__(self, command: str, runs_root: Path | None = None) -> None:
        self.command = command
        if runs_root is None:
            cfg = load_config()
            runs_root = Path(cfg["paths"]["runs_root"])
        self.runs_root = runs_root.expanduser().resolve()
        now_utc = datetime.datetime.now(datetime.UTC)
        self.run_id = now_utc.strftime("%Y%m%dT%H%M%SZ") + f"-{command}-" + uuid.uuid4().hex[:8]
        self.run_path = self.runs_root / self.run_id
        self.logs_path = self.run_path / "logs"
        self.events_file: Any | None = None
        self.summary: dict[str, Any] = {"command": command, "start_utc": now_utc.isoformat()}

    def __enter__(self) -> RunContext:
        self.logs_path.mkdir(parents=True, exist_ok=True)
        self.events_file = (self.logs_path / "events.jsonl").open("a", encoding="utf-8")
        self.log_event({"event": "run.start", "run_id": self.run_id})
        return self

    def log_path(self, name: str) -> Path:
        """Return the path of the log file for one external tool invocation."""
        return self.logs_path / f"{name}.log"

    def log_event(self, event: dict[str, Any]) -> None:
        """Write a JSONL event with a timestamp."""
        if self.events_file is None:  # pragma: no cover
            return
        payload = {"timestamp": datetime.datetime.now(datetime.UTC).isoformat(), **event}
        self.events_file.write(json.dumps(payload, default=str) + "\n")
        self.events_file.flush()

    def write_summary(self, **kwargs: Any) -> None:
        self.summary.update(kwargs)
        (self.run_path / "summary.json").write_text(json.dumps(self.summary, indent=2, default=str))

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> bool | None:
        # A phase error may already have marked the run as failed.
        status = self.summary.get("status", "success")
        if exc is not None:
            status = "failed"
            self.summary["error"] = str(exc) or exc.__class__.__name__

        self.summary["end_utc"] = datetime.datetime.now(datetime.UTC).isoformat()
        self.summary["status"] = status
        self.write_summary()

        with contextlib.suppress(Exception):
            self.log_event({"event": "run.end", "status": status})

        if self.events_file:
            self.events_file.close()
            self.events_file = None

        if status != "success":
            with contextlib.suppress(Exception):
                typer.echo(f"[report] Logs: {self.run_path}", err=True)

        return None


def activity(phase: str, description: str) -> None:
    """Print a progress line for the given phase."""
    typer.echo(f"[{phase}] {description}")


def error(message: str) -> None:
    """Print an error line to stderr."""
    typer.echo(f"ERROR: {message}", err=True)
