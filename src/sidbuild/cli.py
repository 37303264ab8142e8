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

"""CLI application definition for sidbuild."""

from __future__ import annotations

import sys

import typer
from typer import Typer

from sidbuild.build.errors import EXIT_FAILURE, EXIT_SUCCESS
from sidbuild.commands.build import build
from sidbuild.commands.clean import clean

# Exit status typer uses for usage errors in standalone mode.
USAGE_ERROR_EXIT = 2

app: Typer = Typer(
    name="sidbuild",
    help="Build source packages from Debian unstable.",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Build source packages from Debian unstable.

    Sources are downloaded from Debian sid, verified with the current Debian
    keyring and built with pbuilder-dist for the requested Ubuntu or Debian
    release.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(EXIT_SUCCESS)


def help_command(ctx: typer.Context) -> None:
    """Show this help screen."""
    root = ctx.parent if ctx.parent is not None else ctx
    typer.echo(root.get_help())


# Register commands
app.command(name="build")(build)
app.command(name="clean")(clean)
app.command(name="help")(help_command)


def main() -> None:
    """Console entry point.

    The app runs in standalone mode, so typer reports usage errors itself;
    their exit status is changed from 2 to 1. Interrupts are handled by
    the commands, which exit with 130.
    """
    try:
        app()
    except SystemExit as e:
        if e.code == USAGE_ERROR_EXIT:
            sys.exit(EXIT_FAILURE)
        raise
