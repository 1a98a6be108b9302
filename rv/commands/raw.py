# -----------------------------------------------------------------------------
# rv - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of rv.
#
# rv is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------

import typer
from loguru import logger

from rv.context import GlobalContext
from rv.core.exceptions import handle_rv_exception
from rv.core.raw.collector import raw_bundle
from rv.core.serializer.serializer import render


@handle_rv_exception
def main(
    ctx: typer.Context,
    file: str | None = typer.Option(
        None, "--file", "-f", help="Single file to print as a <source> block"
    ),
    directory: str | None = typer.Option(
        None, "--dir", "-d", help="Directory whose files are printed as <source> blocks"
    ),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Include files in subdirectories of --dir"
    ),
) -> None:
    """
    Print files from disk as tagged source blocks, without git.

    Works outside a repository; relative paths are taken from --repo.

    Examples:
        rv raw --file src/app.py

        rv raw --dir src --recursive
    """
    global_context: GlobalContext = ctx.obj

    bundle = raw_bundle(global_context.repo_path, file, directory, recursive)
    if bundle.is_empty():
        logger.info(f"No files found in {bundle.target.describe()}")
        return

    typer.echo(render(bundle, include_patches=False), nl=False)
