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
from rv.core.file_reader.disk_file_reader import DiskFileReader
from rv.core.serializer.serializer import render_project_context


@handle_rv_exception
def main(ctx: typer.Context) -> None:
    """
    Print the project guideline and context files as tagged blocks.

    The file lists come from project_guidelines_files and
    project_context_files; files that do not exist are skipped.
    """
    global_context: GlobalContext = ctx.obj
    config = global_context.config

    text = render_project_context(
        config.project_guidelines_files,
        config.project_context_files,
        DiskFileReader(global_context.repo_path),
    )
    if not text:
        logger.info("No project guideline or context files found")
        return

    typer.echo(text, nl=False)
