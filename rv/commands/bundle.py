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

from rv.context import BundleContext, GlobalContext
from rv.core.data.review_target import BranchAgainst, Staged
from rv.core.exceptions import handle_rv_exception
from rv.core.logging.utils import time_block
from rv.core.serializer.serializer import check_output_selection, render
from rv.core.validation import select_target


def _help_callback(ctx: typer.Context, param, value: bool):
    # Typer/Click help callback: show help and exit when --help is provided
    if not value or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit()


@handle_rv_exception
def main(
    ctx: typer.Context,
    help: bool = typer.Option(
        False,
        "--help",
        callback=_help_callback,
        is_eager=True,
        help="Show this message and exit.",
    ),
    commit: str | None = typer.Option(
        None, "--commit", "-c", help="Commit (hash, ref or revision expression) to review"
    ),
    branch: str | None = typer.Option(
        None, "--branch", "-b", help="Local branch to review"
    ),
    branch_mode: BranchAgainst | None = typer.Option(
        None,
        "--branch-mode",
        case_sensitive=False,
        help="Compare --branch against the current HEAD or against main/master",
    ),
    pr: str | None = typer.Option(
        None, "--pr", "-p", help="GitHub pull request to review (needs the gh CLI)"
    ),
    diffs: bool | None = typer.Option(
        None, "--diffs/--no-diffs", help="Include <diff> blocks"
    ),
    sources: bool | None = typer.Option(
        None, "--sources/--no-sources", help="Include full <source> blocks"
    ),
) -> None:
    """
    Print the changed files of a review target as tagged diff/source blocks.

    Without a selector the staged changes are used, falling back to the
    HEAD commit when nothing is staged.

    Examples:
        # Staged changes (or HEAD)
        rv bundle

        # A single commit, patches only
        rv bundle --commit HEAD~2 --no-sources

        # A feature branch against main/master
        rv bundle --branch feature/login --branch-mode main
    """
    global_context: GlobalContext = ctx.obj
    config = global_context.config

    bundle_context = BundleContext(
        target=select_target(
            commit, branch, pr, branch_mode or config.default_branch_mode
        ),
        include_patches=config.report_diffs if diffs is None else diffs,
        include_sources=config.report_sources if sources is None else sources,
    )
    logger.debug(f"Bundle command started: {bundle_context}")
    check_output_selection(
        bundle_context.include_patches, bundle_context.include_sources
    )

    resolver = global_context.create_resolver(bundle_context.include_patches)
    with time_block("Bundle Command E2E"):
        bundle = resolver.resolve(bundle_context.target)

    if isinstance(bundle_context.target, Staged) and not isinstance(bundle.target, Staged):
        logger.info("[yellow]Staged is empty, switching to HEAD[/yellow]")

    if bundle.is_empty():
        logger.info(f"No changes found for {bundle.target.describe()}")
        return

    for path in bundle.excluded:
        logger.debug(f"Excluded from review: {path}")

    text = render(
        bundle,
        include_patches=bundle_context.include_patches,
        include_sources=bundle_context.include_sources,
    )
    typer.echo(text, nl=False)
