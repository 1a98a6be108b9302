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

from pathlib import Path

import typer
from loguru import logger
from platformdirs import user_config_dir

from rv.commands import bundle, context, raw
from rv.context import GlobalConfig, GlobalContext
from rv.core.config.config_loader import ConfigLoader
from rv.core.exceptions import FileSystemError, handle_rv_exception
from rv.core.logging.logging import setup_logger
from rv.core.object_store.object_store import ObjectStore
from rv.runtimeutil import (
    ensure_utf8_output,
    get_log_dir_callback,
    setup_signal_handlers,
    version_callback,
)

# create app
app = typer.Typer(
    help="rv: extract review-ready diffs and sources from a Git repository",
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    add_completion=False,
)

# attach commands
app.command(name="bundle")(bundle.main)
app.command(name="context")(context.main)
app.command(name="raw")(raw.main)

# commands that read plain files and need no repository
NO_REPOSITORY_COMMANDS = {"raw"}

LOCAL_CONFIG_NAME = "rvconfig.toml"
ENV_PREFIX = "rv_"


def setup_config_args(**kwargs):
    config_args = {}

    for key, item in kwargs.items():
        if item is not None:
            config_args[key] = item

    return config_args


@app.callback(invoke_without_command=True)
@handle_rv_exception
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        help="Show version and exit",
    ),
    log_path: bool = typer.Option(
        False,
        "--log-dir",
        "-LD",
        callback=get_log_dir_callback,
        help="Show log path (where logs for rv live) and exit",
    ),
    repo_path: str = typer.Option(
        ".",
        "--repo",
        help="Path inside the git repository to operate on (base directory for rv raw).",
    ),
    custom_config: str | None = typer.Option(
        None,
        "--custom-config",
        help="Path to a custom config file",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    silent: bool | None = typer.Option(
        None,
        "--silent",
        "-s",
        help="Do not output any log text to the console, only the review text.",
    ),
) -> None:
    """
    Global setup callback. Initialize shared objects here.
    """
    # skip --help in subcommands
    if any(arg in ctx.help_option_names for arg in ctx.args):
        return

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    # initial setup of logger, will be updated once the config is known
    setup_logger(ctx.invoked_subcommand, debug=verbose or False, silent=silent or False)

    config_args = setup_config_args(verbose=verbose, silent=silent)

    if ctx.invoked_subcommand in NO_REPOSITORY_COMMANDS:
        store = None
        root = Path(repo_path).resolve()
        if not root.is_dir():
            raise FileSystemError(f"Base path is not a directory: {repo_path}")
    else:
        store = ObjectStore.discover(Path(repo_path))
        root = store.root

    global_config_path = Path(user_config_dir("rv")) / LOCAL_CONFIG_NAME
    custom_config_path = Path(custom_config) if custom_config else None

    config, used_configs, used_defaults = ConfigLoader.get_full_config(
        GlobalConfig,
        config_args,
        root / LOCAL_CONFIG_NAME,
        ENV_PREFIX,
        global_config_path,
        custom_config_path,
    )

    setup_logger(ctx.invoked_subcommand, debug=config.verbose, silent=config.silent)

    logger.debug(f"Used {used_configs} to build global context (defaults used: {used_defaults}).")
    ctx.obj = GlobalContext.from_global_config(config, store, root)


def run_app():
    """Run the application with global exception handling."""
    # force stdout to be utf8 as it can be weird with typers console.print sometimes
    ensure_utf8_output()
    # Set up signal handlers for graceful shutdown
    setup_signal_handlers()
    # launch cli
    app(prog_name="rv")


if __name__ == "__main__":
    run_app()
