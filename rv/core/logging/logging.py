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

"""
Logging configuration for the rv CLI application.

Console output goes to stderr so that stdout only ever carries the rendered
review text, which is meant to be piped into other tools.
"""

from datetime import datetime
from pathlib import Path

from loguru import logger
from platformdirs import user_log_path
from rich.console import Console

LOG_DIR = user_log_path(appname="rv")


def get_log_directory() -> Path:
    """Get the directory where log files are stored."""
    return LOG_DIR


def setup_logger(command_name: str, debug: bool = False, silent: bool = False) -> Path | None:
    """
    Set up logging for a command.

    Args:
        command_name: Name of the command being executed
        debug: Show debug messages on the console
        silent: Show nothing on the console

    Returns:
        Path to the log file, or None if the log directory is not writable
    """
    # Clear existing sinks to avoid duplicates
    logger.remove()

    console = Console(stderr=True)

    def console_sink(message):
        text = message.record["message"].rstrip("\n")
        console.print(text)

    if not silent:
        logger.add(
            console_sink,
            level="DEBUG" if debug else "INFO",
            format="{message}",
            catch=True,
        )

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    logfile = LOG_DIR / f"{command_name}_{timestamp}.log"
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.debug(f"Log directory {LOG_DIR} unavailable: {e}")
        return None

    logger.add(
        logfile,
        level="DEBUG",
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>",
        rotation="10 MB",
        retention="14 days",
        catch=True,
    )

    logger.bind(command=command_name, logfile=str(logfile)).debug("Logger initialized")
    return logfile
