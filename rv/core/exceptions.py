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
Custom exception hierarchy for the rv CLI application.

Resolution failures (missing revisions, root commits, missing base
branches, unusable repositories) abort a review and are reported to the
user. Per-line decode problems and per-file read problems are never raised:
they are rendered as placeholders where they happen.
"""

import functools

import typer
from loguru import logger


class RvError(Exception):
    """
    Base exception for all rv-related errors.

    All rv-specific exceptions should inherit from this class
    to enable consistent error handling throughout the application.
    """

    def __init__(self, message: str, details: str | None = None):
        """
        Initialize an RvError.

        Args:
            message: Main error message for the user
            details: Additional technical details for logging
        """
        self.message = message
        self.details = details
        super().__init__(message)


class GitError(RvError):
    """
    Errors related to git operations.

    Raised when git commands fail or when git repository
    state is invalid for the requested operation.
    """

    pass


class RepositoryUnavailable(GitError):
    """Raised when not inside a working copy, or the repository is bare."""

    pass


class NotFound(GitError):
    """Raised when a revision, branch or commit does not exist."""

    pass


class NoParent(GitError):
    """Raised when a root commit has no parent to diff against."""

    pass


class NoBaseBranch(GitError):
    """Raised when neither `main` nor `master` exists locally."""

    pass


class PullRequestError(GitError):
    """
    Errors while resolving a pull request.

    Raised when the GitHub CLI is missing, the pull request metadata
    cannot be read, or its commits cannot be fetched.
    """

    pass


class ValidationError(RvError):
    """
    Input validation errors.

    Raised when user input fails validation checks,
    such as conflicting target selectors or malformed pull request ids.
    """

    pass


class ConfigurationError(RvError):
    """
    Configuration-related errors.

    Raised when configuration files are invalid, or when the requested
    output combination cannot produce any content.
    """

    pass


class FileSystemError(RvError):
    """
    File system operation errors.

    Raised when file or directory operations fail,
    such as permission issues or missing files.
    """

    pass


# Convenience functions for creating common errors
def git_not_found() -> GitError:
    """Create a GitError for when git is not available."""
    return GitError(
        "Git is not installed or not in PATH",
        "Please install git and ensure it's available in your PATH environment variable",
    )


def not_git_repository(path: str = ".") -> RepositoryUnavailable:
    """Create an error for when not in a git repository."""
    return RepositoryUnavailable(
        f"Not a git repository: {path}",
        "Run 'git init' to initialize a git repository or navigate to an existing repository",
    )


def bare_repository(path: str = ".") -> RepositoryUnavailable:
    """Create an error for a repository without a working directory."""
    return RepositoryUnavailable(
        f"Bare repository has no working directory: {path}",
        "rv reads changed files from the working tree, run it inside a checkout",
    )


def revision_not_found(revision: str) -> NotFound:
    """Create a NotFound error for a revision that matches no commit."""
    return NotFound(
        f"Revision not found: {revision}",
        "Check the commit hash, branch name or revision expression",
    )


def branch_not_found(name: str) -> NotFound:
    """Create a NotFound error for a missing local branch."""
    return NotFound(
        f"Branch not found: {name}",
        "Only local branches can be reviewed, fetch and check out the branch first",
    )


def no_parent(revision: str) -> NoParent:
    """Create a NoParent error for a root commit."""
    return NoParent(
        f"Commit has no parent: {revision}",
        "Root commits have nothing to compare against",
    )


def no_base_branch() -> NoBaseBranch:
    """Create a NoBaseBranch error when neither main nor master exists."""
    return NoBaseBranch(
        "No base branch found: neither 'main' nor 'master' exists",
        "Use --branch-mode current to compare against HEAD instead",
    )


def invalid_pr_id(pr_id: str) -> ValidationError:
    """Create a ValidationError for malformed pull request ids."""
    return ValidationError(
        f"Invalid pull request id: {pr_id}",
        "Use a pull request number, URL or branch name understood by `gh pr view`",
    )


def handle_rv_exception(func):
    """Render RvError subclasses as user-facing messages and exit with code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RvError as e:
            logger.debug(f"{type(e).__name__}: {e.message} details={e.details}")
            typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
            if e.details:
                typer.secho(e.details, dim=True, err=True)
            raise typer.Exit(1)

    return wrapper
