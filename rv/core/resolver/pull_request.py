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
Pull request lookup through the GitHub CLI.

`gh pr view` supplies the base and head commits; missing commits are fetched
from `origin` (the base branch by name, the head through GitHub's
`pull/<n>/head` ref) before they are handed back to the resolver.
"""

import json
import subprocess
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rv.core.exceptions import PullRequestError, invalid_pr_id
from rv.core.object_store.object_store import ObjectStore


class PullRequestResolver(Protocol):
    """Turns a pull request id into a locally available (base, head) commit pair."""

    def resolve(self, pr_id: str) -> tuple[str, str]: ...


class PrViewMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number: int
    base_ref_name: str = Field(alias="baseRefName")
    base_ref_oid: str = Field(alias="baseRefOid")
    head_ref_oid: str = Field(alias="headRefOid")


class GhPullRequestResolver:
    def __init__(self, store: ObjectStore, timeout: float = 120, remote: str = "origin"):
        self.store = store
        self.timeout = timeout
        self.remote = remote

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        logger.debug(f"Running command: {' '.join(cmd)} cwd={self.store.root}")
        try:
            result = subprocess.run(
                cmd,
                text=True,
                encoding="utf-8",
                errors="replace",
                capture_output=True,
                cwd=str(self.store.root),
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise PullRequestError(
                f"{cmd[0]} is not installed or not in PATH",
                "Install the GitHub CLI (https://cli.github.com) and run `gh auth login`",
            ) from e
        except subprocess.TimeoutExpired as e:
            raise PullRequestError(
                f"`{' '.join(cmd)}` timed out after {self.timeout} seconds"
            ) from e

        logger.debug(f"{cmd[0]} returncode: {result.returncode}")
        if result.stderr:
            logger.debug(f"{cmd[0]} stderr: {result.stderr[:2000]}")
        return result

    def ensure_gh_available(self) -> None:
        result = self._run(["gh", "--version"])
        if result.returncode != 0:
            raise PullRequestError("GitHub CLI (gh) is not installed or not in PATH")

    def fetch_metadata(self, pr_id: str) -> PrViewMetadata:
        result = self._run(
            ["gh", "pr", "view", pr_id, "--json", "number,baseRefName,baseRefOid,headRefOid"]
        )
        if result.returncode != 0:
            raise PullRequestError(
                f"`gh pr view {pr_id}` failed", result.stderr.strip() or None
            )
        try:
            return PrViewMetadata.model_validate(json.loads(result.stdout))
        except (json.JSONDecodeError, ValidationError) as e:
            raise PullRequestError(
                "Unable to parse `gh pr view` JSON payload", str(e)
            ) from e

    def _ensure_commit(self, sha: str, refspec: str, what: str) -> None:
        if self.store.commit_exists(sha):
            return

        logger.info(f"Fetching {what} from {self.remote}: {refspec}")
        result = self._run(["git", "fetch", self.remote, refspec])
        if result.returncode != 0:
            raise PullRequestError(
                f"`git fetch {self.remote} {refspec}` failed while preparing PR diff",
                result.stderr.strip() or None,
            )

        if not self.store.commit_exists(sha):
            raise PullRequestError(f"{what.capitalize()} commit {sha} is still missing after fetch")

    def resolve(self, pr_id: str) -> tuple[str, str]:
        pr_id = pr_id.strip()
        if not pr_id or pr_id.startswith("-"):
            raise invalid_pr_id(pr_id)

        self.ensure_gh_available()
        metadata = self.fetch_metadata(pr_id)
        base = metadata.base_ref_oid.strip()
        head = metadata.head_ref_oid.strip()
        logger.debug(
            f"PR #{metadata.number}: base {metadata.base_ref_name}@{base} head {head}"
        )

        self._ensure_commit(base, metadata.base_ref_name, "base")
        self._ensure_commit(
            head,
            f"pull/{metadata.number}/head:refs/rv/pr/{metadata.number}",
            "pull request head",
        )
        return base, head
