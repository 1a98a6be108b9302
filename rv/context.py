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

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, field_validator

from rv.core.data.review_target import BranchAgainst, ReviewTarget
from rv.core.diff.path_filter import DEFAULT_LOCKFILE_PATTERNS, lockfile_filter
from rv.core.diff.tree_diff import TreeDiffEngine
from rv.core.exceptions import not_git_repository
from rv.core.object_store.object_store import ObjectStore
from rv.core.resolver.pull_request import GhPullRequestResolver
from rv.core.resolver.resolver import ReviewResolver


class GlobalConfig(BaseModel):
    report_diffs: bool = True
    report_sources: bool = True
    default_branch_mode: BranchAgainst = BranchAgainst.MAIN
    project_guidelines_files: list[str] = [".rv/guidelines.md"]
    project_context_files: list[str] = ["README.md", ".rv/context.md"]
    lockfile_patterns: list[str] = list(DEFAULT_LOCKFILE_PATTERNS)
    find_renames: bool = False
    pr_timeout_seconds: float = 120
    verbose: bool = False
    silent: bool = False

    @field_validator(
        "project_guidelines_files",
        "project_context_files",
        "lockfile_patterns",
        mode="before",
    )
    @classmethod
    def split_comma_list(cls, value):
        # environment variables arrive as "a,b,c"
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("default_branch_mode", mode="before")
    @classmethod
    def lower_branch_mode(cls, value):
        if isinstance(value, str):
            return value.lower()
        return value


@dataclass(frozen=True)
class GlobalContext:
    repo_path: Path
    # None when the command runs without a repository (rv raw)
    store: ObjectStore | None
    config: GlobalConfig

    @classmethod
    def from_global_config(
        cls, config: GlobalConfig, store: ObjectStore | None, root: Path | None = None
    ):
        if root is None:
            root = store.root
        return GlobalContext(root, store, config)

    def create_resolver(self, include_patches: bool | None = None) -> ReviewResolver:
        if self.store is None:
            raise not_git_repository(str(self.repo_path))
        if include_patches is None:
            include_patches = self.config.report_diffs

        return ReviewResolver(
            self.store,
            engine=TreeDiffEngine(self.store, find_renames=self.config.find_renames),
            pr_resolver=GhPullRequestResolver(
                self.store, timeout=self.config.pr_timeout_seconds
            ),
            staged_exclude=lockfile_filter(self.config.lockfile_patterns),
            include_patches=include_patches,
        )


@dataclass(frozen=True)
class BundleContext:
    target: ReviewTarget
    include_patches: bool = True
    include_sources: bool = True
