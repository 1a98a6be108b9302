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

from loguru import logger

from rv.core.data.review_bundle import ReviewBundle
from rv.core.data.review_target import (
    Branch,
    BranchAgainst,
    Commit,
    PullRequest,
    ReviewTarget,
    Staged,
)
from rv.core.data.tree_snapshot import RevisionRef, TreeSnapshot
from rv.core.diff.path_filter import lockfile_filter
from rv.core.diff.reassembler import PathPredicate, PatchReassembler
from rv.core.diff.tree_diff import TreeDiffEngine
from rv.core.exceptions import NoParent, no_base_branch
from rv.core.logging.utils import time_block
from rv.core.object_store.object_store import ObjectStore
from rv.core.resolver.pull_request import GhPullRequestResolver, PullRequestResolver

BASE_BRANCH_CANDIDATES = ("main", "master")


class ReviewResolver:
    """
    Resolves a review target to a ReviewBundle.

    Every call recomputes the diff from the object store. The only automatic
    retry is staged -> HEAD when nothing is staged.
    """

    def __init__(
        self,
        store: ObjectStore,
        engine: TreeDiffEngine | None = None,
        pr_resolver: PullRequestResolver | None = None,
        staged_exclude: PathPredicate | None = None,
        include_patches: bool = True,
    ):
        self.store = store
        self.engine = engine or TreeDiffEngine(store)
        self.pr_resolver = pr_resolver or GhPullRequestResolver(store)
        self.staged_exclude = (
            staged_exclude if staged_exclude is not None else lockfile_filter()
        )
        self.include_patches = include_patches

    def resolve(self, target: ReviewTarget) -> ReviewBundle:
        logger.debug(f"Resolving {target!r}")
        match target:
            case Staged():
                return self._resolve_staged()
            case Commit(revision=revision):
                return self._resolve_commit(target, self.store.resolve_revision(revision))
            case Branch(name=name, against=against):
                return self._resolve_branch(target, name, against)
            case PullRequest(pr_id=pr_id):
                return self._resolve_pull_request(target, pr_id)
            case _:
                raise TypeError(f"Unknown review target: {target!r}")

    def _bundle(
        self,
        target: ReviewTarget,
        old: TreeSnapshot | None,
        new: TreeSnapshot | None,
        exclude: PathPredicate | None = None,
    ) -> ReviewBundle:
        reassembler = PatchReassembler(exclude)
        with time_block(f"diff {target.describe()}"):
            file_patches = reassembler.reassemble(self.engine.diff(old, new))

        bundle = ReviewBundle.from_file_patches(
            file_patches,
            root=self.store.root,
            target=target,
            include_patches=self.include_patches,
            excluded=reassembler.excluded,
        )
        logger.debug(
            "{target}: files={count} excluded={excluded}",
            target=target.describe(),
            count=len(bundle.paths),
            excluded=len(bundle.excluded),
        )
        return bundle

    def resolve_staged_only(self) -> ReviewBundle:
        """Staged changes without the HEAD fallback."""
        head = self.store.current_head()
        old = self.store.tree_of(head) if head is not None else None
        new = self.store.staged_index_tree()
        return self._bundle(Staged(), old, new, self.staged_exclude)

    def _resolve_staged(self) -> ReviewBundle:
        bundle = self.resolve_staged_only()
        if not bundle.is_empty():
            return bundle

        logger.debug("Staged is empty, switching to HEAD")
        fallback = Commit("HEAD")
        return self._resolve_commit(fallback, self.store.resolve_revision("HEAD"))

    def _resolve_commit(self, target: Commit, rev: RevisionRef) -> ReviewBundle:
        new = self.store.tree_of(rev)
        try:
            old = self.store.tree_of(self.store.parent_of(rev))
        except NoParent:
            logger.debug(f"{rev.short} is a root commit, diffing against the empty tree")
            old = None
        return self._bundle(target, old, new)

    def base_revision(self, against: BranchAgainst) -> RevisionRef:
        """The commit a branch is compared against."""
        if against == BranchAgainst.CURRENT:
            return self.store.resolve_revision("HEAD")

        for name in BASE_BRANCH_CANDIDATES:
            if self.store.has_branch(name):
                return self.store.resolve_branch(name)
        raise no_base_branch()

    def _resolve_branch(
        self, target: Branch, name: str, against: BranchAgainst
    ) -> ReviewBundle:
        tip = self.store.resolve_branch(name)
        base = self.base_revision(against)
        return self._bundle(target, self.store.tree_of(base), self.store.tree_of(tip))

    def _resolve_pull_request(self, target: PullRequest, pr_id: str) -> ReviewBundle:
        base_sha, head_sha = self.pr_resolver.resolve(pr_id)
        base = self.store.resolve_revision(base_sha)
        head = self.store.resolve_revision(head_sha)
        return self._bundle(target, self.store.tree_of(base), self.store.tree_of(head))
