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

import re
from pathlib import Path

from loguru import logger

from rv.core.data.tree_snapshot import RevisionRef, TreeSnapshot
from rv.core.exceptions import (
    FileSystemError,
    bare_repository,
    branch_not_found,
    no_parent,
    not_git_repository,
    revision_not_found,
)
from rv.core.git_interface.interface import GitInterface
from rv.core.git_interface.SubprocessGitInterface import SubprocessGitInterface

_HEX_RE = re.compile(r"^[0-9a-fA-F]{4,64}$")


class ObjectStore:
    """
    Read-only access to a repository's commits and trees.

    All lookups go through `git rev-parse` / `git cat-file`, so revision
    syntax is exactly git's. Nothing is written to the object database.
    """

    def __init__(self, git: GitInterface, root: Path):
        self.git = git
        self.root = root
        self._empty_tree: str | None = None

    @classmethod
    def discover(cls, path: str | Path = ".") -> "ObjectStore":
        """Find the working copy containing `path`, searching parent directories."""
        start = Path(path).resolve()
        if not start.is_dir():
            raise FileSystemError(
                f"Repository path is not a directory: {start}",
                "Pass an existing directory inside a git working copy to --repo",
            )
        probe = SubprocessGitInterface(start)

        is_bare = probe.run_git_text_out(["rev-parse", "--is-bare-repository"])
        if is_bare is None:
            raise not_git_repository(str(start))
        if is_bare.strip() == "true":
            raise bare_repository(str(start))

        toplevel = probe.run_git_text_out(["rev-parse", "--show-toplevel"])
        if not toplevel or not toplevel.strip():
            # inside .git, or otherwise outside a working tree
            raise bare_repository(str(start))

        root = Path(toplevel.strip())
        logger.debug(f"Discovered repository root {root} from {start}")
        return cls(SubprocessGitInterface(root), root)

    def _rev_parse_commit(self, expression: str) -> str | None:
        out = self.git.run_git_text_out(
            ["rev-parse", "--verify", "--quiet", f"{expression}^{{commit}}"]
        )
        if out is None:
            return None
        return out.strip() or None

    def _lookup_literal(self, text: str) -> str | None:
        if not _HEX_RE.match(text):
            return None
        out = self.git.run_git_text_out(["cat-file", "-t", text])
        if out is None or out.strip() != "commit":
            return None
        # expand short hashes to the full object id
        return self._rev_parse_commit(text)

    def resolve_revision(self, text: str) -> RevisionRef:
        """Resolve a hash, short hash, ref name or revision expression to a commit."""
        text = text.strip()
        # a leading dash would be read as an option by rev-parse
        if not text or text.startswith("-"):
            raise revision_not_found(text)

        oid = self._lookup_literal(text)
        if oid is None:
            oid = self._rev_parse_commit(text)
        if oid is None:
            raise revision_not_found(text)

        logger.debug(f"Resolved revision {text} -> {oid}")
        return RevisionRef(oid)

    def _branch_ref(self, name: str) -> str | None:
        """`refs/heads/<name>` if that exact ref exists; revision syntax is not expanded."""
        ref = f"refs/heads/{name}"
        result = self.git.run_git_text(["show-ref", "--verify", "--quiet", ref])
        return ref if result is not None else None

    def resolve_branch(self, name: str) -> RevisionRef:
        """Resolve a local branch name to its tip commit."""
        ref = self._branch_ref(name)
        oid = self._rev_parse_commit(ref) if ref is not None else None
        if oid is None:
            raise branch_not_found(name)
        logger.debug(f"Resolved branch {name} -> {oid}")
        return RevisionRef(oid)

    def has_branch(self, name: str) -> bool:
        return self._branch_ref(name) is not None

    def tree_of(self, rev: RevisionRef) -> TreeSnapshot:
        out = self.git.run_git_text_out(["rev-parse", "--verify", f"{rev.oid}^{{tree}}"])
        if out is None or not out.strip():
            raise revision_not_found(rev.oid)
        return TreeSnapshot.of_tree(out.strip())

    def parent_of(self, rev: RevisionRef) -> RevisionRef:
        """First parent of `rev`; raises NoParent for a root commit."""
        oid = self._rev_parse_commit(f"{rev.oid}^1")
        if oid is None:
            raise no_parent(rev.oid)
        return RevisionRef(oid)

    def current_head(self) -> RevisionRef | None:
        """HEAD's commit, or None when HEAD is unborn."""
        oid = self._rev_parse_commit("HEAD")
        if oid is None:
            logger.debug("HEAD is unborn, treating the previous tree as empty")
            return None
        return RevisionRef(oid)

    def staged_index_tree(self) -> TreeSnapshot:
        return TreeSnapshot.index()

    def empty_tree_id(self) -> str:
        """Object id of the empty tree in this repository's hash algorithm."""
        if self._empty_tree is None:
            # no -w: the object is hashed, never written
            out = self.git.run_git_text_out(
                ["hash-object", "-t", "tree", "--stdin"], input_text=""
            )
            if out is None or not out.strip():
                raise not_git_repository(str(self.root))
            self._empty_tree = out.strip()
        return self._empty_tree

    def commit_exists(self, sha: str) -> bool:
        result = self.git.run_git_text(["cat-file", "-e", f"{sha}^{{commit}}"])
        return result is not None
