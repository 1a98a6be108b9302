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


@dataclass(frozen=True)
class RevisionRef:
    """A resolved commit object id."""

    oid: str

    @property
    def short(self) -> str:
        return self.oid[:7]

    def __str__(self) -> str:
        return self.oid


@dataclass(frozen=True)
class TreeSnapshot:
    """
    The file-tree state of one commit, or of the staging area.

    Exactly one of `oid` (a tree object id) or `is_index` describes the
    snapshot. "No state at all" is modeled by passing None instead of a
    TreeSnapshot.
    """

    oid: str | None = None
    is_index: bool = False

    def __post_init__(self):
        if (self.oid is None) == (not self.is_index):
            raise ValueError("TreeSnapshot needs either a tree oid or is_index=True")

    @classmethod
    def of_tree(cls, oid: str) -> "TreeSnapshot":
        return cls(oid=oid)

    @classmethod
    def index(cls) -> "TreeSnapshot":
        return cls(is_index=True)
