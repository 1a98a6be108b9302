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
from enum import Enum


class BranchAgainst(str, Enum):
    """What a branch is compared against."""

    CURRENT = "current"
    MAIN = "main"


@dataclass(frozen=True)
class Staged:
    def describe(self) -> str:
        return "staged changes"


@dataclass(frozen=True)
class Commit:
    revision: str

    def describe(self) -> str:
        return f"commit {self.revision}"


@dataclass(frozen=True)
class Branch:
    name: str
    against: BranchAgainst = BranchAgainst.MAIN

    def describe(self) -> str:
        return f"branch {self.name} against {self.against.value}"


@dataclass(frozen=True)
class PullRequest:
    pr_id: str

    def describe(self) -> str:
        return f"pull request {self.pr_id}"


ReviewTarget = Staged | Commit | Branch | PullRequest


@dataclass(frozen=True)
class Raw:
    """Files read straight from disk, without git."""

    path: str
    recursive: bool = False

    def describe(self) -> str:
        suffix = " (recursive)" if self.recursive else ""
        return f"files in {self.path}{suffix}"
