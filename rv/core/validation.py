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

from rv.core.data.review_target import (
    Branch,
    BranchAgainst,
    Commit,
    PullRequest,
    ReviewTarget,
    Staged,
)
from rv.core.exceptions import ValidationError, invalid_pr_id

_PR_ID_RE = re.compile(r"^(#?\d+|https?://\S+|[\w./-]+)$")


def validate_pr_id(pr_id: str) -> str:
    pr_id = pr_id.strip()
    if not pr_id or pr_id.startswith("-") or not _PR_ID_RE.match(pr_id):
        raise invalid_pr_id(pr_id)
    return pr_id.lstrip("#")


def select_target(
    commit: str | None,
    branch: str | None,
    pr: str | None,
    branch_mode: BranchAgainst,
) -> ReviewTarget:
    """Build the review target from mutually exclusive selectors; staged is the default."""
    selected = [name for name, value in (("--commit", commit), ("--branch", branch), ("--pr", pr)) if value]
    if len(selected) > 1:
        raise ValidationError(
            f"You can enable only one parameter between --commit, --branch or --pr (got {', '.join(selected)})"
        )

    if commit:
        return Commit(commit.strip())
    if branch:
        return Branch(branch.strip(), branch_mode)
    if pr:
        return PullRequest(validate_pr_id(pr))
    return Staged()
