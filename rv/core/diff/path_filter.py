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

from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import PurePosixPath

DEFAULT_LOCKFILE_PATTERNS = (
    "Cargo.lock",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
)


class BasenameFilter:
    """Path predicate matching a file's basename against glob patterns."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = tuple(patterns)

    def __call__(self, path: str) -> bool:
        name = PurePosixPath(path).name
        return any(fnmatchcase(name, pattern) for pattern in self.patterns)

    def __repr__(self) -> str:
        return f"BasenameFilter({list(self.patterns)!r})"


def lockfile_filter(patterns: Iterable[str] = DEFAULT_LOCKFILE_PATTERNS) -> BasenameFilter:
    return BasenameFilter(patterns)
