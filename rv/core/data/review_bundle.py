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

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rv.core.data.review_target import Raw, ReviewTarget


@dataclass(frozen=True)
class FilePatch:
    path: str
    text: str


@dataclass
class ReviewBundle:
    """
    The changed files of one review target.

    `patches[i]` belongs to `paths[i]`. `patches` is None when the caller
    asked for patches to be suppressed; `paths` is always present because
    the sources section is built from it.
    """

    paths: list[str]
    patches: list[str] | None
    root: Path
    target: "ReviewTarget | Raw | None" = None
    excluded: list[str] = field(default_factory=list)

    def __post_init__(self):
        if len(set(self.paths)) != len(self.paths):
            raise ValueError("ReviewBundle paths must be unique")
        if self.patches is not None and len(self.patches) != len(self.paths):
            raise ValueError(
                f"ReviewBundle has {len(self.paths)} paths but {len(self.patches)} patches"
            )

    @classmethod
    def from_file_patches(
        cls,
        file_patches: list[FilePatch],
        root: Path,
        target: "ReviewTarget | Raw | None" = None,
        include_patches: bool = True,
        excluded: list[str] | None = None,
    ) -> "ReviewBundle":
        return cls(
            paths=[fp.path for fp in file_patches],
            patches=[fp.text for fp in file_patches] if include_patches else None,
            root=root,
            target=target,
            excluded=list(excluded or []),
        )

    def is_empty(self) -> bool:
        return not self.paths

    def file_patches(self) -> list[FilePatch]:
        if self.patches is None:
            return []
        return [FilePatch(p, t) for p, t in zip(self.paths, self.patches, strict=True)]
