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


class LineOrigin(Enum):
    FILE_HEADER = "F"
    HUNK_HEADER = "H"
    CONTEXT = " "
    ADDITION = "+"
    DELETION = "-"
    EOF_NEWLINE = "\\"
    BINARY = "B"

    @property
    def is_content(self) -> bool:
        """Whether a line of this origin proves the file has a textual delta."""
        return self is not LineOrigin.FILE_HEADER


@dataclass(frozen=True)
class DiffLine:
    # old_path is None for additions, new_path is None for deletions.
    old_path: str | None
    new_path: str | None
    origin: LineOrigin
    content: bytes

    @property
    def path(self) -> str:
        """The path this line belongs to: new path, falling back to the old path."""
        path = self.new_path if self.new_path is not None else self.old_path
        if path is None:
            raise ValueError("DiffLine has neither a new nor an old path")
        return path
