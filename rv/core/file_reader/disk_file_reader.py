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

from pathlib import Path


class DiskFileReader:
    """Reads working tree files relative to an explicit repository root."""

    def __init__(self, root: Path):
        self.root = root

    def read(self, path: str) -> str:
        root = self.root.resolve()
        target = (root / path).resolve()
        # symlinks may point anywhere on disk
        if not target.is_relative_to(root):
            raise PermissionError(f"{path} resolves outside {root}")
        # undecodable bytes are replaced rather than failing the whole file
        return target.read_bytes().decode("utf-8", errors="replace")
